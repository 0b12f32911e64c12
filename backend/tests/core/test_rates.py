"""Rate calculator - volume tier lookup and additive bonus blending.

Tests cover:
    - Highest-qualifying-threshold tier selection
    - Base rate below the smallest threshold, top tier above the largest
    - base + base * tier / 10**precision with tier rates in precision units
    - Public sale re-basing of phase indexes
    - Lock-up extension by tier
"""

from decimal import Decimal
from fractions import Fraction

import pytest

from sale_engine.core.allocation import token_value
from sale_engine.core.errors import InvalidArgumentError
from sale_engine.core.rates import (
    lockup_period, presale_rate, publicsale_rate, rate, volume_multiplier,
)
from sale_engine.core.sale_types import Phase, SaleWindow, VolumeMultiplier
from tests.core.sale_builders import DAY, ETHER, FINNEY, sale_context


def _two_tier_context(precision: int = 4):
    phases = (Phase(DAY, 1000, 0, True), Phase(DAY, 1400))
    tiers = (
        VolumeMultiplier(1 * ETHER, 4000),
        VolumeMultiplier(100 * ETHER, 5000),
    )
    return sale_context(
        phases=phases, volume_multipliers=tiers, precision=precision,
        presale=SaleWindow(), publicsale=SaleWindow(),
    )


# --- Worked examples ----------------------------------------------------------

def test_lower_tier_bonus():
    ctx = _two_tier_context()
    assert rate(ctx, 0, 50 * ETHER) == 1400


def test_upper_tier_bonus():
    ctx = _two_tier_context()
    assert rate(ctx, 0, 200 * ETHER) == 1500


def test_no_tier_below_smallest_threshold():
    ctx = _two_tier_context()
    assert rate(ctx, 0, 500 * FINNEY) == 1000


def test_threshold_is_inclusive():
    ctx = _two_tier_context()
    assert rate(ctx, 0, 1 * ETHER) == 1400
    assert rate(ctx, 0, 1 * ETHER - 1) == 1000
    assert rate(ctx, 0, 100 * ETHER) == 1500


def test_largest_tier_applies_however_large():
    ctx = _two_tier_context()
    for amount in (100 * ETHER, 10**6 * ETHER, 10**40):
        assert rate(ctx, 0, amount) == 1500


def test_tier_rate_uses_precision_scale():
    # 4000 means 40% at precision 4 but 4% at precision 5
    ctx = _two_tier_context(precision=5)
    assert rate(ctx, 0, 50 * ETHER) == 1040


# --- Base rate paths ----------------------------------------------------------

def test_no_amount_returns_base_rate():
    ctx = _two_tier_context()
    assert rate(ctx, 0) == 1000


def test_phase_without_multiplier_ignores_amount():
    ctx = sale_context()
    assert rate(ctx, 2, 5000 * ETHER) == 1400


def test_zero_amount_returns_base_rate():
    ctx = _two_tier_context()
    assert rate(ctx, 0, 0) == 1000


def test_rate_is_decimal_and_exact():
    phases = (Phase(DAY, 1050, 0, True), Phase(DAY, 1400))
    ctx = sale_context(phases=phases, presale=SaleWindow(), publicsale=SaleWindow())
    result = rate(ctx, 0, 30 * ETHER)
    assert isinstance(result, Decimal)
    assert result == Decimal("1522.5")


def test_presale_rate_matches_rate():
    ctx = sale_context()
    assert presale_rate(ctx, 0, 50 * ETHER) == rate(ctx, 0, 50 * ETHER) == 1450


# --- Public sale re-basing ----------------------------------------------------

def test_publicsale_rate_is_relative_to_start_index():
    ctx = sale_context()
    assert publicsale_rate(ctx, 0) == 1400
    assert publicsale_rate(ctx, 4) == 1050


def test_publicsale_rate_out_of_range():
    ctx = sale_context()
    with pytest.raises(InvalidArgumentError):
        publicsale_rate(ctx, 5)
    with pytest.raises(InvalidArgumentError):
        publicsale_rate(ctx, -1)


# --- Tier lookup --------------------------------------------------------------

def test_volume_multiplier_returns_highest_qualifying_tier():
    ctx = sale_context()
    match = volume_multiplier(ctx, 750 * ETHER)
    assert match.index == 3
    assert match.tier.rate == 5500


def test_volume_multiplier_none_below_threshold():
    ctx = sale_context()
    assert volume_multiplier(ctx, 999 * FINNEY) is None


def test_volume_multiplier_with_empty_table():
    ctx = sale_context(volume_multipliers=())
    assert volume_multiplier(ctx, 10**30) is None
    assert rate(ctx, 0, 10**30) == 1000


# --- Argument validation ------------------------------------------------------

def test_negative_amount_rejected():
    ctx = sale_context()
    with pytest.raises(InvalidArgumentError) as exc_info:
        rate(ctx, 0, -1)
    assert exc_info.value.argument == "amount"


def test_float_amount_rejected():
    ctx = sale_context()
    with pytest.raises(InvalidArgumentError):
        rate(ctx, 0, 1.5)


def test_out_of_range_phase_rejected():
    ctx = sale_context()
    with pytest.raises(InvalidArgumentError):
        rate(ctx, 99, ETHER)


# --- Lock-up ------------------------------------------------------------------

def test_lockup_without_tier_is_phase_lockup():
    ctx = sale_context()
    assert lockup_period(ctx, 0) == 30 * DAY
    assert lockup_period(ctx, 0, 50 * ETHER) == 30 * DAY


def test_lockup_extended_by_tier():
    ctx = sale_context()
    assert lockup_period(ctx, 0, 100 * ETHER) == 30 * DAY + 5000
    assert lockup_period(ctx, 0, 3000 * ETHER) == 30 * DAY + 20000


def test_lockup_ignores_tier_when_phase_has_no_multiplier():
    ctx = sale_context()
    assert lockup_period(ctx, 3, 3000 * ETHER) == 0


# --- Exactness at large precision ---------------------------------------------

def _wide_tier_context():
    phases = (Phase(DAY, 1_234_567, 0, True), Phase(DAY, 1400))
    tiers = (VolumeMultiplier(ETHER, 123456789012345678901234567891),)
    return sale_context(
        phases=phases, volume_multipliers=tiers, precision=30,
        presale=SaleWindow(), publicsale=SaleWindow(),
    )


def test_blended_rate_is_exact_beyond_default_decimal_context():
    ctx = _wide_tier_context()
    result = rate(ctx, 0, 10**9 * ETHER)
    expected = Fraction(1_234_567) + Fraction(1_234_567 * 123456789012345678901234567891, 10**30)
    assert Fraction(result) == expected
    assert result == Decimal("1386982.677640604567764060456777488197")


def test_token_value_never_exceeds_exact_rate():
    ctx = _wide_tier_context()
    amount = 10**9 * ETHER
    tokens = token_value(rate(ctx, 0, amount), amount, 8)
    exact = Fraction(1_234_567) + Fraction(1_234_567 * 123456789012345678901234567891, 10**30)
    assert tokens == int(exact * 10**9 * 10**8)
