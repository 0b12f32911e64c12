"""Rate Calculator - effective exchange rate for a phase and a contribution amount.

Invariants:
    - At most one volume tier applies: the highest threshold <= amount
    - Bonus is additive: base + base * tier.rate / 10**precision
    - Tier rates are expressed in the same 10**precision units as the scale
    - Rates are exact Decimals; amounts are int wei; no binary floats
    - All functions are PURE: no IO, no side effects

Design Decisions:
    - Return Decimal even without a bonus so callers handle one type
"""

from dataclasses import dataclass
from decimal import Decimal, Inexact, localcontext

from sale_engine.core.domain_types import Seconds, Wei
from sale_engine.core.errors import ErrorContext, InvalidArgumentError
from sale_engine.core.phase_table import get_phase, publicsale_phases
from sale_engine.core.sale_context import SaleContext
from sale_engine.core.sale_types import VolumeMultiplier


@dataclass(frozen=True, slots=True)
class TierMatch:
    index: int
    tier: VolumeMultiplier


# --- Volume multipliers -------------------------------------------------------

def volume_multiplier(ctx: SaleContext, amount: Wei) -> TierMatch | None:
    """Highest tier whose threshold <= amount, or None."""
    _check_amount(ctx, amount)
    tiers = ctx.config.volume_multipliers
    for index in range(len(tiers) - 1, -1, -1):
        if amount >= tiers[index].threshold:
            return TierMatch(index, tiers[index])
    return None


def _applicable_tier(ctx: SaleContext, phase_index: int, amount: Wei | None) -> TierMatch | None:
    phase = get_phase(ctx, phase_index)
    if not phase.uses_volume_multiplier or amount is None:
        return None
    return volume_multiplier(ctx, amount)


# --- Rates --------------------------------------------------------------------

def rate(ctx: SaleContext, phase_index: int, amount: Wei | None = None) -> Decimal:
    """Effective rate for phase_index, boosted by the qualifying volume tier.

    Args:
        ctx: Bound sale configuration.
        phase_index: Absolute index into the phase table.
        amount: Contribution in wei. None skips the volume lookup.

    Returns:
        The base rate, or base + base * tier.rate / 10**precision.
    """
    base = get_phase(ctx, phase_index).rate
    if amount is not None:
        _check_amount(ctx, amount)
    match = _applicable_tier(ctx, phase_index, amount)
    if match is None:
        return Decimal(base)
    return _blend(base, match.tier.rate, ctx.precision)


def _blend(base: int, tier_rate: int, precision: int) -> Decimal:
    """base + base * tier_rate / 10**precision, with no rounding at any size."""
    bonus = base * tier_rate
    with localcontext() as dec:
        # integer digits of the sum plus every fractional digit of the bonus
        dec.prec = len(str(bonus)) + len(str(base)) + precision + 2
        dec.traps[Inexact] = True
        return Decimal(base) + Decimal(bonus) / 10**precision


def presale_rate(ctx: SaleContext, phase_index: int, amount: Wei | None = None) -> Decimal:
    return rate(ctx, phase_index, amount)


def publicsale_rate(ctx: SaleContext, phase_index: int, amount: Wei | None = None) -> Decimal:
    """Rate for a public sale phase indexed from 0 at the public sale start."""
    count = len(publicsale_phases(ctx))
    if isinstance(phase_index, bool) or not 0 <= phase_index < count:
        raise InvalidArgumentError(
            f"Public sale phase index {phase_index} out of range (0..{count - 1})",
            "phase_index",
            ErrorContext(phase_index=phase_index, network=ctx.network),
        )
    return rate(ctx, ctx.publicsale_start_index + phase_index, amount)


# --- Lock-up ------------------------------------------------------------------

def lockup_period(ctx: SaleContext, phase_index: int, amount: Wei | None = None) -> Seconds:
    """Phase lock-up extended by the qualifying tier's lock-up, if any."""
    phase = get_phase(ctx, phase_index)
    if amount is not None:
        _check_amount(ctx, amount)
    match = _applicable_tier(ctx, phase_index, amount)
    extension = match.tier.lockup_period if match else 0
    return Seconds(phase.lockup_period + extension)


def _check_amount(ctx: SaleContext, amount: Wei) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidArgumentError(
            f"Contribution amount must be an int in wei, got {type(amount).__name__}",
            "amount", ErrorContext(network=ctx.network),
        )
    if amount < 0:
        raise InvalidArgumentError(
            f"Contribution amount must be >= 0, got {amount}",
            "amount", ErrorContext(network=ctx.network),
        )
