"""Quotes - one-call purchase quote: phase, rate, token amount and lock-up.

Invariants:
    - Exactly one of `at` / `phase_index` selects the phase
    - Transition phases (rate 0) never produce a quote
    - Amounts below the stage's accepted minimum are rejected, never clamped
"""

from dataclasses import dataclass
from decimal import Decimal

from sale_engine.core.domain_types import SaleStage, Seconds, Timestamp, Wei
from sale_engine.core.errors import ErrorContext, InvalidArgumentError
from sale_engine.core.allocation import token_value
from sale_engine.core.phase_table import get_phase, phase_at, stage_of
from sale_engine.core.rates import lockup_period, rate, volume_multiplier
from sale_engine.core.sale_context import SaleContext


@dataclass(frozen=True, slots=True)
class Quote:
    phase_index: int
    stage: SaleStage
    amount: Wei
    rate: Decimal
    tokens: int
    tier_index: int | None
    lockup_period: Seconds
    locked_until: Timestamp | None


def quote(
    ctx: SaleContext,
    amount: Wei,
    at: Timestamp | None = None,
    phase_index: int | None = None,
) -> Quote:
    """Price a contribution of `amount` wei at a time or in a given phase."""
    index = _resolve_phase(ctx, at, phase_index)
    phase = get_phase(ctx, index)
    if phase.is_transition:
        raise InvalidArgumentError(
            f"Phase {index} is a transition phase and accepts no contributions",
            "phase_index", ErrorContext(phase_index=index, network=ctx.network),
        )

    stage = stage_of(ctx, index)
    window = ctx.config.presale if stage == SaleStage.PRESALE else ctx.config.publicsale
    effective_rate = rate(ctx, index, amount)
    if amount < window.accepted_minimum:
        raise InvalidArgumentError(
            f"Contribution {amount} is below the {stage.value} minimum "
            f"of {window.accepted_minimum}",
            "amount", ErrorContext(phase_index=index, network=ctx.network),
        )

    match = volume_multiplier(ctx, amount) if phase.uses_volume_multiplier else None
    lockup = lockup_period(ctx, index, amount)
    return Quote(
        phase_index=index,
        stage=stage,
        amount=amount,
        rate=effective_rate,
        tokens=token_value(effective_rate, amount, ctx.config.token_decimals),
        tier_index=match.index if match else None,
        lockup_period=lockup,
        locked_until=Timestamp(at + lockup) if at is not None else None,
    )


def _resolve_phase(ctx: SaleContext, at: Timestamp | None, phase_index: int | None) -> int:
    if (at is None) == (phase_index is None):
        raise InvalidArgumentError(
            "Exactly one of 'at' or 'phase_index' must be given", "at",
            ErrorContext(network=ctx.network),
        )
    if phase_index is not None:
        return phase_index
    index = phase_at(ctx, at)
    if index is None:
        raise InvalidArgumentError(
            f"No sale phase is active at {at}", "at",
            ErrorContext(network=ctx.network),
        )
    return index
