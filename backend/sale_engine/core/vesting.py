"""Vesting - expands a stakeholder's grant into dated partial releases.

Invariants:
    - amount_k = T * p_k // 10_000 for every checkpoint but the last
    - The last checkpoint takes T - sum(previous): amounts sum exactly to T
    - Release date = public sale start + vesting_period, unless the stakeholder
      overwrites it: then every checkpoint is dated fixed_release_date
    - All functions are PURE: no IO, no side effects
"""

from dataclasses import dataclass

from sale_engine.core.domain_types import PERCENTAGE_DENOMINATOR, BasisPoints, Timestamp
from sale_engine.core.errors import ConfigurationError, ErrorContext, InvalidArgumentError
from sale_engine.core.phase_table import publicsale_start_time
from sale_engine.core.sale_context import SaleContext
from sale_engine.core.sale_types import Stakeholder


@dataclass(frozen=True, slots=True)
class ReleaseCheckpoint:
    index: int
    percentage: BasisPoints
    amount: int
    release_date: Timestamp


def vesting_schedule(
    ctx: SaleContext, stakeholder: Stakeholder, allocation: int | None = None,
) -> list[ReleaseCheckpoint]:
    """Dated releases of `allocation` (defaults to stakeholder.tokens)."""
    total = stakeholder.tokens if allocation is None else allocation
    if isinstance(total, bool) or not isinstance(total, int) or total < 0:
        raise InvalidArgumentError(
            f"Allocation must be an int >= 0, got {total!r}", "allocation",
            ErrorContext(network=ctx.network),
        )
    releases = ctx.config.token_release_phases

    if stakeholder.overwrite_release_date:
        fixed = stakeholder.fixed_release_date
        if not releases:
            return [ReleaseCheckpoint(0, BasisPoints(PERCENTAGE_DENOMINATOR), total, fixed)]
        dates = [fixed] * len(releases)
    else:
        if not releases:
            if total == 0:
                return []
            raise ConfigurationError(
                "No token release phases configured to vest the allocation",
                ErrorContext(network=ctx.network),
            )
        start = publicsale_start_time(ctx)
        dates = [Timestamp(start + r.vesting_period) for r in releases]

    checkpoints = []
    released = 0
    last = len(releases) - 1
    for index, release in enumerate(releases):
        if index == last:
            amount = total - released
        else:
            amount = total * release.percentage // PERCENTAGE_DENOMINATOR
        released += amount
        checkpoints.append(
            ReleaseCheckpoint(index, release.percentage, amount, dates[index]),
        )
    return checkpoints


def releasable_amount(
    ctx: SaleContext,
    stakeholder: Stakeholder,
    at: Timestamp,
    allocation: int | None = None,
) -> int:
    """Total released by checkpoints dated at or before `at`."""
    return sum(
        c.amount for c in vesting_schedule(ctx, stakeholder, allocation)
        if c.release_date <= at
    )
