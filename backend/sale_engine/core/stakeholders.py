"""Stakeholders - filtering of the pre-configured allocation table.

Invariants:
    - Filter fields are tri-state: None imposes no constraint
    - Results preserve table order; the table is never mutated
"""

from dataclasses import dataclass

from sale_engine.core.errors import ErrorContext, InvalidArgumentError
from sale_engine.core.sale_context import SaleContext
from sale_engine.core.sale_types import Account, Stakeholder


@dataclass(frozen=True, slots=True)
class StakeholderFilter:
    tokens: bool | None = None
    eth: bool | None = None
    contract: bool | None = None
    overwrite_release_date: bool | None = None

    def matches(self, stakeholder: Stakeholder) -> bool:
        return (
            _matches_positive(self.tokens, stakeholder.tokens)
            and _matches_positive(self.eth, stakeholder.eth)
            and (self.contract is None
                 or self.contract == stakeholder.account.is_contract)
            and (self.overwrite_release_date is None
                 or self.overwrite_release_date == stakeholder.overwrite_release_date)
        )


def _matches_positive(wanted: bool | None, value: int) -> bool:
    if wanted is None:
        return True
    return value > 0 if wanted else value == 0


def select_indexed_stakeholders(
    ctx: SaleContext, stakeholder_filter: StakeholderFilter | None = None,
) -> list[tuple[int, Stakeholder]]:
    """Like select_stakeholders, keeping each match's table index."""
    stakeholder_filter = stakeholder_filter or StakeholderFilter()
    return [
        (index, s) for index, s in enumerate(ctx.config.stakeholders)
        if stakeholder_filter.matches(s)
    ]


def select_stakeholders(
    ctx: SaleContext, stakeholder_filter: StakeholderFilter | None = None,
) -> list[Stakeholder]:
    """Stakeholders satisfying every set predicate, in table order."""
    return [s for _, s in select_indexed_stakeholders(ctx, stakeholder_filter)]


def get_stakeholder(ctx: SaleContext, index: int) -> Stakeholder:
    stakeholders = ctx.config.stakeholders
    if isinstance(index, bool) or not 0 <= index < len(stakeholders):
        raise InvalidArgumentError(
            f"Stakeholder index {index} out of range ({len(stakeholders)} configured)",
            "stakeholder_index",
            ErrorContext(stakeholder_index=index, network=ctx.network),
        )
    return stakeholders[index]


def beneficiary(ctx: SaleContext) -> Account:
    """Account of the first stakeholder, which receives the raised funds."""
    return get_stakeholder(ctx, 0).account


def uses_authentication(ctx: SaleContext) -> bool:
    """Contributors must be whitelisted when a whitelist is configured."""
    return ctx.config.whitelist is not None
