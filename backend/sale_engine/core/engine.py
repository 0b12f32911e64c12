"""Sale Schedule Engine - facade binding one SaleContext to every calculator.

Invariants:
    - Holds no state besides the immutable context
    - presale / publicsale segments index their phases from 0
"""

from dataclasses import dataclass
from decimal import Decimal

from sale_engine.core import allocation, phase_table, quotes, rates, stakeholders, vesting
from sale_engine.core.domain_types import SaleStage, Seconds, Timestamp, Wei
from sale_engine.core.sale_context import SaleContext, build_sale_context
from sale_engine.core.sale_types import Account, Phase, SaleConfig, SaleWindow, Stakeholder


@dataclass(frozen=True)
class Presale:
    ctx: SaleContext

    @property
    def starting_phase_index(self) -> int:
        return 0

    @property
    def starting_phase(self) -> Phase:
        return phase_table.starting_phase(self.ctx)

    @property
    def phases(self) -> tuple[Phase, ...]:
        return phase_table.presale_phases(self.ctx)

    @property
    def duration(self) -> Seconds:
        return phase_table.presale_duration(self.ctx)

    @property
    def transition_phase(self) -> Phase | None:
        return phase_table.transition_phase(self.ctx)

    @property
    def has_transition_phase(self) -> bool:
        return phase_table.has_transition_phase(self.ctx)

    @property
    def window(self) -> SaleWindow:
        """Start, soft/hard cap and minimum contribution of the presale."""
        return self.ctx.config.presale

    def rate(self, phase_index: int, amount: Wei | None = None) -> Decimal:
        return rates.presale_rate(self.ctx, phase_index, amount)


@dataclass(frozen=True)
class Publicsale:
    ctx: SaleContext

    @property
    def starting_phase_index(self) -> int:
        return phase_table.publicsale_start_index(self.ctx)

    @property
    def starting_phase(self) -> Phase:
        return self.ctx.config.phases[self.starting_phase_index]

    @property
    def phases(self) -> tuple[Phase, ...]:
        return phase_table.publicsale_phases(self.ctx)

    @property
    def duration(self) -> Seconds:
        return phase_table.publicsale_duration(self.ctx)

    @property
    def start_time(self) -> Timestamp:
        return phase_table.publicsale_start_time(self.ctx)

    @property
    def window(self) -> SaleWindow:
        return self.ctx.config.publicsale

    def rate(self, phase_index: int, amount: Wei | None = None) -> Decimal:
        return rates.publicsale_rate(self.ctx, phase_index, amount)


class SaleScheduleEngine:
    """Entry point for callers that prefer methods over context-taking functions."""

    def __init__(self, ctx: SaleContext):
        self.ctx = ctx
        self.presale = Presale(ctx)
        self.publicsale = Publicsale(ctx)

    @classmethod
    def from_config(cls, config: SaleConfig) -> "SaleScheduleEngine":
        return cls(build_sale_context(config))

    @property
    def network(self) -> str | None:
        return self.ctx.network

    @property
    def token_decimals(self) -> int:
        return self.ctx.config.token_decimals

    def rate(self, phase_index: int, amount: Wei | None = None) -> Decimal:
        return rates.rate(self.ctx, phase_index, amount)

    def volume_multiplier(self, amount: Wei) -> rates.TierMatch | None:
        return rates.volume_multiplier(self.ctx, amount)

    def lockup_period(self, phase_index: int, amount: Wei | None = None) -> Seconds:
        return rates.lockup_period(self.ctx, phase_index, amount)

    def token_value(self, rate: Decimal | int, amount: Wei, decimals: int | None = None) -> int:
        if decimals is None:
            decimals = self.token_decimals
        return allocation.token_value(rate, amount, decimals)

    def stage_of(self, phase_index: int) -> SaleStage:
        return phase_table.stage_of(self.ctx, phase_index)

    def has_timeline(self) -> bool:
        return phase_table.has_timeline(self.ctx)

    def phase_windows(self) -> list[phase_table.PhaseWindow]:
        return phase_table.phase_windows(self.ctx)

    def phase_at(self, at: Timestamp) -> int | None:
        return phase_table.phase_at(self.ctx, at)

    def quote(
        self, amount: Wei, at: Timestamp | None = None, phase_index: int | None = None,
    ) -> quotes.Quote:
        return quotes.quote(self.ctx, amount, at=at, phase_index=phase_index)

    def select_stakeholders(
        self, stakeholder_filter: stakeholders.StakeholderFilter | None = None,
    ) -> list[Stakeholder]:
        return stakeholders.select_stakeholders(self.ctx, stakeholder_filter)

    def select_indexed_stakeholders(
        self, stakeholder_filter: stakeholders.StakeholderFilter | None = None,
    ) -> list[tuple[int, Stakeholder]]:
        return stakeholders.select_indexed_stakeholders(self.ctx, stakeholder_filter)

    def stakeholder(self, index: int) -> Stakeholder:
        return stakeholders.get_stakeholder(self.ctx, index)

    def beneficiary(self) -> Account:
        return stakeholders.beneficiary(self.ctx)

    def uses_authentication(self) -> bool:
        return stakeholders.uses_authentication(self.ctx)

    def vesting_schedule(
        self, stakeholder: Stakeholder, allocation: int | None = None,
    ) -> list[vesting.ReleaseCheckpoint]:
        return vesting.vesting_schedule(self.ctx, stakeholder, allocation)

    def releasable_amount(
        self, stakeholder: Stakeholder, at: Timestamp, allocation: int | None = None,
    ) -> int:
        return vesting.releasable_amount(self.ctx, stakeholder, at, allocation)
