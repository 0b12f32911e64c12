"""Sale API Schemas - request/response models for the phase, quote and stakeholder routes.

Invariants:
    - Money is int wei on the wire; rates are decimal strings (never float)
    - QuoteRequest selects the phase by exactly one of `at` / `phase_index`
    - from_domain() builders are the only place core records become API models
"""

from pydantic import BaseModel, Field, model_validator

from sale_engine.core.domain_types import SaleStage
from sale_engine.core.phase_table import PhaseWindow
from sale_engine.core.quotes import Quote
from sale_engine.core.sale_types import Identity, Phase, SaleWindow, Stakeholder
from sale_engine.core.vesting import ReleaseCheckpoint


# --- Phases -------------------------------------------------------------------

class PhaseOut(BaseModel):
    index: int
    stage: SaleStage
    duration: int
    rate: int
    lockup_period: int
    uses_volume_multiplier: bool
    start: int | None = None
    end: int | None = None

    @classmethod
    def from_domain(
        cls, index: int, stage: SaleStage, phase: Phase, window: PhaseWindow | None = None,
    ) -> "PhaseOut":
        return cls(
            index=index,
            stage=stage,
            duration=phase.duration,
            rate=phase.rate,
            lockup_period=phase.lockup_period,
            uses_volume_multiplier=phase.uses_volume_multiplier,
            start=window.start if window else None,
            end=window.end if window else None,
        )


class SaleWindowOut(BaseModel):
    start: int | None
    soft_cap: int | None
    hard_cap: int | None
    accepted_minimum: int

    @classmethod
    def from_domain(cls, w: SaleWindow) -> "SaleWindowOut":
        return cls(
            start=w.start, soft_cap=w.soft_cap,
            hard_cap=w.hard_cap, accepted_minimum=w.accepted_minimum,
        )


class PhaseTableResponse(BaseModel):
    network: str | None
    presale_duration: int
    publicsale_duration: int
    publicsale_start_index: int
    publicsale_start_time: int | None
    has_transition_phase: bool
    uses_authentication: bool
    presale_window: SaleWindowOut
    publicsale_window: SaleWindowOut
    phases: list[PhaseOut]


class CurrentPhaseResponse(BaseModel):
    at: int
    phase_index: int | None
    stage: SaleStage | None = None


# --- Quotes -------------------------------------------------------------------

class QuoteRequest(BaseModel):
    """Price a contribution at a point in time or in an explicit phase."""
    amount: int = Field(ge=0, description="Contribution in wei")
    at: int | None = Field(None, ge=0, description="Unix timestamp")
    phase_index: int | None = Field(None, ge=0)

    @model_validator(mode="after")
    def exactly_one_selector(self) -> "QuoteRequest":
        if (self.at is None) == (self.phase_index is None):
            raise ValueError("provide exactly one of 'at' or 'phase_index'")
        return self


class QuoteResponse(BaseModel):
    phase_index: int
    stage: SaleStage
    amount: int
    rate: str
    tokens: int
    tier_index: int | None
    lockup_period: int
    locked_until: int | None

    @classmethod
    def from_domain(cls, q: Quote) -> "QuoteResponse":
        return cls(
            phase_index=q.phase_index,
            stage=q.stage,
            amount=q.amount,
            rate=str(q.rate),
            tokens=q.tokens,
            tier_index=q.tier_index,
            lockup_period=q.lockup_period,
            locked_until=q.locked_until,
        )


# --- Stakeholders -------------------------------------------------------------

class StakeholderOut(BaseModel):
    index: int
    account: str | int | None
    account_kind: str
    tokens: int
    eth: int
    overwrite_release_date: bool
    fixed_release_date: int

    @classmethod
    def from_domain(cls, index: int, s: Stakeholder) -> "StakeholderOut":
        if isinstance(s.account, Identity):
            account, kind = s.account.value, s.account.kind.value
        else:
            account, kind = None, "unassigned"
        return cls(
            index=index,
            account=account,
            account_kind=kind,
            tokens=s.tokens,
            eth=s.eth,
            overwrite_release_date=s.overwrite_release_date,
            fixed_release_date=s.fixed_release_date,
        )


class CheckpointOut(BaseModel):
    index: int
    percentage: int
    amount: int
    release_date: int

    @classmethod
    def from_domain(cls, c: ReleaseCheckpoint) -> "CheckpointOut":
        return cls(
            index=c.index, percentage=c.percentage,
            amount=c.amount, release_date=c.release_date,
        )


class VestingResponse(BaseModel):
    stakeholder_index: int
    allocation: int
    checkpoints: list[CheckpointOut]
    releasable: int | None = None
