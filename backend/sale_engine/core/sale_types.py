"""Sale Types - immutable records for phases, tiers, stakeholders and release phases.

Invariants:
    - All records are frozen: the engine never mutates configuration
    - Money in Wei, spans in Seconds, instants in Timestamp (all int)
    - Account is a tagged variant: Unassigned or Identity
"""

from dataclasses import dataclass, field

from sale_engine.core.domain_types import (
    AccountKind, BasisPoints, Seconds, Timestamp, Wei,
)


# ─── Accounts ────────────────────────────────────────────────────

@dataclass(frozen=True, slots=True)
class Unassigned:
    """Placeholder account, filled in at deployment time."""

    @property
    def is_contract(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class Identity:
    value: str | int
    kind: AccountKind = AccountKind.ADDRESS

    @property
    def is_contract(self) -> bool:
        return self.kind == AccountKind.CONTRACT


Account = Unassigned | Identity


# ─── Tables ──────────────────────────────────────────────────────

@dataclass(frozen=True, slots=True)
class Phase:
    duration: Seconds
    rate: int
    lockup_period: Seconds = Seconds(0)
    uses_volume_multiplier: bool = False

    @property
    def is_transition(self) -> bool:
        """Break phases (rate 0) never accept purchases."""
        return self.rate == 0


@dataclass(frozen=True, slots=True)
class VolumeMultiplier:
    threshold: Wei
    rate: int
    lockup_period: Seconds = Seconds(0)


@dataclass(frozen=True, slots=True)
class Stakeholder:
    account: Account
    tokens: int = 0
    eth: int = 0
    overwrite_release_date: bool = False
    fixed_release_date: Timestamp = Timestamp(0)


@dataclass(frozen=True, slots=True)
class TokenReleasePhase:
    percentage: BasisPoints
    vesting_period: Seconds


@dataclass(frozen=True, slots=True)
class SaleWindow:
    """Start, caps and minimum contribution of the presale or public sale."""
    start: Timestamp | None = None
    soft_cap: Wei | None = None
    hard_cap: Wei | None = None
    accepted_minimum: Wei = Wei(0)


@dataclass(frozen=True, slots=True)
class SaleConfig:
    """Declarative snapshot of one network's sale configuration."""
    precision: int
    base_rate: int
    phases: tuple[Phase, ...]
    volume_multipliers: tuple[VolumeMultiplier, ...] = ()
    stakeholders: tuple[Stakeholder, ...] = ()
    token_release_phases: tuple[TokenReleasePhase, ...] = ()
    token_decimals: int = 8
    whitelist: dict | None = None
    presale: SaleWindow = field(default_factory=SaleWindow)
    publicsale: SaleWindow = field(default_factory=SaleWindow)
    network: str | None = None
