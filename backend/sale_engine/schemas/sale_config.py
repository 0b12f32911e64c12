"""Sale Configuration Schemas - Pydantic models for the per-network JSON file.

Invariants:
    - Keys accepted in snake_case or camelCase (the legacy config format)
    - Quantities are an int in the smallest unit or a [magnitude, unit] pair
    - to_domain() resolves every quantity once and returns frozen core records
    - Quantity/unit problems surface as ConfigurationError with the table index

Design Decisions:
    - Pydantic at the file boundary, dataclasses in core/: core never imports pydantic
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from sale_engine.core.domain_types import AccountKind, BasisPoints, Timestamp
from sale_engine.core.errors import ConfigurationError, ErrorContext
from sale_engine.core.quantities import to_seconds, to_wei
from sale_engine.core.sale_types import (
    Account, Identity, Phase, SaleConfig, SaleWindow, Stakeholder,
    TokenReleasePhase, Unassigned, VolumeMultiplier,
)

QuantityInput = int | tuple[Decimal, str]
DateInput = datetime | int

_LEGACY_DATE_FORMAT = "%b %d, %Y %H:%M:%S GMT%z"  # 'Jul 1, 2018 12:00:00 GMT+0000'


class _ConfigModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True,
    )


def _parse_legacy_date(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return datetime.strptime(value, _LEGACY_DATE_FORMAT)
        except ValueError:
            return value  # let pydantic try ISO 8601
    return value


def _to_timestamp(value: DateInput | None) -> Timestamp | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return Timestamp(int(value.timestamp()))
    return Timestamp(value)


# --- Tables -------------------------------------------------------------------

class PhaseSchema(_ConfigModel):
    duration: QuantityInput
    rate: int = Field(ge=0)
    lockup_period: QuantityInput = 0
    uses_volume_multiplier: bool = False

    def to_domain(self) -> Phase:
        return Phase(
            duration=to_seconds(self.duration),
            rate=self.rate,
            lockup_period=to_seconds(self.lockup_period),
            uses_volume_multiplier=self.uses_volume_multiplier,
        )


class VolumeMultiplierSchema(_ConfigModel):
    threshold: QuantityInput
    rate: int = Field(ge=0)
    lockup_period: QuantityInput = 0

    def to_domain(self) -> VolumeMultiplier:
        return VolumeMultiplier(
            threshold=to_wei(self.threshold),
            rate=self.rate,
            lockup_period=to_seconds(self.lockup_period),
        )


class StakeholderSchema(_ConfigModel):
    account: int | str | dict[str, Any] | None = None
    tokens: int = Field(0, ge=0)
    eth: int = Field(0, ge=0)
    overwrite_release_date: bool = False
    fixed_release_date: DateInput = 0

    @field_validator("fixed_release_date", mode="before")
    @classmethod
    def parse_legacy_date(cls, v: Any) -> Any:
        return _parse_legacy_date(v)

    def to_domain(self) -> Stakeholder:
        return Stakeholder(
            account=_to_account(self.account),
            tokens=self.tokens,
            eth=self.eth,
            overwrite_release_date=self.overwrite_release_date,
            fixed_release_date=_to_timestamp(self.fixed_release_date),
        )


def _to_account(raw: int | str | dict[str, Any] | None) -> Account:
    """0 -> account index, "0x.." -> address, {"contract": ..} -> contract, "" -> unassigned."""
    if raw is None or raw == "":
        return Unassigned()
    if isinstance(raw, dict):
        name = raw.get("contract") or raw.get("address")
        if not name:
            raise ConfigurationError(
                f"Contract account needs a 'contract' or 'address' key, got {raw}",
            )
        return Identity(name, AccountKind.CONTRACT)
    if isinstance(raw, int):
        return Identity(raw, AccountKind.INDEX)
    return Identity(raw, AccountKind.ADDRESS)


class TokenReleasePhaseSchema(_ConfigModel):
    percentage: int = Field(ge=0)
    vesting_period: QuantityInput

    def to_domain(self) -> TokenReleasePhase:
        return TokenReleasePhase(
            percentage=BasisPoints(self.percentage),
            vesting_period=to_seconds(self.vesting_period),
        )


class StakesSchema(_ConfigModel):
    stakeholders: list[StakeholderSchema] = []
    token_release_phases: list[TokenReleasePhaseSchema] = []


class AuthenticationSchema(_ConfigModel):
    node: int | None = None
    whitelist: dict[str, Any] | None = None


class SaleWindowSchema(_ConfigModel):
    start: DateInput | None = None
    soft: QuantityInput | None = None
    hard: QuantityInput | None = None
    accepted: QuantityInput = 0

    @field_validator("start", mode="before")
    @classmethod
    def parse_legacy_date(cls, v: Any) -> Any:
        return _parse_legacy_date(v)

    def to_domain(self) -> SaleWindow:
        return SaleWindow(
            start=_to_timestamp(self.start),
            soft_cap=to_wei(self.soft) if self.soft is not None else None,
            hard_cap=to_wei(self.hard) if self.hard is not None else None,
            accepted_minimum=to_wei(self.accepted),
        )


class TokenSchema(_ConfigModel):
    contract: str | None = None
    decimals: int = Field(8, ge=0)


class CrowdsaleSchema(_ConfigModel):
    contract: str | None = None
    base_rate: int = Field(ge=0)
    authentication: AuthenticationSchema = AuthenticationSchema()
    presale: SaleWindowSchema = SaleWindowSchema()
    publicsale: SaleWindowSchema = SaleWindowSchema()
    phases: list[PhaseSchema]
    volume_multipliers: list[VolumeMultiplierSchema] = []
    stakes: StakesSchema = StakesSchema()


# --- Network section ----------------------------------------------------------

class SaleConfigSchema(_ConfigModel):
    precision: int = Field(ge=0)
    token: TokenSchema = TokenSchema()
    crowdsale: CrowdsaleSchema

    def to_domain(self, network: str | None = None) -> SaleConfig:
        crowdsale = self.crowdsale
        return SaleConfig(
            precision=self.precision,
            base_rate=crowdsale.base_rate,
            phases=_convert(crowdsale.phases, "phase_index", network),
            volume_multipliers=_convert(crowdsale.volume_multipliers, "tier_index", network),
            stakeholders=_convert(crowdsale.stakes.stakeholders, "stakeholder_index", network),
            token_release_phases=_convert(crowdsale.stakes.token_release_phases, None, network),
            token_decimals=self.token.decimals,
            whitelist=crowdsale.authentication.whitelist,
            presale=crowdsale.presale.to_domain(),
            publicsale=crowdsale.publicsale.to_domain(),
            network=network,
        )


class SaleConfigFile(_ConfigModel):
    """Top-level file: {"network": {"<name>": SaleConfigSchema}}."""
    network: dict[str, SaleConfigSchema]


def _convert(rows: list, index_field: str | None, network: str | None) -> tuple:
    converted = []
    for index, row in enumerate(rows):
        try:
            converted.append(row.to_domain())
        except ConfigurationError as exc:
            ctx = ErrorContext(network=network, debug_info={"row": index})
            if index_field:
                setattr(ctx, index_field, index)
            raise ConfigurationError(exc.message, ctx) from exc
    return tuple(converted)
