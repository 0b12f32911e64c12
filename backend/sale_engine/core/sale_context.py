"""Sale Context - the immutable, validated configuration every calculator reads.

Invariants:
    - Built once by build_sale_context(); never mutated afterwards
    - A built context always has >= 1 phase and a positive-rate phase at index >= 1
    - Volume thresholds strictly increasing; release percentages sum to 10_000
    - Sale windows, when both starts are set, agree with the phase durations

Design Decisions:
    - Explicit context argument instead of module-level config/precision state:
      concurrent readers need no synchronization
"""

import logging
from dataclasses import dataclass

from sale_engine.core.domain_types import PERCENTAGE_DENOMINATOR, Timestamp
from sale_engine.core.errors import ConfigurationError, ErrorContext
from sale_engine.core.sale_types import SaleConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SaleContext:
    config: SaleConfig
    publicsale_start_index: int

    @property
    def precision(self) -> int:
        return self.config.precision

    @property
    def precision_scale(self) -> int:
        """10**precision: the unit tier rates are expressed in."""
        return 10 ** self.config.precision

    @property
    def network(self) -> str | None:
        return self.config.network


def build_sale_context(config: SaleConfig) -> SaleContext:
    """Validate a SaleConfig and bind it into a SaleContext.

    Raises ConfigurationError on the first integrity violation found.
    """
    ctx = ErrorContext(network=config.network)
    if config.precision < 0:
        raise ConfigurationError(f"precision must be >= 0, got {config.precision}", ctx)

    start_index = _find_publicsale_start(config)
    _check_phases(config)
    _check_volume_multipliers(config)
    _check_release_phases(config)
    _check_stakeholders(config)
    _check_sale_windows(config, start_index)

    logger.info(
        f"Sale context built: {len(config.phases)} phases, "
        f"{len(config.volume_multipliers)} tiers, "
        f"{len(config.stakeholders)} stakeholders",
        extra={"network": config.network},
    )
    return SaleContext(config=config, publicsale_start_index=start_index)


def _find_publicsale_start(config: SaleConfig) -> int:
    if not config.phases:
        raise ConfigurationError(
            "Phase table is empty", ErrorContext(network=config.network),
        )
    for index in range(1, len(config.phases)):
        if config.phases[index].rate > 0:
            return index
    raise ConfigurationError(
        "No phase with rate > 0 after the opening phase; public sale has no start",
        ErrorContext(network=config.network),
    )


def _check_phases(config: SaleConfig) -> None:
    for index, phase in enumerate(config.phases):
        if phase.rate < 0 or phase.duration < 0 or phase.lockup_period < 0:
            raise ConfigurationError(
                f"Phase {index} has a negative rate, duration or lock-up",
                ErrorContext(phase_index=index, network=config.network),
            )


def _check_volume_multipliers(config: SaleConfig) -> None:
    previous = None
    for index, tier in enumerate(config.volume_multipliers):
        if tier.rate < 0:
            raise ConfigurationError(
                f"Volume multiplier {index} has a negative rate",
                ErrorContext(tier_index=index, network=config.network),
            )
        if previous is not None and tier.threshold <= previous:
            raise ConfigurationError(
                f"Volume multiplier thresholds must be strictly increasing "
                f"(tier {index}: {tier.threshold} <= {previous})",
                ErrorContext(tier_index=index, network=config.network),
            )
        previous = tier.threshold


def _check_release_phases(config: SaleConfig) -> None:
    releases = config.token_release_phases
    if not releases:
        return
    for index, release in enumerate(releases):
        if release.percentage < 0:
            raise ConfigurationError(
                f"Token release phase {index} has a negative percentage",
                ErrorContext(network=config.network, debug_info={"release_index": index}),
            )
    total = sum(r.percentage for r in releases)
    if total != PERCENTAGE_DENOMINATOR:
        raise ConfigurationError(
            f"Token release percentages sum to {total}, expected {PERCENTAGE_DENOMINATOR}",
            ErrorContext(network=config.network),
        )


def _check_stakeholders(config: SaleConfig) -> None:
    for index, stakeholder in enumerate(config.stakeholders):
        if stakeholder.tokens < 0 or stakeholder.eth < 0:
            raise ConfigurationError(
                f"Stakeholder {index} has a negative allocation",
                ErrorContext(stakeholder_index=index, network=config.network),
            )
        if stakeholder.tokens > 0 and not config.token_release_phases \
                and not stakeholder.overwrite_release_date:
            raise ConfigurationError(
                f"Stakeholder {index} holds tokens but no token release phases "
                f"are configured",
                ErrorContext(stakeholder_index=index, network=config.network),
            )


def _check_sale_windows(config: SaleConfig, start_index: int) -> None:
    presale_start = config.presale.start
    publicsale_start = config.publicsale.start
    if presale_start is None or publicsale_start is None:
        return
    presale_duration = sum(p.duration for p in config.phases[:start_index])
    expected = Timestamp(presale_start + presale_duration)
    if publicsale_start != expected:
        raise ConfigurationError(
            f"Public sale start {publicsale_start} does not match presale start "
            f"plus presale duration ({expected})",
            ErrorContext(phase_index=start_index, network=config.network),
        )
