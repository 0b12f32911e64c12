"""Phase Table - segmentation of the phase sequence into presale and public sale.

Invariants:
    - Presale = phases[0:publicsale_start_index], public sale = the rest
    - The presale starting phase index is always 0
    - Transition phase = last presale phase when its rate is 0
    - Timeline is contiguous: phase i starts where phase i-1 ends
    - All functions are PURE: no IO, no side effects
"""

from dataclasses import dataclass

from sale_engine.core.domain_types import SaleStage, Seconds, Timestamp
from sale_engine.core.errors import ConfigurationError, ErrorContext, InvalidArgumentError
from sale_engine.core.sale_context import SaleContext
from sale_engine.core.sale_types import Phase


@dataclass(frozen=True, slots=True)
class PhaseWindow:
    index: int
    start: Timestamp
    end: Timestamp  # exclusive
    stage: SaleStage


# --- Lookup -------------------------------------------------------------------

def get_phase(ctx: SaleContext, phase_index: int) -> Phase:
    """Phase at phase_index; InvalidArgumentError when out of range."""
    phases = ctx.config.phases
    if isinstance(phase_index, bool) or not 0 <= phase_index < len(phases):
        raise InvalidArgumentError(
            f"Phase index {phase_index} out of range (0..{len(phases) - 1})",
            "phase_index",
            ErrorContext(phase_index=phase_index, network=ctx.network),
        )
    return phases[phase_index]


def starting_phase(ctx: SaleContext) -> Phase:
    return ctx.config.phases[0]


def stage_of(ctx: SaleContext, phase_index: int) -> SaleStage:
    """Which segment phase_index falls into."""
    phase = get_phase(ctx, phase_index)
    if phase_index >= ctx.publicsale_start_index:
        return SaleStage.PUBLICSALE
    if phase.is_transition and phase_index == ctx.publicsale_start_index - 1:
        return SaleStage.TRANSITION
    return SaleStage.PRESALE


# --- Presale ------------------------------------------------------------------

def presale_phases(ctx: SaleContext) -> tuple[Phase, ...]:
    return ctx.config.phases[:ctx.publicsale_start_index]


def presale_duration(ctx: SaleContext) -> Seconds:
    return Seconds(sum(p.duration for p in presale_phases(ctx)))


def transition_phase(ctx: SaleContext) -> Phase | None:
    """Break phase between presale and public sale, if configured."""
    phases = presale_phases(ctx)
    if phases and phases[-1].is_transition:
        return phases[-1]
    return None


def has_transition_phase(ctx: SaleContext) -> bool:
    return transition_phase(ctx) is not None


# --- Public sale --------------------------------------------------------------

def publicsale_start_index(ctx: SaleContext) -> int:
    """First index >= 1 whose rate > 0 (resolved when the context was built)."""
    return ctx.publicsale_start_index


def publicsale_phases(ctx: SaleContext) -> tuple[Phase, ...]:
    return ctx.config.phases[ctx.publicsale_start_index:]


def publicsale_duration(ctx: SaleContext) -> Seconds:
    return Seconds(sum(p.duration for p in publicsale_phases(ctx)))


def publicsale_start_time(ctx: SaleContext) -> Timestamp:
    """Configured public sale start, else presale start + presale duration."""
    config = ctx.config
    if config.publicsale.start is not None:
        return config.publicsale.start
    if config.presale.start is not None:
        return Timestamp(config.presale.start + presale_duration(ctx))
    raise ConfigurationError(
        "Neither presale nor public sale start is configured",
        ErrorContext(network=ctx.network),
    )


# --- Timeline -----------------------------------------------------------------

def has_timeline(ctx: SaleContext) -> bool:
    """True when a start date anchors the phases to absolute time."""
    return ctx.config.presale.start is not None or ctx.config.publicsale.start is not None


def sale_start_time(ctx: SaleContext) -> Timestamp:
    config = ctx.config
    if config.presale.start is not None:
        return config.presale.start
    if config.publicsale.start is not None:
        return Timestamp(config.publicsale.start - presale_duration(ctx))
    raise ConfigurationError(
        "Sale timeline needs a presale or public sale start",
        ErrorContext(network=ctx.network),
    )


def phase_windows(ctx: SaleContext) -> list[PhaseWindow]:
    """Absolute [start, end) window of every phase, in table order."""
    cursor = sale_start_time(ctx)
    windows = []
    for index, phase in enumerate(ctx.config.phases):
        end = Timestamp(cursor + phase.duration)
        windows.append(PhaseWindow(index, cursor, end, stage_of(ctx, index)))
        cursor = end
    return windows


def phase_at(ctx: SaleContext, at: Timestamp) -> int | None:
    """Index of the phase covering `at`; None before the start or after the end."""
    for window in phase_windows(ctx):
        if window.start <= at < window.end:
            return window.index
    return None
