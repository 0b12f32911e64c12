"""Sale Phases - segmentation summary and phase lookup by time.

Invariants:
    - Phase windows are included only when the sale has a start date
    - GET /current without `at` uses the server clock (UTC)
"""

import logging
import time

from fastapi import APIRouter, Depends, Query

from sale_engine.api.dependencies import get_engine
from sale_engine.core.domain_types import Timestamp
from sale_engine.core.engine import SaleScheduleEngine
from sale_engine.schemas.sale import (
    CurrentPhaseResponse, PhaseOut, PhaseTableResponse, SaleWindowOut,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/sale/phases", tags=["sale"])


@router.get("", response_model=PhaseTableResponse)
async def get_phase_table(engine: SaleScheduleEngine = Depends(get_engine)):
    """Presale / transition / public sale breakdown of the phase table."""
    phases = engine.ctx.config.phases
    if engine.has_timeline():
        windows = engine.phase_windows()
        items = [
            PhaseOut.from_domain(w.index, w.stage, phases[w.index], w) for w in windows
        ]
        start_time = engine.publicsale.start_time
    else:
        items = [
            PhaseOut.from_domain(i, engine.stage_of(i), p) for i, p in enumerate(phases)
        ]
        start_time = None
    return PhaseTableResponse(
        network=engine.network,
        presale_duration=engine.presale.duration,
        publicsale_duration=engine.publicsale.duration,
        publicsale_start_index=engine.publicsale.starting_phase_index,
        publicsale_start_time=start_time,
        has_transition_phase=engine.presale.has_transition_phase,
        uses_authentication=engine.uses_authentication(),
        presale_window=SaleWindowOut.from_domain(engine.presale.window),
        publicsale_window=SaleWindowOut.from_domain(engine.publicsale.window),
        phases=items,
    )


@router.get("/current", response_model=CurrentPhaseResponse)
async def get_current_phase(
    at: int | None = Query(None, ge=0, description="Unix timestamp; defaults to now"),
    engine: SaleScheduleEngine = Depends(get_engine),
):
    """Phase active at `at`; phase_index is null outside the sale."""
    at = Timestamp(int(time.time()) if at is None else at)
    index = engine.phase_at(at)
    return CurrentPhaseResponse(
        at=at,
        phase_index=index,
        stage=engine.stage_of(index) if index is not None else None,
    )
