"""Stakeholders - filtered allocation table and per-stakeholder vesting schedule.

Invariants:
    - Omitted filter query params impose no constraint (tri-state filter)
    - Stakeholder indexes are positions in the configured table
"""

from fastapi import APIRouter, Depends, Query

from sale_engine.api.dependencies import get_engine
from sale_engine.core.domain_types import Timestamp
from sale_engine.core.engine import SaleScheduleEngine
from sale_engine.core.errors import ErrorContext, ResourceNotFoundError
from sale_engine.core.sale_types import Stakeholder
from sale_engine.core.stakeholders import StakeholderFilter
from sale_engine.schemas.sale import CheckpointOut, StakeholderOut, VestingResponse

router = APIRouter(prefix="/api/v1/stakeholders", tags=["stakeholders"])


def get_stakeholder_or_404(engine: SaleScheduleEngine, index: int) -> Stakeholder:
    """Stakeholder at a table position or raise 404."""
    if not 0 <= index < len(engine.ctx.config.stakeholders):
        raise ResourceNotFoundError(
            "Stakeholder", str(index),
            ErrorContext(stakeholder_index=index, network=engine.network),
        )
    return engine.stakeholder(index)


@router.get("", response_model=list[StakeholderOut])
async def list_stakeholders(
    tokens: bool | None = None,
    eth: bool | None = None,
    contract: bool | None = None,
    overwrite_release_date: bool | None = None,
    engine: SaleScheduleEngine = Depends(get_engine),
):
    stakeholder_filter = StakeholderFilter(
        tokens=tokens, eth=eth, contract=contract,
        overwrite_release_date=overwrite_release_date,
    )
    return [
        StakeholderOut.from_domain(index, s)
        for index, s in engine.select_indexed_stakeholders(stakeholder_filter)
    ]


@router.get("/{index}/vesting", response_model=VestingResponse)
async def get_vesting_schedule(
    index: int,
    allocation: int | None = Query(None, ge=0),
    at: int | None = Query(None, ge=0, description="Also report the amount releasable at this time"),
    engine: SaleScheduleEngine = Depends(get_engine),
):
    stakeholder = get_stakeholder_or_404(engine, index)
    checkpoints = engine.vesting_schedule(stakeholder, allocation)
    return VestingResponse(
        stakeholder_index=index,
        allocation=stakeholder.tokens if allocation is None else allocation,
        checkpoints=[CheckpointOut.from_domain(c) for c in checkpoints],
        releasable=(
            engine.releasable_amount(stakeholder, Timestamp(at), allocation)
            if at is not None else None
        ),
    )
