"""Quotes - price a contribution: phase, rate, token amount and lock-up."""

import logging

from fastapi import APIRouter, Depends

from sale_engine.api.dependencies import get_engine
from sale_engine.core.engine import SaleScheduleEngine
from sale_engine.schemas.sale import QuoteRequest, QuoteResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/sale/quote", tags=["sale"])


@router.post("", response_model=QuoteResponse)
async def create_quote(
    body: QuoteRequest, engine: SaleScheduleEngine = Depends(get_engine),
):
    q = engine.quote(body.amount, at=body.at, phase_index=body.phase_index)
    logger.info(
        f"Quoted {q.tokens} token units for {q.amount} wei",
        extra={"phase_index": q.phase_index, "tier_index": q.tier_index,
               "rate": q.rate, "tokens": q.tokens, "network": engine.network},
    )
    return QuoteResponse.from_domain(q)
