"""Sale Schedule Engine API - FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map SaleEngineError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Sale configuration validated on startup: a broken file fails fast

Design Decisions:
    - Lifespan over @app.on_event (FastAPI recommended pattern)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sale_engine.api.dependencies import get_engine
from sale_engine.api.error_handlers import register_error_handlers
from sale_engine.api.routes import health, quotes, sale_phases, stakeholders
from sale_engine.config import get_settings
from sale_engine.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    engine = get_engine()
    logger.info(
        "Sale Schedule Engine API started",
        extra={"network": engine.network},
    )
    yield
    logger.info("Sale Schedule Engine API shutting down")


app = FastAPI(
    title="Sale Schedule Engine API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(sale_phases.router)
app.include_router(quotes.router)
app.include_router(stakeholders.router)

register_error_handlers(app)
