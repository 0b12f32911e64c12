"""API test fixtures - FastAPI test client bound to the shipped "test" network.

Invariants:
    - get_engine dependency overridden with an engine built from sale_config.json
    - Overrides are cleared after every test

Design Decisions:
    - ASGITransport: requests go straight to the app, no server or lifespan
"""

import pytest
from httpx import ASGITransport, AsyncClient

from sale_engine.api.dependencies import get_engine
from sale_engine.config import DEFAULT_SALE_CONFIG
from sale_engine.core.engine import SaleScheduleEngine
from sale_engine.infrastructure.config_loader import load_sale_context
from sale_engine.main import app


@pytest.fixture
def engine() -> SaleScheduleEngine:
    return SaleScheduleEngine(load_sale_context(DEFAULT_SALE_CONFIG, "test"))


@pytest.fixture
async def client(engine):
    """FastAPI test client with the engine dependency overridden."""
    app.dependency_overrides[get_engine] = lambda: engine
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()
