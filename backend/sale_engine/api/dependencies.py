"""Route Dependencies - process-wide SaleScheduleEngine built from settings.

Invariants:
    - The engine is built once per (config path, network) and reused
    - A broken configuration is never cached: the next request retries the load
"""

from functools import lru_cache

from sale_engine.config import get_settings
from sale_engine.core.engine import SaleScheduleEngine
from sale_engine.infrastructure.config_loader import load_sale_context


@lru_cache
def _engine_for(config_path: str, network: str) -> SaleScheduleEngine:
    return SaleScheduleEngine(load_sale_context(config_path, network))


def get_engine() -> SaleScheduleEngine:
    """FastAPI dependency; override in tests via app.dependency_overrides."""
    settings = get_settings()
    return _engine_for(str(settings.sale_config_path), settings.sale_network)
