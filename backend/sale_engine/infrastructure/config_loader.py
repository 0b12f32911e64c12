"""Sale Config Loader - reads the per-network JSON file into a validated SaleContext.

Invariants:
    - Floats in the file are parsed as Decimal (json parse_float), never float
    - Every failure (missing file, bad JSON, schema, unknown network, integrity)
      surfaces as ConfigurationError
"""

import json
import logging
from decimal import Decimal
from pathlib import Path

from pydantic import ValidationError

from sale_engine.core.errors import ConfigurationError, ErrorContext
from sale_engine.core.sale_context import SaleContext, build_sale_context
from sale_engine.core.sale_types import SaleConfig
from sale_engine.schemas.sale_config import SaleConfigFile

logger = logging.getLogger(__name__)


def parse_sale_config(data: dict, network: str) -> SaleConfig:
    """Validate a decoded config document and select one network section."""
    try:
        document = SaleConfigFile.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(
            f"Invalid sale configuration: {exc.error_count()} error(s)",
            ErrorContext(
                network=network,
                debug_info={"errors": exc.errors(include_url=False)},
            ),
        ) from exc

    section = document.network.get(network)
    if section is None:
        raise ConfigurationError(
            f"Network '{network}' not found in sale configuration",
            ErrorContext(
                network=network,
                debug_info={"available": sorted(document.network)},
            ),
        )
    return section.to_domain(network)


def load_sale_config(path: str | Path, network: str) -> SaleConfig:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(
            f"Cannot read sale configuration '{path}': {exc.strerror}",
            ErrorContext(network=network),
        ) from exc
    try:
        data = json.loads(text, parse_float=Decimal)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(
            f"Sale configuration '{path}' is not valid JSON "
            f"(line {exc.lineno}, column {exc.colno})",
            ErrorContext(network=network),
        ) from exc
    return parse_sale_config(data, network)


def load_sale_context(path: str | Path, network: str) -> SaleContext:
    """Load, validate and bind the sale configuration for `network`."""
    logger.info(f"Loading sale configuration from {path}", extra={"network": network})
    return build_sale_context(load_sale_config(path, network))
