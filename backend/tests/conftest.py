"""Root conftest - shared test configuration."""

import os
from pathlib import Path

# Ensure tests run against the shipped sale tables, never a local .env
os.environ.setdefault(
    "SALE_CONFIG_PATH",
    str(Path(__file__).resolve().parent.parent / "sale_config.json"),
)
os.environ.setdefault("SALE_NETWORK", "test")
os.environ.setdefault("LOG_FORMAT", "text")
