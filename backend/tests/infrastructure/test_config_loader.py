"""Sale config loader - JSON file to validated SaleContext.

Tests cover:
    - The shipped networks load and bind
    - Legacy date strings and empty-string accounts (rinkeby)
    - Every failure mode surfaces as ConfigurationError
    - Table indexes reported for quantity/unit defects
"""

import copy
import json
from decimal import Decimal

import pytest

from sale_engine.config import DEFAULT_SALE_CONFIG
from sale_engine.core.domain_types import AccountKind
from sale_engine.core.errors import ConfigurationError
from sale_engine.core.sale_types import Identity, Unassigned
from sale_engine.core.stakeholders import uses_authentication
from sale_engine.infrastructure.config_loader import (
    load_sale_config, load_sale_context, parse_sale_config,
)

PRESALE_START = 1_530_446_400  # 2018-07-01 12:00 UTC
DAY = 86_400


@pytest.fixture
def shipped_document() -> dict:
    return json.loads(DEFAULT_SALE_CONFIG.read_text(encoding="utf-8"), parse_float=Decimal)


@pytest.fixture
def network_data(shipped_document) -> dict:
    return {"network": {"test": copy.deepcopy(shipped_document["network"]["test"])}}


# --- Shipped networks ---------------------------------------------------------

def test_test_network_loads():
    ctx = load_sale_context(DEFAULT_SALE_CONFIG, "test")
    config = ctx.config
    assert ctx.network == "test"
    assert ctx.publicsale_start_index == 2
    assert config.precision == 4
    assert config.base_rate == 1000
    assert config.token_decimals == 8
    assert len(config.phases) == 7
    assert config.phases[0].duration == 16 * DAY
    assert config.phases[0].lockup_period == 30 * DAY
    assert len(config.volume_multipliers) == 6
    assert config.volume_multipliers[0].threshold == 10**18
    assert len(config.stakeholders) == 7
    assert config.stakeholders[1].account == Identity(1, AccountKind.INDEX)
    assert config.presale.start == PRESALE_START
    assert config.publicsale.start == PRESALE_START + 31 * DAY
    assert config.presale.accepted_minimum == 500 * 10**15
    assert uses_authentication(ctx) is True


def test_rinkeby_legacy_dates_and_unassigned_accounts():
    ctx = load_sale_context(DEFAULT_SALE_CONFIG, "rinkeby")
    config = ctx.config
    assert config.presale.start == PRESALE_START
    assert config.publicsale.start == PRESALE_START + 31 * DAY
    assert all(s.account == Unassigned() for s in config.stakeholders)
    assert uses_authentication(ctx) is False
    assert config.base_rate == 500


# --- Failure modes ------------------------------------------------------------

def test_unknown_network(shipped_document):
    with pytest.raises(ConfigurationError, match="mainnet") as exc_info:
        parse_sale_config(shipped_document, "mainnet")
    assert exc_info.value.context.debug_info["available"] == ["rinkeby", "test"]


def test_missing_file(tmp_path):
    with pytest.raises(ConfigurationError, match="Cannot read"):
        load_sale_config(tmp_path / "absent.json", "test")


def test_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text('{"network": {', encoding="utf-8")
    with pytest.raises(ConfigurationError, match="not valid JSON"):
        load_sale_config(path, "test")


def test_schema_violation(network_data):
    del network_data["network"]["test"]["crowdsale"]["phases"]
    with pytest.raises(ConfigurationError, match="Invalid sale configuration"):
        parse_sale_config(network_data, "test")


def test_negative_rate_rejected_by_schema(network_data):
    network_data["network"]["test"]["crowdsale"]["phases"][2]["rate"] = -1
    with pytest.raises(ConfigurationError):
        parse_sale_config(network_data, "test")


def test_unknown_unit_reports_phase_index(network_data):
    network_data["network"]["test"]["crowdsale"]["phases"][3]["duration"] = [2, "fortnights"]
    with pytest.raises(ConfigurationError, match="fortnights") as exc_info:
        parse_sale_config(network_data, "test")
    assert exc_info.value.context.phase_index == 3
    assert exc_info.value.context.network == "test"


def test_fractional_wei_reports_tier_index(network_data):
    tiers = network_data["network"]["test"]["crowdsale"]["volumeMultipliers"]
    tiers[1]["threshold"] = [Decimal("0.5"), "wei"]
    with pytest.raises(ConfigurationError) as exc_info:
        parse_sale_config(network_data, "test")
    assert exc_info.value.context.tier_index == 1


def test_integrity_checked_after_parsing(tmp_path, network_data):
    releases = network_data["network"]["test"]["crowdsale"]["stakes"]["tokenReleasePhases"]
    releases[0]["percentage"] = 1000
    path = tmp_path / "sale.json"
    path.write_text(json.dumps(network_data, default=str), encoding="utf-8")
    with pytest.raises(ConfigurationError, match="sum to"):
        load_sale_context(path, "test")


# --- Input shapes -------------------------------------------------------------

def test_decimal_magnitude_from_file(tmp_path, network_data):
    window = network_data["network"]["test"]["crowdsale"]["publicsale"]
    window["accepted"] = [Decimal("0.04"), "ether"]
    path = tmp_path / "sale.json"
    path.write_text(json.dumps(network_data, default=str).replace('"0.04"', "0.04"),
                    encoding="utf-8")
    config = load_sale_config(path, "test")
    assert config.publicsale.accepted_minimum == 40 * 10**15


def test_snake_case_keys_accepted():
    data = {"network": {"local": {
        "precision": 4,
        "crowdsale": {
            "base_rate": 1000,
            "phases": [
                {"duration": [1, "day"], "rate": 1000, "uses_volume_multiplier": True},
                {"duration": 3600, "rate": 900},
            ],
            "volume_multipliers": [
                {"threshold": [1, "ether"], "rate": 4000, "lockup_period": [1, "hour"]},
            ],
        },
    }}}
    config = parse_sale_config(data, "local")
    assert config.phases[0].uses_volume_multiplier is True
    assert config.phases[1].duration == 3600
    assert config.volume_multipliers[0].lockup_period == 3600
    assert config.presale.start is None


def test_contract_and_address_accounts():
    data = {"network": {"local": {
        "precision": 4,
        "crowdsale": {
            "baseRate": 1000,
            "phases": [{"duration": 10, "rate": 1000}, {"duration": 10, "rate": 900}],
            "stakes": {"stakeholders": [
                {"account": "0xabc", "eth": 100},
                {"account": {"contract": "TeamVault"}},
            ]},
        },
    }}}
    config = parse_sale_config(data, "local")
    assert config.stakeholders[0].account == Identity("0xabc", AccountKind.ADDRESS)
    assert config.stakeholders[1].account.is_contract
