"""Quantity resolution - (magnitude, unit) pairs to wei and seconds."""

from decimal import Decimal

import pytest

from sale_engine.core.errors import ConfigurationError
from sale_engine.core.quantities import to_seconds, to_wei


def test_ether_pair_resolves_to_wei():
    assert to_wei([1, "ether"]) == 10**18
    assert to_wei([5882, "ether"]) == 5882 * 10**18


def test_finney_pair_resolves_to_wei():
    assert to_wei([500, "finney"]) == 5 * 10**17


def test_decimal_magnitude_is_exact():
    assert to_wei([Decimal("0.5"), "ether"]) == 5 * 10**17
    assert to_wei([Decimal("0.000000000000000001"), "ether"]) == 1


def test_string_magnitude_is_parsed_as_decimal():
    assert to_wei(["1.25", "ether"]) == 125 * 10**16


def test_bare_int_is_already_in_smallest_unit():
    assert to_wei(7000) == 7000
    assert to_seconds(5000) == 5000


def test_unit_names_are_case_insensitive():
    assert to_wei([2, "Ether"]) == 2 * 10**18


def test_duration_units():
    assert to_seconds([30, "minutes"]) == 1800
    assert to_seconds([16, "days"]) == 16 * 86_400
    assert to_seconds([2, "weeks"]) == 14 * 86_400
    assert to_seconds([1, "years"]) == 365 * 86_400


def test_singular_duration_units():
    assert to_seconds([1, "day"]) == 86_400
    assert to_seconds([1, "hour"]) == 3600


def test_unknown_unit_fails():
    with pytest.raises(ConfigurationError, match="Unknown currency unit"):
        to_wei([1, "dogecoin"])


def test_currency_unit_is_not_a_duration():
    with pytest.raises(ConfigurationError):
        to_seconds([1, "ether"])


def test_fraction_of_smallest_unit_fails():
    with pytest.raises(ConfigurationError, match="whole number"):
        to_wei([Decimal("0.5"), "wei"])


def test_float_magnitude_is_rejected():
    with pytest.raises(ConfigurationError, match="int or Decimal"):
        to_wei([0.5, "ether"])


def test_negative_quantity_fails():
    with pytest.raises(ConfigurationError, match="Negative"):
        to_wei(-1)
    with pytest.raises(ConfigurationError, match="Negative"):
        to_seconds([-3, "days"])


def test_malformed_quantity_fails():
    with pytest.raises(ConfigurationError):
        to_wei([1, 2, "ether"])
    with pytest.raises(ConfigurationError):
        to_wei(True)
    with pytest.raises(ConfigurationError):
        to_wei(["abc", "ether"])
