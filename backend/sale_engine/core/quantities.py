"""Quantities - (magnitude, unit) value objects resolved once to canonical integers.

Invariants:
    - Magnitudes are Decimal or int, never float
    - A bare int is already in the smallest unit
    - Result must be a whole number of smallest units, else ConfigurationError
"""

from dataclasses import dataclass
from decimal import Decimal

from sale_engine.core.domain_types import (
    CURRENCY_UNITS, DURATION_UNITS, QuantityKind, Seconds, Wei,
)
from sale_engine.core.errors import ConfigurationError, ErrorContext


@dataclass(frozen=True, slots=True)
class Quantity:
    magnitude: Decimal
    unit: str
    kind: QuantityKind

    def resolve(self) -> int:
        """Convert to the smallest unit of its kind (wei or seconds)."""
        table = CURRENCY_UNITS if self.kind == QuantityKind.CURRENCY else DURATION_UNITS
        size = table.get(self.unit.lower())
        if size is None:
            raise ConfigurationError(
                f"Unknown {self.kind.value} unit '{self.unit}'",
                ErrorContext(debug_info={"known_units": sorted(table)}),
            )
        value = self.magnitude * size
        if value != value.to_integral_value():
            raise ConfigurationError(
                f"{self.magnitude} {self.unit} is not a whole number of "
                f"smallest units",
            )
        return int(value)


def _as_decimal(magnitude) -> Decimal:
    if isinstance(magnitude, bool) or isinstance(magnitude, float):
        raise ConfigurationError(
            f"Quantity magnitude must be int or Decimal, got {type(magnitude).__name__}",
        )
    if isinstance(magnitude, (int, Decimal)):
        return Decimal(magnitude)
    if isinstance(magnitude, str):
        try:
            return Decimal(magnitude)
        except ArithmeticError as exc:
            raise ConfigurationError(f"Invalid quantity magnitude '{magnitude}'") from exc
    raise ConfigurationError(f"Invalid quantity magnitude {magnitude!r}")


def parse_quantity(raw, kind: QuantityKind) -> int:
    """Resolve a bare int or a [magnitude, unit] pair to an int.

    >>> parse_quantity([500, "finney"], QuantityKind.CURRENCY)
    500000000000000000
    """
    if isinstance(raw, bool):
        raise ConfigurationError(f"Invalid {kind.value} quantity {raw!r}")
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, (list, tuple)) and len(raw) == 2 and isinstance(raw[1], str):
        value = Quantity(_as_decimal(raw[0]), raw[1], kind).resolve()
    else:
        raise ConfigurationError(
            f"Invalid {kind.value} quantity {raw!r}: expected int or [magnitude, unit]",
        )
    if value < 0:
        raise ConfigurationError(f"Negative {kind.value} quantity {raw!r}")
    return value


def to_wei(raw) -> Wei:
    return Wei(parse_quantity(raw, QuantityKind.CURRENCY))


def to_seconds(raw) -> Seconds:
    return Seconds(parse_quantity(raw, QuantityKind.DURATION))
