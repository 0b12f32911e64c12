"""Domain Types - rich types that replace bare primitives across the engine.

Invariants:
    - Wei, Seconds and Timestamp are plain ints (never float)
    - BasisPoints are parts of PERCENTAGE_DENOMINATOR (10_000 == 100%)
    - Unit tables map a unit name to its size in the smallest unit
    - All valid states encoded as Enums - no raw string matching
"""

from enum import Enum
from typing import NewType


# ─── Value Types ─────────────────────────────────────────────────

Wei = NewType("Wei", int)              # smallest base-currency unit
Seconds = NewType("Seconds", int)      # time span
Timestamp = NewType("Timestamp", int)  # unix seconds, UTC
BasisPoints = NewType("BasisPoints", int)


# ─── Constants ───────────────────────────────────────────────────

WEI_PER_ETHER = 10**18
PERCENTAGE_DENOMINATOR = 10_000

CURRENCY_UNITS: dict[str, int] = {
    "wei": 1,
    "kwei": 10**3,
    "mwei": 10**6,
    "gwei": 10**9,
    "szabo": 10**12,
    "finney": 10**15,
    "ether": 10**18,
    "kether": 10**21,
}

_MINUTE = 60
_HOUR = 60 * _MINUTE
_DAY = 24 * _HOUR

DURATION_UNITS: dict[str, int] = {
    "seconds": 1,
    "minutes": _MINUTE,
    "hours": _HOUR,
    "days": _DAY,
    "weeks": 7 * _DAY,
    "years": 365 * _DAY,
}
# singular spellings
DURATION_UNITS.update({name[:-1]: size for name, size in list(DURATION_UNITS.items())})


# ─── Enums ───────────────────────────────────────────────────────

class QuantityKind(str, Enum):
    """Which unit table a quantity is resolved against."""
    CURRENCY = "currency"
    DURATION = "duration"


class AccountKind(str, Enum):
    """Shape of a configured stakeholder identity."""
    ADDRESS = "address"
    INDEX = "index"
    CONTRACT = "contract"


class SaleStage(str, Enum):
    """Segment of the phase table a phase belongs to."""
    PRESALE = "presale"
    TRANSITION = "transition"
    PUBLICSALE = "publicsale"
