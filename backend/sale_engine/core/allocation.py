"""Allocation - converts a base-currency contribution into indivisible token units.

Invariants:
    - tokens = amount * rate * 10**decimals / unit_value, one multiply-then-divide
    - Integer arithmetic only: the Decimal rate is expanded to an exact ratio
    - Division truncates toward zero; a non-zero remainder is logged as
      PrecisionLossWarning and never raised
    - 0 when rate == 0 or amount == 0; never negative
"""

import logging
from decimal import Decimal

from sale_engine.core.domain_types import WEI_PER_ETHER, Wei
from sale_engine.core.errors import InvalidArgumentError, PrecisionLossWarning

logger = logging.getLogger(__name__)


def token_value(
    rate: Decimal | int,
    amount: Wei,
    decimals: int,
    unit_value: int = WEI_PER_ETHER,
) -> int:
    """Token units bought by `amount` wei at `rate` tokens per whole base unit.

    Args:
        rate: Tokens per whole base-currency unit (e.g. 1400 per ether).
        amount: Contribution in the smallest base-currency unit.
        decimals: Token decimal places.
        unit_value: Smallest units per whole base-currency unit.

    Returns:
        Token quantity in the token's smallest unit, truncated toward zero.
    """
    _validate(rate, amount, decimals, unit_value)
    numerator, denominator = Decimal(rate).as_integer_ratio()
    dividend = amount * numerator * 10**decimals
    divisor = denominator * unit_value
    tokens, remainder = divmod(dividend, divisor)
    if remainder:
        warning = PrecisionLossWarning(remainder, divisor)
        logger.warning(warning.message, extra=warning.log_extra())
    return tokens


def _validate(rate, amount, decimals, unit_value) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidArgumentError(
            f"amount must be an int in the smallest unit, got {type(amount).__name__}",
            "amount",
        )
    if amount < 0:
        raise InvalidArgumentError(f"amount must be >= 0, got {amount}", "amount")
    if isinstance(rate, (bool, float)) or not isinstance(rate, (int, Decimal)):
        raise InvalidArgumentError(
            f"rate must be int or Decimal, got {type(rate).__name__}", "rate",
        )
    if not Decimal(rate).is_finite() or rate < 0:
        raise InvalidArgumentError(f"rate must be a finite value >= 0, got {rate}", "rate")
    if isinstance(decimals, bool) or not isinstance(decimals, int) or decimals < 0:
        raise InvalidArgumentError(f"decimals must be an int >= 0, got {decimals}", "decimals")
    if isinstance(unit_value, bool) or not isinstance(unit_value, int) or unit_value <= 0:
        raise InvalidArgumentError(
            f"unit_value must be a positive int, got {unit_value}", "unit_value",
        )
