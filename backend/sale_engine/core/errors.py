"""Error Hierarchy - typed, categorized exceptions for every sale engine failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - ConfigurationError is fatal: raised while building or loading a SaleContext
    - InvalidArgumentError is the caller's fault (400-level), never clamped
    - PrecisionLossWarning is never raised: it is built and logged by the caller
    - to_response() produces the REST envelope; no internal details leaked

Design Decisions:
    - Single hierarchy with SaleEngineError base: FastAPI global handler catches all
    - ErrorContext carries the table indexes needed to locate a configuration defect
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    CONFIGURATION = "configuration"
    VALIDATION = "validation"
    PRECISION = "precision"
    RESOURCE_NOT_FOUND = "resource_not_found"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Where in the sale tables the failure was detected."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    phase_index: int | None = None
    tier_index: int | None = None
    stakeholder_index: int | None = None
    network: str | None = None
    debug_info: dict[str, Any] | None = None


class SaleEngineError(Exception):
    """Base exception for all sale engine errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "phase_index": self.context.phase_index,
                    "tier_index": self.context.tier_index,
                    "stakeholder_index": self.context.stakeholder_index,
                    "network": self.context.network,
                },
            }
        }

    def log_extra(self) -> dict:
        """Fields surfaced by the JSON log formatter."""
        extra: dict[str, Any] = {"error_code": self.code}
        for key in ("phase_index", "tier_index", "stakeholder_index", "network"):
            val = getattr(self.context, key)
            if val is not None:
                extra[key] = val
        return extra


# ─── Configuration Errors (fatal) ───────────────────────────────

class ConfigurationError(SaleEngineError):
    """Sale tables are malformed, missing or inconsistent."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFIGURATION_ERROR", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, context, 500,
        )


# ─── Caller Errors (400-level) ──────────────────────────────────

class InvalidArgumentError(SaleEngineError):
    """Argument outside the domain the engine accepts."""
    def __init__(self, message: str, argument: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_ARGUMENT", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.argument = argument

    def log_extra(self) -> dict:
        return {**super().log_extra(), "argument": self.argument}


class ResourceNotFoundError(SaleEngineError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


# ─── Observability only ─────────────────────────────────────────

class PrecisionLossWarning(SaleEngineError):
    """Token value division left a remainder that was truncated."""
    def __init__(self, remainder: int, divisor: int, context: ErrorContext | None = None):
        super().__init__(
            f"Token value truncated toward zero (remainder {remainder}/{divisor})",
            "PRECISION_LOSS", ErrorCategory.PRECISION,
            ErrorSeverity.WARNING, context, 200,
        )
        self.remainder = remainder
        self.divisor = divisor
