"""Error Hierarchy: typed, categorized errors for every MedSim failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Governor and ledger operations RETURN these inside an Outcome, they never raise them
    - The API layer raises outcome.error so the global handler renders to_response()
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with MedSimError base: one FastAPI handler catches all
    - ErrorContext as dataclass: observability fields without coupling to logging
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
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    feature: str | None = None
    appointment_id: str | None = None
    debug_info: dict[str, Any] | None = None


class MedSimError(Exception):
    """Base error for all MedSim failures."""

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
                    "feature": self.context.feature,
                    "appointment_id": self.context.appointment_id,
                },
            }
        }


# ─── Feature Governance Errors ──────────────────────────────────

class UnknownFeatureError(MedSimError):
    """Feature identifier does not resolve to a FeatureId."""
    def __init__(self, name: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext(feature=name)
        super().__init__(
            f"Unknown feature: {name}",
            "UNKNOWN_FEATURE", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx, 400,
        )
        self.name = name


class MandatoryFeatureViolationError(MedSimError):
    """Attempt to deactivate a mandatory feature."""
    def __init__(self, feature: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext(feature=feature)
        super().__init__(
            f"Cannot deactivate mandatory feature: {feature}",
            "MANDATORY_FEATURE_VIOLATION", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, ctx, 409,
        )
        self.feature = feature


class IncompatibleFeaturesError(MedSimError):
    """Two mutually exclusive features would be active together."""
    def __init__(self, a: str, b: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext(feature=a)
        super().__init__(
            f"Features {a} and {b} are incompatible",
            "INCOMPATIBLE_FEATURES", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, ctx, 409,
        )
        self.a = a
        self.b = b


class RequirementUnmetError(MedSimError):
    """An active feature requires another feature that is not active."""
    def __init__(self, needs: str, requires: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext(feature=needs)
        super().__init__(
            f"Feature {needs} requires {requires}",
            "REQUIREMENT_UNMET", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, ctx, 409,
        )
        self.needs = needs
        self.requires = requires


class ValidatorVetoError(MedSimError):
    """A registered validator rejected the proposed feature set."""
    def __init__(self, reason: str, context: ErrorContext | None = None):
        super().__init__(
            f"Feature change vetoed: {reason}",
            "VALIDATOR_VETO", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 409,
        )
        self.reason = reason


# ─── Ledger Errors ───────────────────────────────────────────────

class NotFoundError(MedSimError):
    """Requested appointment or notification does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class AlreadyCancelledError(MedSimError):
    """cancel_by_id on an appointment that is already cancelled."""
    def __init__(self, appointment_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext(appointment_id=appointment_id)
        super().__init__(
            f"Appointment '{appointment_id}' is already cancelled",
            "ALREADY_CANCELLED", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, ctx, 409,
        )
        self.appointment_id = appointment_id


class CancelledAppointmentError(MedSimError):
    """reschedule_by_id on a cancelled appointment."""
    def __init__(self, appointment_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext(appointment_id=appointment_id)
        super().__init__(
            f"Appointment '{appointment_id}' is cancelled and cannot be rescheduled",
            "CANCELLED_APPOINTMENT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, ctx, 409,
        )
        self.appointment_id = appointment_id


# ─── Patient Errors ──────────────────────────────────────────────

class InvalidPatientDataError(MedSimError):
    """A patient profile or medical history update failed validation."""
    def __init__(self, field_name: str, reason: str, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid patient {field_name}: {reason}",
            "INVALID_PATIENT_DATA", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field_name = field_name
        self.reason = reason
