"""Domain Types: rich types that replace bare primitives across the codebase.

Invariants:
    - FeatureId is a closed set; identifiers never change at runtime
    - Mandatory features are fixed by MANDATORY_FEATURES, never by callers
    - All valid states encoded as Enums, no raw string matching outside parse_feature

Design Decisions:
    - str Enums: serialize to JSON without custom encoders
    - parse_feature returns None for unknown names instead of raising, callers
      decide whether an unknown name is fatal
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

AppointmentId = NewType("AppointmentId", UUID)
NotificationId = NewType("NotificationId", str)


# ─── Enums ───────────────────────────────────────────────────────

class FeatureId(str, Enum):
    """Toggleable product features. Value is the wire identifier."""
    APPOINTMENTS = "APPOINTMENTS"
    MEDICAL_HISTORY = "MEDICAL_HISTORY"
    INSURANCE_LEVELS = "INSURANCE_LEVELS"
    PAYMENTS = "PAYMENTS"
    REMINDERS = "REMINDERS"
    FAST_SCHEDULING = "FAST_SCHEDULING"
    AUTOMATIC_RESCHEDULING = "AUTOMATIC_RESCHEDULING"
    PREMIUM_SERVICE_ACCESS = "PREMIUM_SERVICE_ACCESS"
    DYNAMIC_BUTTON = "DYNAMIC_BUTTON"
    DARK_MODE = "DARK_MODE"

    @property
    def label(self) -> str:
        return FEATURE_LABELS[self]

    @property
    def mandatory(self) -> bool:
        return self in MANDATORY_FEATURES


class TimeEvent(str, Enum):
    """Events emitted by the simulated clock."""
    DAY_PASSED = "DAY_PASSED"
    WEEK_PASSED = "WEEK_PASSED"
    DOCTOR_UNAVAILABLE = "DOCTOR_UNAVAILABLE"
    USER_ILL = "USER_ILL"
    MANUAL_TRIGGER = "MANUAL_TRIGGER"


class AppointmentState(str, Enum):
    """Appointment lifecycle: SCHEDULED -> CANCELLED -> HISTORY (terminal)."""
    SCHEDULED = "scheduled"
    CANCELLED = "cancelled"
    HISTORY = "history"


class InsuranceLevel(str, Enum):
    """Coverage tier of the current patient."""
    MINIMAL = "MINIMAL"
    NORMAL = "NORMAL"
    PREMIUM = "PREMIUM"


class PatientChange(str, Enum):
    """What a patient listener is told: a new profile, or an edit to the current one."""
    REPLACED = "REPLACED"
    UPDATED = "UPDATED"


# ─── Feature Registry ────────────────────────────────────────────

FEATURE_LABELS: dict[FeatureId, str] = {
    FeatureId.APPOINTMENTS: "Appointment Management",
    FeatureId.MEDICAL_HISTORY: "Personal Medical History",
    FeatureId.INSURANCE_LEVELS: "Varying Insurance Levels",
    FeatureId.PAYMENTS: "Payment Management",
    FeatureId.REMINDERS: "Medication/Appointment Reminders",
    FeatureId.FAST_SCHEDULING: "Fast Appointment Scheduling",
    FeatureId.AUTOMATIC_RESCHEDULING: "Automatic Rescheduling on Doctor Unavailability",
    FeatureId.PREMIUM_SERVICE_ACCESS: "Access to Better/Premium Services",
    FeatureId.DYNAMIC_BUTTON: "Dynamic Button Display",
    FeatureId.DARK_MODE: "Dark Mode UI Theme",
}

MANDATORY_FEATURES = frozenset({
    FeatureId.APPOINTMENTS,
    FeatureId.MEDICAL_HISTORY,
    FeatureId.INSURANCE_LEVELS,
})

# Result annotations written by the ledger
RESULT_COMPLETED = "Completed (time advanced)"
RESULT_PATIENT_ILL = "Patient reported illness"


def parse_feature(name: "str | FeatureId") -> FeatureId | None:
    """Resolve a feature identifier. Returns None for unknown names and non-strings."""
    if isinstance(name, FeatureId):
        return name
    if not isinstance(name, str):
        return None
    try:
        return FeatureId(name.strip())
    except ValueError:
        return None
