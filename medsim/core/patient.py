"""Patient Profile: the current patient's record and medical history log.

Invariants:
    - PatientProfile and MedicalHistoryEntry are frozen; every edit builds a new value
    - medical_history is append-only and kept in insertion order
    - check_* functions are PURE and return a MedSimError on violation, None on success

Design Decisions:
    - Free-text fields (sex, contact method, medication, vaccines) are kept as given;
      only name, age and history entry type are checked
    - insurance_level mirrors the governor's level; the simulation keeps them in sync
"""

from dataclasses import dataclass, replace
from datetime import date

from medsim.core.domain_types import InsuranceLevel
from medsim.core.errors import InvalidPatientDataError, MedSimError

MAX_AGE = 150


@dataclass(frozen=True)
class MedicalHistoryEntry:
    """One dated line of the patient's medical history."""

    date: date
    entry_type: str
    notes: str = ""

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "entry_type": self.entry_type,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class PatientProfile:
    first_name: str = ""
    last_name: str = ""
    age: int = 0
    sex: str = ""
    contact_method: str = ""
    current_medication: str = ""
    vaccines: str = ""
    insurance_level: InsuranceLevel = InsuranceLevel.NORMAL
    medical_history: tuple[MedicalHistoryEntry, ...] = ()

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def with_details(self, **changes) -> "PatientProfile":
        """Copy with the given fields replaced; None values are ignored."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    def with_history_entry(self, entry: MedicalHistoryEntry) -> "PatientProfile":
        return replace(self, medical_history=self.medical_history + (entry,))

    def to_dict(self) -> dict:
        return {
            "first_name": self.first_name,
            "last_name": self.last_name,
            "full_name": self.full_name,
            "age": self.age,
            "sex": self.sex,
            "contact_method": self.contact_method,
            "current_medication": self.current_medication,
            "vaccines": self.vaccines,
            "insurance_level": self.insurance_level.value,
            "medical_history": [e.to_dict() for e in self.medical_history],
        }


# ─── Checks ──────────────────────────────────────────────────────

def check_name(field_name: str, value: str | None) -> MedSimError | None:
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        return InvalidPatientDataError(field_name, "cannot be blank")
    return None


def check_age(age: int | None) -> MedSimError | None:
    if age is None:
        return None
    if isinstance(age, bool) or not isinstance(age, int):
        return InvalidPatientDataError("age", "must be a whole number")
    if not 0 <= age <= MAX_AGE:
        return InvalidPatientDataError("age", f"must be between 0 and {MAX_AGE}")
    return None


def check_patient_details(
    first_name: str | None, last_name: str | None, age: int | None,
) -> MedSimError | None:
    """First error wins: first name, last name, age."""
    return (
        check_name("first_name", first_name)
        or check_name("last_name", last_name)
        or check_age(age)
    )


def check_history_entry(when: date, entry_type: str) -> MedSimError | None:
    if not isinstance(when, date):
        return InvalidPatientDataError("history date", "must be a calendar date")
    if not isinstance(entry_type, str) or not entry_type.strip():
        return InvalidPatientDataError("history entry type", "cannot be blank")
    return None
