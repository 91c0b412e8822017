"""Patient Registry: owns the current patient profile and its medical history.

Invariants:
    - One RLock per registry guards the profile and the listener list
    - The profile is a frozen record swapped by reference; readers never see a partial edit
    - Edits return Outcome; invalid data is an InvalidPatientDataError value, never raised
    - Listeners hear every committed edit in order; a failing listener is logged and skipped

Design Decisions:
    - Insurance level is owned by the governor; set_insurance_level is its listener,
      so the profile copy can never disagree with the governed level
"""

import logging
import threading
from datetime import date
from typing import Callable

from medsim.core.domain_types import InsuranceLevel, PatientChange
from medsim.core.outcome import Outcome
from medsim.core.patient import (
    MedicalHistoryEntry,
    PatientProfile,
    check_history_entry,
    check_patient_details,
)

logger = logging.getLogger(__name__)

PatientListener = Callable[[PatientChange, PatientProfile], None]


class PatientRegistry:
    """The current patient and everyone watching it."""

    def __init__(self, profile: PatientProfile | None = None):
        self._lock = threading.RLock()
        self._profile = profile if profile is not None else PatientProfile()
        self._listeners: list[PatientListener] = []

    def profile(self) -> PatientProfile:
        return self._profile

    def medical_history(self) -> list[MedicalHistoryEntry]:
        return list(self._profile.medical_history)

    # --- Edits -------------------------------------------------------------------

    def replace_profile(self, profile: PatientProfile) -> Outcome[PatientProfile]:
        """Swap in a different patient. The governed insurance level is kept."""
        error = check_patient_details(profile.first_name, profile.last_name, profile.age)
        if error is not None:
            return Outcome.failure(error)
        for entry in profile.medical_history:
            error = check_history_entry(entry.date, entry.entry_type)
            if error is not None:
                return Outcome.failure(error)

        with self._lock:
            profile = profile.with_details(insurance_level=self._profile.insurance_level)
            self._commit(profile, PatientChange.REPLACED)
            return Outcome.success(profile)

    def update_details(
        self,
        first_name: str | None = None,
        last_name: str | None = None,
        age: int | None = None,
        sex: str | None = None,
        contact_method: str | None = None,
        current_medication: str | None = None,
        vaccines: str | None = None,
    ) -> Outcome[PatientProfile]:
        """Change the given fields; None leaves a field as it is."""
        error = check_patient_details(first_name, last_name, age)
        if error is not None:
            logger.info(f"Patient update rejected: {error.message}")
            return Outcome.failure(error)

        with self._lock:
            profile = self._profile.with_details(
                first_name=first_name.strip() if first_name is not None else None,
                last_name=last_name.strip() if last_name is not None else None,
                age=age,
                sex=sex,
                contact_method=contact_method,
                current_medication=current_medication,
                vaccines=vaccines,
            )
            self._commit(profile, PatientChange.UPDATED)
            return Outcome.success(profile)

    def set_insurance_level(self, level: InsuranceLevel) -> None:
        with self._lock:
            if self._profile.insurance_level == level:
                return
            self._commit(
                self._profile.with_details(insurance_level=level), PatientChange.UPDATED,
            )

    def add_medical_history_entry(
        self, when: date, entry_type: str, notes: str = "",
    ) -> Outcome[MedicalHistoryEntry]:
        error = check_history_entry(when, entry_type)
        if error is not None:
            return Outcome.failure(error)

        entry = MedicalHistoryEntry(date=when, entry_type=entry_type.strip(), notes=notes)
        with self._lock:
            self._commit(self._profile.with_history_entry(entry), PatientChange.UPDATED)
        logger.info(f"Medical history entry added: {entry.entry_type} on {when.isoformat()}")
        return Outcome.success(entry)

    def _commit(self, profile: PatientProfile, change: PatientChange) -> None:
        # Caller holds the lock
        self._profile = profile
        for listener in list(self._listeners):
            try:
                listener(change, profile)
            except Exception as e:
                name = getattr(listener, "__qualname__", None) or type(listener).__name__
                logger.error(
                    f"Patient listener {name} failed: {e}",
                    exc_info=True,
                    extra={"listener": name},
                )

    # --- Listeners ---------------------------------------------------------------

    def register_listener(self, listener: PatientListener) -> None:
        with self._lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

    def unregister_listener(self, listener: PatientListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)
