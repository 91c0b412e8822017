"""Simulation: composition root that builds and wires the single service instances.

Invariants:
    - One governor, clock, ledger and patient registry per Simulation; no global singletons
    - The ledger is subscribed to the clock exactly once, at build time
    - The ledger sees features only through FeatureGovernor.is_active
    - The patient profile follows the governor's insurance level through a listener

Design Decisions:
    - Plain dataclass container handed to the API via app.state
    - Startup features go through propose_change like any other change; a rejected
      startup set is logged and the simulation starts with mandatory features only
"""

import logging
import random
from dataclasses import dataclass

from medsim.config import Settings
from medsim.core.feature_set import FeatureSet
from medsim.core.patient import PatientProfile
from medsim.core.state_report import (
    build_state_report,
    compute_feature_stats,
    compute_ledger_stats,
)
from medsim.services.appointment_ledger import AppointmentLedger
from medsim.services.feature_governor import FeatureGovernor
from medsim.services.patient_registry import PatientRegistry
from medsim.services.time_event_clock import RandomSource, TimeEventClock

logger = logging.getLogger(__name__)


@dataclass
class Simulation:
    """The wired core: features, clock, ledger and the current patient."""
    governor: FeatureGovernor
    clock: TimeEventClock
    ledger: AppointmentLedger
    patients: PatientRegistry

    def state_report(self) -> list[str]:
        return build_state_report(
            FeatureSet(self.governor.active_features()),
            self.ledger.future_appointments(),
            self.ledger.past_appointments(),
            self.clock.current_day(),
        )

    def stats(self) -> dict:
        ledger_stats = compute_ledger_stats(
            self.ledger.future_appointments(),
            self.ledger.past_appointments(),
            self.ledger.notifications(),
        )
        return {**ledger_stats, **compute_feature_stats(self.governor.feature_set())}


def build_simulation(settings: Settings, rng: RandomSource | None = None) -> Simulation:
    """Create the services from settings and connect them."""
    if rng is None:
        rng = random.Random(settings.random_seed)

    governor = FeatureGovernor()
    clock = TimeEventClock(
        epoch=settings.calendar_epoch,
        rng=rng,
        doctor_unavailable_probability=settings.doctor_unavailable_probability,
        user_ill_probability=settings.user_ill_probability,
    )
    ledger = AppointmentLedger(
        clock,
        is_feature_active=governor.is_active,
        doctor_reschedule_days=settings.doctor_reschedule_days,
        follow_up_days=settings.follow_up_days,
    )
    clock.register_listener(ledger.on_time_event)

    patients = PatientRegistry(PatientProfile(insurance_level=governor.insurance_level()))
    governor.register_insurance_listener(patients.set_insurance_level)

    if settings.initial_features:
        outcome = governor.propose_change(activate=settings.initial_features)
        if not outcome.ok:
            logger.error(
                f"Initial features rejected: {outcome.error.message}",
                extra={"error_code": outcome.error.code},
            )

    logger.info(
        f"Simulation ready on {clock.current_date().isoformat()} with "
        f"{len(governor.active_features())} active feature(s)",
    )
    return Simulation(governor=governor, clock=clock, ledger=ledger, patients=patients)
