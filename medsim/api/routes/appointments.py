"""Appointment Routes: booking, cancellation, rescheduling, listings.

Invariants:
    - A booking date may be given as a calendar date or a simulated day number
    - Ledger errors (NotFound, AlreadyCancelled, CancelledAppointment) keep their codes
"""

import logging
from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, status

from medsim.api.dependencies import get_simulation
from medsim.core.appointment import Appointment
from medsim.schemas.appointments import (
    AppointmentCreate,
    AppointmentReschedule,
    AppointmentResponse,
)
from medsim.services.simulation import Simulation

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/appointments", tags=["appointments"])


def _resolve_date(sim: Simulation, when: date | None, day: int | None) -> date:
    if when is not None:
        return when
    return sim.clock.date_for_day(day)


def _to_response(appointment: Appointment) -> AppointmentResponse:
    return AppointmentResponse(**appointment.to_dict())


@router.get("/future", response_model=list[AppointmentResponse])
async def list_future(sim: Simulation = Depends(get_simulation)):
    """Upcoming appointments, earliest first."""
    return [_to_response(a) for a in sim.ledger.future_appointments()]


@router.get("/past", response_model=list[AppointmentResponse])
async def list_past(sim: Simulation = Depends(get_simulation)):
    return [_to_response(a) for a in sim.ledger.past_appointments()]


@router.post(
    "", response_model=AppointmentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_appointment(
    body: AppointmentCreate, sim: Simulation = Depends(get_simulation),
):
    when = _resolve_date(sim, body.date, body.day)
    appointment = sim.ledger.add(body.patient, body.staff, when)
    return _to_response(appointment)


@router.post("/{appointment_id}/cancel", response_model=AppointmentResponse)
async def cancel_appointment(
    appointment_id: UUID, sim: Simulation = Depends(get_simulation),
):
    outcome = sim.ledger.cancel_by_id(appointment_id)
    if not outcome.ok:
        raise outcome.error
    return _to_response(outcome.value)


@router.post("/{appointment_id}/reschedule", response_model=AppointmentResponse)
async def reschedule_appointment(
    appointment_id: UUID,
    body: AppointmentReschedule,
    sim: Simulation = Depends(get_simulation),
):
    when = _resolve_date(sim, body.date, body.day)
    outcome = sim.ledger.reschedule_by_id(appointment_id, when)
    if not outcome.ok:
        raise outcome.error
    return _to_response(outcome.value)
