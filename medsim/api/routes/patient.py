"""Patient Routes: the current patient's profile and medical history.

Invariants:
    - Profile edits go through PatientRegistry; a rejected edit changes nothing
    - Insurance level is read here but changed only through /features/insurance-level
"""

import logging

from fastapi import APIRouter, Depends, status

from medsim.api.dependencies import get_simulation
from medsim.schemas.patient import (
    MedicalHistoryCreate,
    MedicalHistoryResponse,
    PatientResponse,
    PatientUpdate,
)
from medsim.services.simulation import Simulation

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/patient", tags=["patient"])


@router.get("", response_model=PatientResponse)
async def get_patient(sim: Simulation = Depends(get_simulation)):
    return sim.patients.profile().to_dict()


@router.patch("", response_model=PatientResponse)
async def update_patient(
    body: PatientUpdate, sim: Simulation = Depends(get_simulation),
):
    """Change only the fields present in the body."""
    outcome = sim.patients.update_details(**body.model_dump(exclude_none=True))
    if not outcome.ok:
        raise outcome.error
    return outcome.value.to_dict()


@router.get("/history", response_model=list[MedicalHistoryResponse])
async def list_medical_history(sim: Simulation = Depends(get_simulation)):
    """Oldest entry first."""
    return [entry.to_dict() for entry in sim.patients.medical_history()]


@router.post(
    "/history", response_model=MedicalHistoryResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_medical_history_entry(
    body: MedicalHistoryCreate, sim: Simulation = Depends(get_simulation),
):
    when = body.date if body.date is not None else sim.clock.current_date()
    outcome = sim.patients.add_medical_history_entry(when, body.entry_type, body.notes)
    if not outcome.ok:
        raise outcome.error
    return outcome.value.to_dict()
