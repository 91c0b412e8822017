"""System State Route: the plain-text status report plus summary counts."""

from fastapi import APIRouter, Depends

from medsim.api.dependencies import get_simulation
from medsim.services.simulation import Simulation

router = APIRouter(prefix="/api/v1/state", tags=["state"])


@router.get("")
async def get_state(sim: Simulation = Depends(get_simulation)):
    return {
        "day": sim.clock.current_day(),
        "date": sim.clock.current_date().isoformat(),
        "active_features": sim.governor.feature_set().sorted_ids(),
        "insurance_level": sim.governor.insurance_level().value,
        "report": sim.state_report(),
        "stats": sim.stats(),
    }
