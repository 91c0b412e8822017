"""Clock Routes: read the simulated calendar, advance it, fire events.

Invariants:
    - POST /advance with days=0 is accepted and changes nothing
    - POST /events never moves the day counter
"""

import logging

from fastapi import APIRouter, Depends

from medsim.api.dependencies import get_simulation
from medsim.schemas.clock import AdvanceRequest, ClockResponse, TriggerRequest
from medsim.services.simulation import Simulation

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/clock", tags=["clock"])


def _clock_response(sim: Simulation) -> ClockResponse:
    return ClockResponse(day=sim.clock.current_day(), date=sim.clock.current_date())


@router.get("", response_model=ClockResponse)
async def get_clock(sim: Simulation = Depends(get_simulation)):
    return _clock_response(sim)


@router.post("/advance", response_model=ClockResponse)
def advance_clock(
    body: AdvanceRequest, sim: Simulation = Depends(get_simulation),
):
    """Advance by N simulated days (stochastic events may fire).

    Plain def: a long advance runs in the threadpool, not on the event loop.
    """
    sim.clock.advance_days(body.days)
    return _clock_response(sim)


@router.post("/events", response_model=ClockResponse)
async def trigger_event(
    body: TriggerRequest, sim: Simulation = Depends(get_simulation),
):
    """Fire one named event immediately."""
    logger.info(f"Manual event requested: {body.event.value}", extra={"event": body.event.value})
    sim.clock.trigger_event(body.event)
    return _clock_response(sim)
