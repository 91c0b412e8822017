"""Health & Readiness Probes: liveness and readiness endpoints.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 until the Simulation is wired and the ledger
      is subscribed to the clock (readiness)
"""

import logging
from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


def _not_ready(reason: str) -> JSONResponse:
    logger.warning(f"Readiness check failed: {reason}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "not_ready", "reason": reason},
    )


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "medsim-api",
        "version": "1.0.0",
    }


@router.get("/ready")
async def readiness_check(request: Request):
    """Readiness probe: simulation built, ledger listening to the clock."""
    sim = getattr(request.app.state, "simulation", None)
    if sim is None:
        return _not_ready("simulation_not_initialized")
    listeners = sim.clock.bus.listener_count
    if listeners == 0:
        return _not_ready("ledger_not_subscribed")
    return {
        "status": "ready",
        "checks": {
            "simulation": "healthy",
            "day": sim.clock.current_day(),
            "time_listeners": listeners,
            "active_features": len(sim.governor.active_features()),
        },
    }
