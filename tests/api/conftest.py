"""API test fixtures: FastAPI test client over a fresh, deterministic Simulation.

Invariants:
    - Every test gets its own Simulation (no state shared through app.state)
    - get_simulation dependency overridden to return that Simulation
    - The Simulation's random source never fires stochastic events

Design Decisions:
    - ASGITransport does not run the lifespan, so app.state.simulation is set here
      for the readiness probe, and restored afterwards
"""

import pytest
from httpx import ASGITransport, AsyncClient

from medsim.api.dependencies import get_simulation
from medsim.config import Settings
from medsim.main import app
from medsim.services.simulation import build_simulation


@pytest.fixture
def simulation(quiet_rng):
    return build_simulation(Settings(_env_file=None), rng=quiet_rng)


@pytest.fixture
async def client(simulation):
    """FastAPI test client with the Simulation dependency overridden."""
    app.dependency_overrides[get_simulation] = lambda: simulation
    original = getattr(app.state, "simulation", None)
    app.state.simulation = simulation

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    app.state.simulation = original
