"""Route Dependencies: access to the process-wide Simulation.

Invariants:
    - The Simulation is created once in the lifespan and stored on app.state
    - Tests replace it through app.dependency_overrides[get_simulation]
"""

from fastapi import Request

from medsim.services.simulation import Simulation


def get_simulation(request: Request) -> Simulation:
    return request.app.state.simulation
