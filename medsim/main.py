"""MedSim API: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map MedSimError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - The Simulation is built once on startup via the lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - app.state.simulation is the composition root's single instance; routes reach it
      through the get_simulation dependency
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from medsim.api.error_handlers import register_error_handlers
from medsim.api.routes import (
    appointments,
    clock,
    features,
    health,
    notifications,
    patient,
    system_state,
)
from medsim.config import get_settings
from medsim.infrastructure.observability import setup_logging
from medsim.services.simulation import build_simulation

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    app.state.simulation = build_simulation(settings)
    logger.info("MedSim API started")
    yield
    logger.info("MedSim API shutting down")


app = FastAPI(
    title="MedSim API", version="1.0.0", lifespan=lifespan,
)

# CORS: configured from settings, not hardcoded
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes: explicit registration
app.include_router(health.router)
app.include_router(features.router)
app.include_router(clock.router)
app.include_router(appointments.router)
app.include_router(notifications.router)
app.include_router(patient.router)
app.include_router(system_state.router)

register_error_handlers(app)
