"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - Event probabilities are validated to the closed range [0, 1]
    - get_settings() is cached (lru_cache), single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for every setting: the simulation runs with no environment at all
"""

from datetime import date
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Simulated calendar: day 0 of the clock is this date
    calendar_epoch: date = date(2025, 1, 1)

    # Stochastic events, evaluated once per simulated day
    doctor_unavailable_probability: float = 0.10
    user_ill_probability: float = 0.06
    random_seed: int | None = None

    @field_validator(
        "doctor_unavailable_probability", "user_ill_probability",
    )
    @classmethod
    def check_probability(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError("probability must be between 0 and 1")
        return v

    # Ledger rescheduling offsets, in days
    doctor_reschedule_days: int = 1
    follow_up_days: int = 7

    # Optional features switched on at startup (validated by the governor)
    initial_features: list[str] = []

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
