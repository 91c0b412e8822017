"""Clock Schemas: advancing time and firing events."""

from datetime import date

from pydantic import BaseModel, Field

from medsim.core.domain_types import TimeEvent


class AdvanceRequest(BaseModel):
    # 0 is accepted and is a no-op
    days: int = Field(1, ge=0, le=3650)


class TriggerRequest(BaseModel):
    event: TimeEvent


class ClockResponse(BaseModel):
    day: int
    date: date
