"""Appointment Schemas: booking, rescheduling and ledger responses.

Invariants:
    - AppointmentCreate.patient: 1-200 chars, stripped, non-empty
    - Exactly one of date / day may be given; day is a simulated day number
"""

from datetime import date as date_type
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator


class _DateOrDay(BaseModel):
    date: date_type | None = None
    day: int | None = Field(None, ge=0)

    @model_validator(mode="after")
    def exactly_one_of_date_or_day(self):
        if (self.date is None) == (self.day is None):
            raise ValueError("provide exactly one of date or day")
        return self


class AppointmentCreate(_DateOrDay):
    patient: str = Field(min_length=1, max_length=200)
    staff: str | None = Field(None, max_length=200)

    @field_validator("patient")
    @classmethod
    def strip_patient(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("patient cannot be empty or whitespace")
        return v


class AppointmentReschedule(_DateOrDay):
    pass


class AppointmentResponse(BaseModel):
    id: UUID
    date: date_type
    patient: str
    staff: str | None
    cancelled: bool
    is_history: bool
    result: str
    state: str


class NotificationResponse(BaseModel):
    id: str
    message: str
    created_on: date_type
    day: int
    read: bool
