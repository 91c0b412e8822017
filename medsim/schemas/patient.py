"""Patient Schemas: profile edits and medical history entries.

Invariants:
    - Names are stripped and may not be blank; omitted fields are left unchanged
    - age: 0-150
    - A history entry without a date is recorded on the current simulated date
"""

from datetime import date as date_type

from pydantic import BaseModel, Field, field_validator


class PatientUpdate(BaseModel):
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    age: int | None = Field(None, ge=0, le=150)
    sex: str | None = Field(None, max_length=20)
    contact_method: str | None = Field(None, max_length=50)
    current_medication: str | None = Field(None, max_length=500)
    vaccines: str | None = Field(None, max_length=500)

    @field_validator("first_name", "last_name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class MedicalHistoryCreate(BaseModel):
    date: date_type | None = None
    entry_type: str = Field(min_length=1, max_length=100)
    notes: str = Field("", max_length=2000)

    @field_validator("entry_type")
    @classmethod
    def strip_entry_type(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("entry_type cannot be empty or whitespace")
        return v


class MedicalHistoryResponse(BaseModel):
    date: date_type
    entry_type: str
    notes: str


class PatientResponse(BaseModel):
    first_name: str
    last_name: str
    full_name: str
    age: int
    sex: str
    contact_method: str
    current_medication: str
    vaccines: str
    insurance_level: str
    medical_history: list[MedicalHistoryResponse]
