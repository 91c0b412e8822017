"""Schema validation: appointment, clock and feature request bodies.

Tests cover:
    - AppointmentCreate strips patient, rejects whitespace-only
    - Exactly one of date/day
    - AdvanceRequest bounds
    - FeatureChangeRequest drops blank names
"""

from datetime import date

import pytest
from pydantic import ValidationError

from medsim.schemas.appointments import AppointmentCreate, AppointmentReschedule
from medsim.schemas.clock import AdvanceRequest, TriggerRequest
from medsim.schemas.features import FeatureChangeRequest


def test_patient_is_stripped():
    body = AppointmentCreate(patient="  Alice  ", day=2)
    assert body.patient == "Alice"


def test_whitespace_patient_rejected():
    with pytest.raises(ValidationError):
        AppointmentCreate(patient="   ", day=2)


def test_date_only_accepted():
    body = AppointmentReschedule(date=date(2025, 2, 1))
    assert body.day is None


def test_neither_date_nor_day_rejected():
    with pytest.raises(ValidationError, match="exactly one of date or day"):
        AppointmentReschedule()


def test_both_date_and_day_rejected():
    with pytest.raises(ValidationError):
        AppointmentReschedule(date=date(2025, 2, 1), day=3)


def test_negative_day_rejected():
    with pytest.raises(ValidationError):
        AppointmentCreate(patient="Alice", day=-1)


def test_advance_defaults_to_one_day():
    assert AdvanceRequest().days == 1


def test_advance_rejects_negative():
    with pytest.raises(ValidationError):
        AdvanceRequest(days=-2)


def test_trigger_request_parses_event():
    assert TriggerRequest(event="USER_ILL").event.value == "USER_ILL"


def test_feature_change_drops_blank_names():
    body = FeatureChangeRequest(deactivate=["", "  "], activate=[" DARK_MODE "])
    assert body.deactivate == []
    assert body.activate == ["DARK_MODE"]
