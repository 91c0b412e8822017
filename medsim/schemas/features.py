"""Feature Schemas: feature change requests and feature listings.

Invariants:
    - Feature names stay plain strings here; the governor resolves them, so unknown
      activations can be dropped instead of failing validation
    - Blank names are stripped out before they reach the governor
"""

from typing import Any

from pydantic import BaseModel, Field, field_validator

from medsim.core.domain_types import InsuranceLevel


def _clean_names(values: list[str]) -> list[str]:
    return [v.strip() for v in values if v and v.strip()]


class FeatureChangeRequest(BaseModel):
    """Deactivations are applied before activations, all or nothing."""
    deactivate: list[str] = Field(default_factory=list, max_length=50)
    activate: list[str] = Field(default_factory=list, max_length=50)

    @field_validator("deactivate", "activate")
    @classmethod
    def strip_names(cls, v: list[str]) -> list[str]:
        return _clean_names(v)


class FeatureDiffResponse(BaseModel):
    added: list[str]
    removed: list[str]
    active: list[str]


class FeatureResponse(BaseModel):
    id: str
    label: str
    mandatory: bool
    active: bool


class ConstraintRequest(BaseModel):
    """feature excludes every entry of incompatible_with and needs every entry of requires."""
    feature: str = Field(min_length=1)
    incompatible_with: list[str] = Field(default_factory=list)
    requires: list[str] = Field(default_factory=list)

    @field_validator("incompatible_with", "requires")
    @classmethod
    def strip_names(cls, v: list[str]) -> list[str]:
        return _clean_names(v)


class InsuranceLevelBody(BaseModel):
    level: InsuranceLevel


class FeatureAttributesBody(BaseModel):
    attributes: dict[str, Any] = Field(default_factory=dict)
