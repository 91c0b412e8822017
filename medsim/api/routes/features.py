"""Feature Routes: listing, governed changes, constraints, insurance, attributes.

Invariants:
    - Every change goes through FeatureGovernor.propose_change (no direct set mutation)
    - A rejected change returns the governor's error envelope and changes nothing
    - Unknown names in activate are dropped, unknown names in deactivate are a 400
"""

import logging

from fastapi import APIRouter, Depends

from medsim.api.dependencies import get_simulation
from medsim.schemas.features import (
    ConstraintRequest,
    FeatureAttributesBody,
    FeatureChangeRequest,
    FeatureDiffResponse,
    FeatureResponse,
    InsuranceLevelBody,
)
from medsim.services.simulation import Simulation

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/features", tags=["features"])


@router.get("", response_model=list[FeatureResponse])
async def list_features(sim: Simulation = Depends(get_simulation)):
    """All features with label, mandatory flag and current state."""
    return sim.governor.available_features()


@router.post("/changes", response_model=FeatureDiffResponse)
async def change_features(
    body: FeatureChangeRequest, sim: Simulation = Depends(get_simulation),
):
    """Apply deactivations then activations atomically."""
    outcome = sim.governor.propose_change(body.deactivate, body.activate)
    if not outcome.ok:
        raise outcome.error
    diff = outcome.value.to_dict()
    return FeatureDiffResponse(
        added=diff["added"],
        removed=diff["removed"],
        active=sim.governor.feature_set().sorted_ids(),
    )


@router.post("/constraints")
async def register_constraints(
    body: ConstraintRequest, sim: Simulation = Depends(get_simulation),
):
    """Register incompatibilities and requirements for one feature, all or nothing."""
    outcome = sim.governor.register_rules(
        body.feature, incompatible_with=body.incompatible_with, requires=body.requires,
    )
    if not outcome.ok:
        raise outcome.error

    catalog = sim.governor.catalog()
    return {
        "incompatible": [[a.value, b.value] for a, b in catalog.incompatible_pairs()],
        "requirements": [[a.value, b.value] for a, b in catalog.requirement_pairs()],
    }


@router.get("/insurance-level")
async def get_insurance_level(sim: Simulation = Depends(get_simulation)):
    return {"level": sim.governor.insurance_level().value}


@router.put("/insurance-level")
async def set_insurance_level(
    body: InsuranceLevelBody, sim: Simulation = Depends(get_simulation),
):
    sim.governor.set_insurance_level(body.level)
    return {"level": sim.governor.insurance_level().value}


@router.get("/{feature}/attributes")
async def get_feature_attributes(
    feature: str, sim: Simulation = Depends(get_simulation),
):
    outcome = sim.governor.feature_attributes(feature)
    if not outcome.ok:
        raise outcome.error
    return {"feature": feature, "attributes": outcome.value}


@router.put("/{feature}/attributes")
async def set_feature_attributes(
    feature: str,
    body: FeatureAttributesBody,
    sim: Simulation = Depends(get_simulation),
):
    for name, value in body.attributes.items():
        outcome = sim.governor.set_feature_attribute(feature, name, value)
        if not outcome.ok:
            raise outcome.error
    outcome = sim.governor.feature_attributes(feature)
    if not outcome.ok:
        raise outcome.error
    return {"feature": feature, "attributes": outcome.value}
