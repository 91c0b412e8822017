"""Feature Change Enforcement: staging and rule checks for a proposed feature set.

Invariants:
    - All functions are PURE: no IO, no locks, no side effects
    - check_* return a MedSimError on violation, None on success
    - validate_feature_change chains the checks in fixed order, first error wins:
      mandatory -> unknown deactivation -> incompatibility -> requirement
    - Names are processed in sorted textual order so results are deterministic

Design Decisions:
    - Unknown names on the deactivate side are fatal, unknown names on the activate
      side are only reported back to the caller (which logs and drops them).
      The asymmetry is long-standing behaviour and is kept as is.
    - External validators run in the governor, not here: they are caller code and
      may raise, which needs logging
"""

from typing import Iterable

from medsim.core.constraint_catalog import ConstraintCatalog
from medsim.core.domain_types import FeatureId, parse_feature
from medsim.core.errors import (
    MedSimError,
    UnknownFeatureError,
    MandatoryFeatureViolationError,
    IncompatibleFeaturesError,
    RequirementUnmetError,
)


def resolve_names(names: Iterable["str | FeatureId"]) -> tuple[list[FeatureId], list[str]]:
    """Split raw names into (known ids, unknown names), both sorted and deduplicated.

    Blank names are skipped entirely.
    """
    known: set[FeatureId] = set()
    unknown: set[str] = set()
    for name in names:
        if isinstance(name, str) and not name.strip():
            continue
        feature = parse_feature(name)
        if feature is None:
            unknown.add(str(name).strip())
        else:
            known.add(feature)
    return sorted(known, key=lambda f: f.value), sorted(unknown)


def stage_change(
    current: frozenset[FeatureId],
    deactivate: Iterable[FeatureId],
    activate: Iterable[FeatureId],
) -> frozenset[FeatureId]:
    """Deactivations first, then activations."""
    staged = set(current)
    staged.difference_update(deactivate)
    staged.update(activate)
    return frozenset(staged)


def check_mandatory_kept(deactivate: list[FeatureId]) -> MedSimError | None:
    """Rule 1: mandatory features can never be deactivated."""
    for feature in deactivate:
        if feature.mandatory:
            return MandatoryFeatureViolationError(feature.value)
    return None


def check_unknown_deactivations(unknown: list[str]) -> MedSimError | None:
    """Rule 2: every name on the deactivate side must resolve."""
    if unknown:
        return UnknownFeatureError(unknown[0])
    return None


def check_incompatibilities(
    staged: frozenset[FeatureId], catalog: ConstraintCatalog,
) -> MedSimError | None:
    """Rule 3: no two incompatible features staged together."""
    for feature in sorted(staged, key=lambda f: f.value):
        clashes = catalog.incompatible_with(feature) & staged
        if clashes:
            partner = min(clashes, key=lambda f: f.value)
            a, b = sorted((feature.value, partner.value))
            return IncompatibleFeaturesError(a, b)
    return None


def check_requirements(
    staged: frozenset[FeatureId], catalog: ConstraintCatalog,
) -> MedSimError | None:
    """Rule 4: every staged feature has its required features staged too."""
    for needs, requires in catalog.requirement_pairs():
        if needs in staged and requires not in staged:
            return RequirementUnmetError(needs.value, requires.value)
    return None


def check_feature_set(
    active: frozenset[FeatureId], catalog: ConstraintCatalog,
) -> MedSimError | None:
    """Cross-tree rules only. Used when the catalog itself changes."""
    return (
        check_incompatibilities(active, catalog)
        or check_requirements(active, catalog)
    )


def validate_feature_change(
    deactivate: list[FeatureId],
    unknown_deactivate: list[str],
    staged: frozenset[FeatureId],
    catalog: ConstraintCatalog,
) -> MedSimError | None:
    """Chain all built-in checks. Returns first error or None."""
    return (
        check_mandatory_kept(deactivate)
        or check_unknown_deactivations(unknown_deactivate)
        or check_incompatibilities(staged, catalog)
        or check_requirements(staged, catalog)
    )
