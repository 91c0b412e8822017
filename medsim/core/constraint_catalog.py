"""Constraint Catalog: cross-tree rules between features.

Invariants:
    - Incompatibility is symmetric: adding (a, b) also records (b, a)
    - Requirements are directed: needs -> requires
    - Pair listings are sorted by identifier so evaluation order is deterministic
    - Catalog is read-only during evaluation; the governor swaps in an updated copy

Design Decisions:
    - Plain dicts of sets over a rule-object list: lookups are by feature
    - copy() before registration so a rejected rule never leaks into the live catalog
"""

from dataclasses import dataclass, field

from medsim.core.domain_types import FeatureId


@dataclass
class ConstraintCatalog:
    """Registered incompatibilities and requirements."""

    incompatible: dict[FeatureId, set[FeatureId]] = field(default_factory=dict)
    requirements: dict[FeatureId, set[FeatureId]] = field(default_factory=dict)

    def add_incompatibility(self, a: FeatureId, b: FeatureId) -> None:
        self.incompatible.setdefault(a, set()).add(b)
        self.incompatible.setdefault(b, set()).add(a)

    def add_requirement(self, needs: FeatureId, requires: FeatureId) -> None:
        self.requirements.setdefault(needs, set()).add(requires)

    def incompatible_with(self, feature: FeatureId) -> frozenset[FeatureId]:
        return frozenset(self.incompatible.get(feature, ()))

    def required_by(self, feature: FeatureId) -> frozenset[FeatureId]:
        return frozenset(self.requirements.get(feature, ()))

    def incompatible_pairs(self) -> list[tuple[FeatureId, FeatureId]]:
        """Each symmetric pair once, as (lower, higher) by identifier."""
        pairs = {
            tuple(sorted((a, b), key=lambda f: f.value))
            for a, partners in self.incompatible.items()
            for b in partners
        }
        return sorted(pairs, key=lambda p: (p[0].value, p[1].value))

    def requirement_pairs(self) -> list[tuple[FeatureId, FeatureId]]:
        pairs = [
            (needs, requires)
            for needs, targets in self.requirements.items()
            for requires in targets
        ]
        return sorted(pairs, key=lambda p: (p[0].value, p[1].value))

    def copy(self) -> "ConstraintCatalog":
        return ConstraintCatalog(
            incompatible={k: set(v) for k, v in self.incompatible.items()},
            requirements={k: set(v) for k, v in self.requirements.items()},
        )


def default_catalog() -> ConstraintCatalog:
    """Rules shipped with the product."""
    catalog = ConstraintCatalog()
    catalog.add_requirement(FeatureId.FAST_SCHEDULING, FeatureId.PREMIUM_SERVICE_ACCESS)
    return catalog
