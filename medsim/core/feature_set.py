"""Feature Set: immutable snapshot of active features plus the change diff.

Invariants:
    - FeatureSet is frozen; the governor replaces it, never mutates it
    - A FeatureSet built by the governor always contains MANDATORY_FEATURES
    - FeatureDiff.added and FeatureDiff.removed are disjoint frozensets
"""

from dataclasses import dataclass, field

from medsim.core.domain_types import FeatureId, MANDATORY_FEATURES


@dataclass(frozen=True)
class FeatureSet:
    """Active feature identifiers. Pure data, query only."""

    active: frozenset[FeatureId] = field(default_factory=lambda: MANDATORY_FEATURES)

    def is_active(self, feature: FeatureId) -> bool:
        return feature in self.active

    @property
    def missing_mandatory(self) -> list[str]:
        return sorted(f.value for f in MANDATORY_FEATURES - self.active)

    @property
    def optional_active(self) -> frozenset[FeatureId]:
        return self.active - MANDATORY_FEATURES

    def sorted_ids(self) -> list[str]:
        return sorted(f.value for f in self.active)


@dataclass(frozen=True)
class FeatureDiff:
    """Result of an accepted change: what was switched on and off."""

    added: frozenset[FeatureId] = frozenset()
    removed: frozenset[FeatureId] = frozenset()

    @property
    def is_empty(self) -> bool:
        return not self.added and not self.removed

    @classmethod
    def between(cls, previous: frozenset[FeatureId], staged: frozenset[FeatureId]) -> "FeatureDiff":
        return cls(added=staged - previous, removed=previous - staged)

    def to_dict(self) -> dict:
        return {
            "added": sorted(f.value for f in self.added),
            "removed": sorted(f.value for f in self.removed),
        }
