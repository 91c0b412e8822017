"""Feature Governor: stages, validates and atomically commits feature changes.

Invariants:
    - The active set always contains every mandatory feature
    - No registered incompatible pair is ever active together
    - Every active feature with a registered requirement has it active
    - A rejected change leaves the active set untouched (nothing is staged in place)
    - Public operations return Outcome; no governance error escapes as an exception
    - Listener and validator failures are logged, never propagated

Design Decisions:
    - Active set is a frozen FeatureSet swapped by reference on commit, so is_active()
      and active_features() read without the lock and never see a partial change
    - RLock held across stage, validate, commit and notify: listener callbacks see
      commits in order and may call back into read methods
    - Built-in rules live in core/enforce_features.py; only caller-supplied validators
      run here because they may raise
"""

import logging
import threading
from typing import Any, Callable, Iterable

from medsim.core.constraint_catalog import ConstraintCatalog, default_catalog
from medsim.core.domain_types import FeatureId, InsuranceLevel, parse_feature
from medsim.core.enforce_features import (
    check_feature_set,
    resolve_names,
    stage_change,
    validate_feature_change,
)
from medsim.core.errors import (
    IncompatibleFeaturesError,
    MedSimError,
    UnknownFeatureError,
    ValidatorVetoError,
)
from medsim.core.feature_set import FeatureDiff, FeatureSet
from medsim.core.outcome import Outcome

logger = logging.getLogger(__name__)

FeatureListener = Callable[[frozenset[FeatureId], frozenset[FeatureId]], None]
FeatureValidator = Callable[[frozenset[FeatureId], frozenset[FeatureId]], str | None]
InsuranceListener = Callable[[InsuranceLevel], None]


def _callable_name(fn: Callable) -> str:
    return getattr(fn, "__qualname__", None) or type(fn).__name__


class FeatureGovernor:
    """Owns the active feature set and the rules that guard it."""

    def __init__(self, catalog: ConstraintCatalog | None = None):
        self._lock = threading.RLock()
        self._catalog = catalog if catalog is not None else default_catalog()
        self._features = FeatureSet()
        self._listeners: list[FeatureListener] = []
        self._validators: list[FeatureValidator] = []
        self._insurance_listeners: list[InsuranceListener] = []
        self._insurance_level = InsuranceLevel.NORMAL
        self._attributes: dict[FeatureId, dict[str, Any]] = {}

    # --- Queries ---------------------------------------------------------------

    def active_features(self) -> frozenset[FeatureId]:
        return self._features.active

    def feature_set(self) -> FeatureSet:
        return self._features

    def is_active(self, feature: FeatureId) -> bool:
        return self._features.is_active(feature)

    def available_features(self) -> list[dict]:
        """Every known feature with its label and current state."""
        active = self._features.active
        return [
            {
                "id": feature.value,
                "label": feature.label,
                "mandatory": feature.mandatory,
                "active": feature in active,
            }
            for feature in FeatureId
        ]

    def catalog(self) -> ConstraintCatalog:
        with self._lock:
            return self._catalog.copy()

    # --- Change -----------------------------------------------------------------

    def propose_change(
        self,
        deactivate: Iterable["str | FeatureId"] = (),
        activate: Iterable["str | FeatureId"] = (),
    ) -> Outcome[FeatureDiff]:
        """Apply deactivations then activations as one all-or-nothing change."""
        to_deactivate, unknown_deactivate = resolve_names(deactivate)
        to_activate, unknown_activate = resolve_names(activate)
        for name in unknown_activate:
            logger.warning(
                f"Feature not found, activation dropped: {name}",
                extra={"feature": name},
            )

        with self._lock:
            previous = self._features.active
            staged = stage_change(previous, to_deactivate, to_activate)
            error = (
                validate_feature_change(
                    to_deactivate, unknown_deactivate, staged, self._catalog,
                )
                or self._run_validators(previous, staged)
            )
            if error is not None:
                logger.warning(
                    f"Feature change rejected: {error.message}",
                    extra={"error_code": error.code, "feature": error.context.feature},
                )
                return Outcome.failure(error)

            self._features = FeatureSet(staged)
            diff = FeatureDiff.between(previous, staged)
            if not diff.is_empty:
                logger.info(
                    f"Feature change committed: {diff.to_dict()}",
                )
                self._notify_listeners(diff)
            return Outcome.success(diff)

    def _run_validators(
        self, current: frozenset[FeatureId], proposed: frozenset[FeatureId],
    ) -> MedSimError | None:
        for validator in list(self._validators):
            try:
                reason = validator(current, proposed)
            except Exception as e:
                logger.error(
                    f"Feature validator {_callable_name(validator)} raised: {e}",
                    exc_info=True,
                    extra={"listener": _callable_name(validator)},
                )
                return ValidatorVetoError(
                    f"validator {_callable_name(validator)} failed ({type(e).__name__})",
                )
            if reason:
                return ValidatorVetoError(reason)
        return None

    def _notify_listeners(self, diff: FeatureDiff) -> None:
        for listener in list(self._listeners):
            try:
                listener(diff.added, diff.removed)
            except Exception as e:
                logger.error(
                    f"Feature listener {_callable_name(listener)} failed: {e}",
                    exc_info=True,
                    extra={"listener": _callable_name(listener)},
                )

    # --- Rules -------------------------------------------------------------------

    def register_constraint(
        self, feature: "str | FeatureId", incompatible_with: Iterable["str | FeatureId"],
    ) -> Outcome[None]:
        """Register symmetric incompatibilities between feature and each partner."""
        return self.register_rules(feature, incompatible_with=incompatible_with)

    def register_requirement(
        self, feature: "str | FeatureId", requires: "str | FeatureId",
    ) -> Outcome[None]:
        """Register a directed requirement: feature needs requires."""
        target = parse_feature(requires)
        if target is None:
            return Outcome.failure(UnknownFeatureError(str(requires)))
        return self.register_rules(feature, requires=[target])

    def register_rules(
        self,
        feature: "str | FeatureId",
        incompatible_with: Iterable["str | FeatureId"] = (),
        requires: Iterable["str | FeatureId"] = (),
    ) -> Outcome[None]:
        """Register incompatibilities and requirements for one feature, all or nothing.

        Every rule is added to one copy of the catalog; the copy replaces the live
        catalog only if the whole batch is valid against the live feature set.
        """
        resolved = parse_feature(feature)
        if resolved is None:
            return Outcome.failure(UnknownFeatureError(str(feature)))
        partners, unknown = resolve_names(incompatible_with)
        if unknown:
            return Outcome.failure(UnknownFeatureError(unknown[0]))
        if resolved in partners:
            return Outcome.failure(
                IncompatibleFeaturesError(resolved.value, resolved.value),
            )
        targets, unknown = resolve_names(requires)
        if unknown:
            return Outcome.failure(UnknownFeatureError(unknown[0]))

        with self._lock:
            candidate = self._catalog.copy()
            for partner in partners:
                candidate.add_incompatibility(resolved, partner)
            for target in targets:
                candidate.add_requirement(resolved, target)
            return self._swap_catalog(candidate)

    def _swap_catalog(self, candidate: ConstraintCatalog) -> Outcome[None]:
        # Caller holds the lock. A rule the live set already breaks is refused.
        error = check_feature_set(self._features.active, candidate)
        if error is not None:
            logger.warning(
                f"Constraint rejected, current features violate it: {error.message}",
                extra={"error_code": error.code},
            )
            return Outcome.failure(error)
        self._catalog = candidate
        return Outcome.success()

    def register_validator(self, validator: FeatureValidator) -> None:
        with self._lock:
            if validator not in self._validators:
                self._validators.append(validator)

    def unregister_validator(self, validator: FeatureValidator) -> None:
        with self._lock:
            if validator in self._validators:
                self._validators.remove(validator)

    def register_feature_listener(self, listener: FeatureListener) -> None:
        with self._lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

    def unregister_feature_listener(self, listener: FeatureListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    # --- Insurance level ---------------------------------------------------------

    def insurance_level(self) -> InsuranceLevel:
        return self._insurance_level

    def set_insurance_level(self, level: InsuranceLevel) -> None:
        with self._lock:
            if level == self._insurance_level:
                return
            self._insurance_level = level
            logger.info(f"Insurance level set to {level.value}")
            for listener in list(self._insurance_listeners):
                try:
                    listener(level)
                except Exception as e:
                    logger.error(
                        f"Insurance listener {_callable_name(listener)} failed: {e}",
                        exc_info=True,
                        extra={"listener": _callable_name(listener)},
                    )

    def register_insurance_listener(self, listener: InsuranceListener) -> None:
        with self._lock:
            if listener not in self._insurance_listeners:
                self._insurance_listeners.append(listener)

    # --- Feature attributes ------------------------------------------------------

    def set_feature_attribute(
        self, feature: "str | FeatureId", name: str, value: Any,
    ) -> Outcome[None]:
        resolved = parse_feature(feature)
        if resolved is None:
            return Outcome.failure(UnknownFeatureError(str(feature)))
        with self._lock:
            self._attributes.setdefault(resolved, {})[name] = value
        return Outcome.success()

    def feature_attribute(self, feature: "str | FeatureId", name: str) -> Any:
        resolved = parse_feature(feature)
        if resolved is None:
            return None
        with self._lock:
            return self._attributes.get(resolved, {}).get(name)

    def feature_attributes(self, feature: "str | FeatureId") -> Outcome[dict[str, Any]]:
        resolved = parse_feature(feature)
        if resolved is None:
            return Outcome.failure(UnknownFeatureError(str(feature)))
        with self._lock:
            return Outcome.success(dict(self._attributes.get(resolved, {})))
