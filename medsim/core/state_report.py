"""State Report: plain-text status log and summary counts for the whole system.

Invariants:
    - Pure: inputs are snapshots, nothing is read from services
    - Report line order is fixed: status, features, future, past
    - Stats never raise; empty inputs give zeros
"""

from medsim.core.appointment import Appointment, Notification
from medsim.core.feature_set import FeatureSet


def build_state_report(
    features: FeatureSet,
    future: list[Appointment],
    past: list[Appointment],
    day: int,
) -> list[str]:
    """Line-oriented status dump consumed by automated checks."""
    lines = ["System Status: OPERATIONAL", f"Simulated Day: {day}", "Active Features:"]
    for feature in sorted(features.active, key=lambda f: f.value):
        lines.append(f"- {feature.value} ({feature.label})")
    lines.append("Future Appointments:")
    lines.extend(f"- {a}" for a in future)
    lines.append("Past Appointments:")
    lines.extend(f"- {a}" for a in past)
    return lines


def compute_ledger_stats(
    future: list[Appointment],
    past: list[Appointment],
    notifications: list[Notification],
) -> dict:
    """Summary counts for dashboards."""
    return {
        "future_total": len(future),
        "future_cancelled": sum(1 for a in future if a.cancelled),
        "past_total": len(past),
        "past_completed": sum(1 for a in past if not a.cancelled),
        "past_cancelled": sum(1 for a in past if a.cancelled),
        "notifications_total": len(notifications),
        "notifications_unread": sum(1 for n in notifications if not n.read),
    }


def compute_feature_stats(features: FeatureSet) -> dict:
    """Active feature counts, split into mandatory and optional."""
    return {
        "features_active": len(features.active),
        "features_optional": sorted(f.value for f in features.optional_active),
        "features_missing_mandatory": features.missing_mandatory,
    }
