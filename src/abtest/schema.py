"""
Data models for client-side experiment orchestration.

Enums for experiment lifecycle, signals and provider results, plus dataclass
schemas for manager configuration and activation events.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


class ExperimentStatus(str, Enum):
    """Experiment lifecycle state."""
    INITIALIZING = "INITIALIZING"
    ACTIVATING = "ACTIVATING"  # delegated to helper, waiting for a group
    ACTIVATED = "ACTIVATED"


class Signal(str, Enum):
    """Signals an experiment emits to its observers."""
    ENROLLED = "ENROLLED"
    ACTIVATED = "ACTIVATED"


class TriggerResult(str, Enum):
    """Outcome of asking a platform provider to trigger an experiment."""
    TRIGGERED = "triggered"
    UNAVAILABLE = "unavailable"  # platform handle missing
    NOT_FOUND = "not_found"  # platform has no trigger for this experiment


class TrackingChannel(str, Enum):
    """Channel used to send tracking events to the platform."""
    PROTOCOL = "Protocol"
    LEGACY_VARIABLE = "LegacyVariable"


@dataclass
class ManagerConfig:
    """Registry policy switches."""
    reject_duplicates: bool = True
    raise_on_missing: bool = False


@dataclass
class ActivationEvent:
    """Event recording a group assignment applied to an experiment."""
    experiment_id: str
    group: Any
    helper: str = ""
    activated_at: datetime = field(default_factory=datetime.utcnow)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "experiment_id": self.experiment_id,
            "group": self.group,
            "helper": self.helper,
            "activated_at": self.activated_at,
            "metadata": str(self.metadata) if self.metadata else "",
        }


def signal_name(signal: Optional[Any]) -> Optional[str]:
    """Normalize a Signal member or plain string to its string name."""
    if isinstance(signal, Enum):
        return signal.value
    return signal
