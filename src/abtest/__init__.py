"""Client-side experiment registry and activation for A/B testing."""

from .schema import (
    ActivationEvent,
    ExperimentStatus,
    ManagerConfig,
    Signal,
    TrackingChannel,
    TriggerResult,
)
from .errors import (
    DuplicateExperiment,
    ExperimentError,
    ExperimentNotFound,
    IntegrationUnavailable,
    InvalidArgument,
)
from .experiment import Experiment
from .assignment import assign_group
from .helpers import Helper, HashAssignmentHelper
from .provider import PlatformEventBus, PlatformExperience, PlatformHandle, PlatformProvider
from .activation_log import ActivationLog
from .manager import Manager, default_manager, get_default_manager
from .report import render_registry_summary

__all__ = [
    "ActivationEvent",
    "ExperimentStatus",
    "ManagerConfig",
    "Signal",
    "TrackingChannel",
    "TriggerResult",
    "DuplicateExperiment",
    "ExperimentError",
    "ExperimentNotFound",
    "IntegrationUnavailable",
    "InvalidArgument",
    "Experiment",
    "assign_group",
    "Helper",
    "HashAssignmentHelper",
    "PlatformEventBus",
    "PlatformExperience",
    "PlatformHandle",
    "PlatformProvider",
    "ActivationLog",
    "Manager",
    "default_manager",
    "get_default_manager",
    "render_registry_summary",
]
