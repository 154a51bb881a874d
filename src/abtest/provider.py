"""
Platform Provider.

Helper that integrates with an external experimentation platform. The platform
is reached through an injected lookup returning a PlatformHandle (or None when
the platform script has not loaded), instead of reading ambient globals.

Traffic allocation: decided by the platform; the same user gets a consistent group.

Data tracking: events go either to the platform event bus (PROTOCOL) or to the
legacy variable event list (LEGACY_VARIABLE).
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from .errors import IntegrationUnavailable, InvalidArgument
from .helpers import Helper
from .schema import TrackingChannel, TriggerResult

logger = logging.getLogger(__name__)

Trigger = Callable[[Callable[[Any], None]], Any]


class _BusSubscription:
    """Handle returned by PlatformEventBus.on(); replay() re-delivers history."""

    def __init__(self, bus: "PlatformEventBus", pattern: re.Pattern, handler: Callable[[Any], Any]):
        self._bus = bus
        self.pattern = pattern
        self.handler = handler

    def replay(self) -> "_BusSubscription":
        for name, value in list(self._bus.history):
            if self.pattern.search(name):
                self.handler(value)
        return self

    def cancel(self) -> None:
        if self in self._bus.subscriptions:
            self._bus.subscriptions.remove(self)


class PlatformEventBus:
    """In-process stand-in for the platform's event emitter."""

    def __init__(self):
        self.history: List[Tuple[str, Any]] = []
        self.subscriptions: List[_BusSubscription] = []

    def emit(self, name: str, value: Any = None) -> None:
        self.history.append((name, value))
        for sub in list(self.subscriptions):
            if sub.pattern.search(name):
                sub.handler(value)

    def on(self, pattern: Union[str, re.Pattern], handler: Callable[[Any], Any]) -> _BusSubscription:
        sub = _BusSubscription(self, re.compile(pattern), handler)
        self.subscriptions.append(sub)
        return sub


@dataclass
class PlatformExperience:
    """A live experiment as exposed by the platform."""
    trigger: Optional[Trigger] = None
    platform_id: Optional[str] = None


@dataclass
class PlatformHandle:
    """What the platform exposes once loaded."""
    experiences: Optional[Dict[str, PlatformExperience]] = field(default_factory=dict)
    event_bus: Optional[PlatformEventBus] = None
    legacy_events: Optional[List[Dict[str, Any]]] = None


class PlatformProvider(Helper):
    """Helper backed by an external experimentation platform."""

    display_name = "PlatformProvider"

    def __init__(self, platform_lookup: Optional[Callable[[], Optional[PlatformHandle]]] = None):
        self._platform_lookup = platform_lookup or (lambda: None)
        self.logger = logger

    def trigger_experiment(self, experiment, callback) -> TriggerResult:
        """
        Inform the platform an experiment has been triggered.

        The platform calls ``callback`` with the group the user has been assigned to.

        Args:
            experiment: Experiment to trigger (its id is the platform key)
            callback: Called by the platform once it has triggered the experience

        Returns:
            TriggerResult describing whether the platform was reached
        """
        if experiment is None:
            raise InvalidArgument("Missing argument: experiment")
        if callback is None:
            raise InvalidArgument("Missing argument: callback")

        experiment_id = experiment.get_id()
        if self.get_platform() is None:
            self.logger.warning("Platform handle not available. Unable to continue.")
            return TriggerResult.UNAVAILABLE

        trigger = self.get_platform_experiment_trigger(experiment_id)
        if trigger is None:
            self.logger.warning(
                f'"{experiment_id}" experiment trigger could not be found on the platform, '
                f"so could not be triggered."
            )
            return TriggerResult.NOT_FOUND

        trigger(callback)
        return TriggerResult.TRIGGERED

    def track_event(self, channel: TrackingChannel, name: str, value: Any = None) -> None:
        """Send an event to the platform through the given channel."""
        if not channel:
            raise InvalidArgument("Missing argument: channel")
        if not name:
            raise InvalidArgument("Missing argument: name")

        if channel == TrackingChannel.PROTOCOL:
            self._track_protocol_event(name, value)
        elif channel == TrackingChannel.LEGACY_VARIABLE:
            self._track_legacy_event(name)
        else:
            raise InvalidArgument(f"Cannot track event with unknown channel: {channel}")

    def _track_protocol_event(self, name: str, value: Any) -> None:
        platform = self.get_platform()
        if platform is None or platform.event_bus is None:
            self.logger.warning(
                f"Platform event bus could not be found so could not track event: {name}. "
                f"Live experiment results could be impacted."
            )
            return

        platform.event_bus.emit(name, value)
        self.logger.debug(f"Tracking protocol event: {name} {value}")

    def _track_legacy_event(self, name: str) -> None:
        platform = self.get_platform()
        if platform is None or platform.legacy_events is None:
            self.logger.warning(
                f"Platform legacy event list could not be found so could not track event: {name}. "
                f"Live experiment results could be impacted."
            )
            return

        platform.legacy_events.append({"action": name})
        self.logger.debug(f"Tracking legacy event: {name}")

    def get_all_platform_experiments(self) -> Optional[Dict[str, PlatformExperience]]:
        platform = self.get_platform()
        if platform is not None and platform.experiences:
            return platform.experiences
        return None

    def get_platform_experiment_trigger(self, experiment_id: str) -> Optional[Trigger]:
        """Return the platform trigger for ``experiment_id`` if the platform knows it."""
        experiences = self.get_all_platform_experiments()
        if experiences and experiment_id in experiences:
            return experiences[experiment_id].trigger
        return None

    def log_triggered_experiments_with_traffic_allocation(self) -> None:
        """
        Log every triggered experiment with the traffic allocation of the user's group.

        Helpful when debugging traffic allocation config changes.
        """
        experiences = self.get_all_platform_experiments() or {}
        platform_to_experiment_id = {}
        for experiment_id, experience in experiences.items():
            if not experience.platform_id:
                self.logger.error(f"Could not find platform id for experiment: {experiment_id}")
                continue
            platform_to_experiment_id[experience.platform_id] = experiment_id

        platform = self.get_platform()
        if platform is None or platform.event_bus is None:
            raise IntegrationUnavailable(
                "Platform event bus could not be found so cannot find traffic allocation"
            )

        def _on_experience(response):
            response = response or {}
            experiment_id = platform_to_experiment_id.get(response.get("experience_id"))
            if experiment_id:
                self.logger.info(
                    f'Experience: "{experiment_id}" was triggered with traffic split: '
                    f'{response.get("traffic_allocation")}'
                )

        platform.event_bus.on(r"experience", _on_experience).replay()

    def describe(self) -> None:
        """Log live experiments known to the platform."""
        experiences = self.get_all_platform_experiments() or {}
        self.logger.info(f"Platform live experiments: {sorted(experiences)}")

    def get_platform(self) -> Optional[PlatformHandle]:
        return self._platform_lookup()
