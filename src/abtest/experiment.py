"""
Experiment entity with a synchronous observer list.

An experiment carries its identity, lifecycle status and assigned group, and
broadcasts lifecycle signals (ENROLLED, ACTIVATED) to its subscribers in the
order they subscribed.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List

from .errors import InvalidArgument
from .schema import ExperimentStatus, Signal, signal_name

logger = logging.getLogger(__name__)


@dataclass
class SignalListener:
    """Observer that forwards a single named signal to a plain callable."""
    signal: str
    listener: Callable[[Any], Any]

    def notify(self, signal: str, payload: Any = None) -> None:
        if signal_name(signal) == self.signal:
            self.listener(payload)


class Experiment:
    """One A/B experiment and its subscribers.

    ``id`` and ``group`` are read-only; the group only changes through set_group().
    """

    def __init__(self, id: str, description: str = ""):
        if not id or not isinstance(id, str):
            raise InvalidArgument("Missing argument: id")
        self._id = id
        self._group: Any = 0
        self.description = description
        self.status = ExperimentStatus.INITIALIZING
        self.observers: List[Any] = []

    def __repr__(self) -> str:
        return f"Experiment(id={self._id!r}, status={self.status.value}, group={self._group!r})"

    @property
    def id(self) -> str:
        return self._id

    @property
    def group(self) -> Any:
        return self._group

    def subscribe(self, observer: Any) -> None:
        """Add an observer exposing notify(signal, payload). No-op if already present."""
        if observer is None:
            raise InvalidArgument("Missing argument: observer")
        if not callable(getattr(observer, "notify", None)):
            raise InvalidArgument(f"Observer {observer!r} has no notify() method")
        if observer not in self.observers:
            self.observers.append(observer)

    def unsubscribe(self, observer: Any) -> None:
        if observer in self.observers:
            self.observers.remove(observer)

    def emit(self, signal: Any, payload: Any = None) -> None:
        """
        Notify every current observer, in subscription order, before returning.

        Iterates over a snapshot so observers may unsubscribe while being notified.
        """
        name = signal_name(signal)
        for observer in tuple(self.observers):
            observer.notify(name, payload)

    def on(self, signal: Any, listener: Callable[[Any], Any]) -> None:
        """Subscribe a callable to one named signal."""
        if not signal:
            raise InvalidArgument("Missing argument: signal")
        if listener is None:
            raise InvalidArgument("Missing argument: listener")
        self.subscribe(SignalListener(signal_name(signal), listener))

    def remove_listener(self, signal: Any, listener: Callable[[Any], Any]) -> None:
        self.unsubscribe(SignalListener(signal_name(signal), listener))

    def listener_count(self) -> int:
        return len(self.observers)

    def enroll(self) -> None:
        """Request activation from whoever listens for ENROLLED."""
        logger.debug(f"Experiment {self.id} enrolled")
        self.emit(Signal.ENROLLED, self.id)

    def mark_activating(self) -> None:
        if self.status == ExperimentStatus.INITIALIZING:
            self.status = ExperimentStatus.ACTIVATING

    def get_id(self) -> str:
        return self.id

    def get_status(self) -> ExperimentStatus:
        return self.status

    def get_group(self) -> Any:
        return self.group

    def set_group(self, value: Any) -> None:
        """Apply the group chosen by the platform and mark the experiment activated."""
        self._group = value
        self.status = ExperimentStatus.ACTIVATED
        logger.info(f"Experiment {self.id} activated in group {value}")
        self.emit(Signal.ACTIVATED, value)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "description": self.description,
            "status": self.status.value,
            "group": self.group,
            "observers": len(self.observers),
        }
