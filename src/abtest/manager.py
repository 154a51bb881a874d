"""
Experiment Manager - registry and activation of client-side experiments.

The manager keeps experiments keyed by id, listens for each experiment's
ENROLLED signal and, on enrollment, asks its helper for a group which is then
applied back onto the experiment.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from .activation_log import ActivationLog
from .errors import (
    DuplicateExperiment,
    ExperimentNotFound,
    IntegrationUnavailable,
    InvalidArgument,
)
from .experiment import Experiment
from .helpers import Helper
from .provider import PlatformProvider
from .schema import ActivationEvent, ManagerConfig, Signal

logger = logging.getLogger(__name__)


class Manager:
    """
    Manages registered experiments and bridges enrollment to platform activation.
    """

    def __init__(
        self,
        helper: Optional[Helper] = None,
        config: Optional[ManagerConfig] = None,
        activation_log: Optional[ActivationLog] = None,
    ):
        self.helper = helper if helper is not None else PlatformProvider()
        self.config = config or ManagerConfig()
        self.activation_log = activation_log
        self.register: Dict[str, Experiment] = {}
        self._listeners: Dict[str, Callable[[Any], None]] = {}

    def set_helper(self, helper: Helper) -> None:
        """Replace the helper used for activation."""
        if helper is None:
            raise InvalidArgument("Missing argument: helper")
        self.helper = helper

    def add_experiment(self, experiment: Experiment, replace: bool = False) -> Experiment:
        """
        Register an experiment and listen for its ENROLLED signal.

        Raises DuplicateExperiment when the id is taken, unless ``replace`` is set
        or the config allows duplicates, in which case the old entry is removed first.
        """
        if experiment is None:
            raise InvalidArgument("Missing argument: experiment")
        get_id = getattr(experiment, "get_id", None)
        experiment_id = get_id() if callable(get_id) else None
        if not experiment_id:
            raise InvalidArgument("Missing argument: experiment id")

        if experiment_id in self.register:
            if self.config.reject_duplicates and not replace:
                raise DuplicateExperiment(f"Experiment already registered: {experiment_id}")
            logger.info(f"Replacing registered experiment {experiment_id}")
            self.remove_experiment(experiment_id)

        def _on_enrolled(payload=None):
            self.activate_experiment(experiment.get_id())

        experiment.on(Signal.ENROLLED, _on_enrolled)
        self._listeners[experiment_id] = _on_enrolled
        self.register[experiment_id] = experiment
        logger.info(f"Registered experiment {experiment_id}")
        return experiment

    def remove_experiment(self, experiment_id: str) -> None:
        """Unregister an experiment and drop the manager's listener. Unknown ids are ignored."""
        experiment = self.register.get(experiment_id)
        if experiment is None:
            return

        listener = self._listeners.pop(experiment_id, None)
        if listener is not None:
            experiment.remove_listener(Signal.ENROLLED, listener)
        del self.register[experiment_id]
        logger.info(f"Removed experiment {experiment_id}")

    def get_experiment(self, experiment_id: str) -> Optional[Experiment]:
        return self.register.get(experiment_id)

    def activate_experiment(self, experiment_id: str) -> bool:
        """
        Ask the helper for a group and apply it to the experiment.

        The helper decides if and when the callback fires; only its first call is
        applied. Returns False when no experiment is registered under the id, or
        when the helper raised IntegrationUnavailable; the experiment then stays
        INITIALIZING.
        """
        experiment = self.get_experiment(experiment_id)
        if experiment is None:
            if self.config.raise_on_missing:
                raise ExperimentNotFound(f"Experiment not registered: {experiment_id}")
            logger.warning(f"Cannot activate unregistered experiment: {experiment_id}")
            return False

        helper_name = describe_helper(self.helper)
        applied = []

        def _callback(group):
            if applied:
                logger.warning(
                    f"Ignoring repeated group {group} for experiment {experiment.get_id()}"
                )
                return
            applied.append(group)
            experiment.set_group(group)
            if self.activation_log is not None:
                self.activation_log.record(ActivationEvent(
                    experiment_id=experiment.get_id(),
                    group=group,
                    helper=helper_name,
                ))

        try:
            result = self.helper.trigger_experiment(experiment, _callback)
        except IntegrationUnavailable as e:
            logger.warning(f"Activation of {experiment_id} skipped: {e}")
            return False

        # no-op when the helper already called back synchronously
        experiment.mark_activating()
        logger.debug(f"Delegated {experiment_id} to {helper_name}: {result}")
        return True

    def list_experiments(self) -> List[Dict[str, Any]]:
        """List all registered experiments."""
        return [exp.to_dict() for exp in self.register.values()]


def describe_helper(helper: Any) -> str:
    """Display name of a helper, falling back to its class name."""
    name = getattr(helper, "display_name", None)
    return name if isinstance(name, str) else type(helper).__name__


default_manager = Manager()


def get_default_manager() -> Manager:
    """Shared manager for callers that do not inject their own."""
    return default_manager
