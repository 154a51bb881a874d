"""
Helper capability used by the Manager to activate experiments.

A helper is given an experiment and a callback; it asks some assignment
authority for a group and calls the callback at most once with the result,
or never when the authority cannot be reached.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Sequence

from .assignment import assign_group
from .errors import InvalidArgument
from .schema import TriggerResult

logger = logging.getLogger(__name__)


class Helper(ABC):
    """Interface for platform-side experiment activation."""

    display_name = "Helper"

    @abstractmethod
    def trigger_experiment(
        self, experiment: Any, callback: Callable[[Any], None]
    ) -> Optional[TriggerResult]:
        """Ask for a group for ``experiment`` and hand it to ``callback``."""


class HashAssignmentHelper(Helper):
    """
    Local helper assigning groups by deterministic hashing.

    Useful when no external platform is loaded: the same entity always lands
    in the same group of the same experiment.
    """

    display_name = "HashAssignmentHelper"

    def __init__(self, entity_id: str, weights: Sequence[float] = (50, 50), salt: str = ""):
        if not entity_id:
            raise InvalidArgument("Missing argument: entity_id")
        self.entity_id = entity_id
        self.weights = tuple(weights)
        self.salt = salt

    def trigger_experiment(self, experiment, callback):
        if experiment is None:
            raise InvalidArgument("Missing argument: experiment")
        if callback is None:
            raise InvalidArgument("Missing argument: callback")

        group = assign_group(
            entity_id=self.entity_id,
            experiment_id=experiment.get_id(),
            weights=self.weights,
            salt=self.salt,
        )
        logger.info(
            f"Assigned {self.entity_id} to group {group} of experiment {experiment.get_id()}"
        )
        callback(group)
        return TriggerResult.TRIGGERED
