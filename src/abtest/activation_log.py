"""
Lightweight in-memory log of experiment activations.

Each applied group assignment is recorded as an ActivationEvent. Records can be
read back as a pandas DataFrame, filtered by experiment and time window, or
summarised as per-group counts for debugging traffic allocation.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import pandas as pd

from .schema import ActivationEvent

logger = logging.getLogger(__name__)

COLUMNS = ["experiment_id", "group", "helper", "activated_at", "metadata"]


def _unbox(value: Any) -> Any:
    """Convert numpy scalars from pandas back to plain Python values."""
    return value.item() if hasattr(value, "item") else value


class ActivationLog:
    """Append-only record of group assignments applied by a Manager."""

    def __init__(self):
        self.events: List[ActivationEvent] = []

    def record(self, event: ActivationEvent) -> None:
        self.events.append(event)
        logger.debug(f"Recorded activation of {event.experiment_id} in group {event.group}")

    def __len__(self) -> int:
        return len(self.events)

    def clear(self) -> None:
        self.events.clear()

    def to_frame(
        self,
        experiment_id: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> pd.DataFrame:
        """
        Return recorded activations, optionally filtered.

        Args:
            experiment_id: Optional filter by experiment
            start_date: Optional start of time window
            end_date: Optional end of time window

        Returns:
            DataFrame with one row per activation
        """
        df = pd.DataFrame([e.to_dict() for e in self.events], columns=COLUMNS)
        if df.empty:
            return df
        df["activated_at"] = pd.to_datetime(df["activated_at"])
        if experiment_id:
            df = df[df["experiment_id"] == experiment_id]
        if start_date:
            df = df[df["activated_at"] >= start_date]
        if end_date:
            df = df[df["activated_at"] <= end_date]
        return df.reset_index(drop=True)

    def group_counts(self, experiment_id: str) -> Dict[Any, int]:
        """Number of activations per group for one experiment."""
        df = self.to_frame(experiment_id=experiment_id)
        if df.empty:
            return {}
        counts = df["group"].value_counts().sort_index()
        return {_unbox(group): int(n) for group, n in counts.items()}

    def summary(self) -> Dict[str, Dict[Any, int]]:
        """Per-experiment group counts for every experiment in the log."""
        experiment_ids = sorted({e.experiment_id for e in self.events})
        return {eid: self.group_counts(eid) for eid in experiment_ids}
