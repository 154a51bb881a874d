"""
Deterministic group assignment for client-side experiments.

Uses hashing of (entity_id, experiment_id) to ensure stable assignments
with configurable weights per group.
"""

import hashlib
import logging
from typing import Sequence

from .errors import InvalidArgument

logger = logging.getLogger(__name__)

N_BUCKETS = 10000


def _hash_to_bucket(entity_id: str, experiment_id: str, salt: str = "") -> int:
    """
    Deterministic hash to [0, 9999] bucket.

    Same entity + experiment_id always maps to same bucket.
    """
    key = f"{entity_id}:{experiment_id}:{salt}"
    h = hashlib.sha256(key.encode()).hexdigest()
    return int(h[:8], 16) % N_BUCKETS


def assign_group(
    entity_id: str,
    experiment_id: str,
    weights: Sequence[float] = (50, 50),
    salt: str = "",
) -> int:
    """
    Assign entity to a group index deterministically.

    Args:
        entity_id: Unique identifier of the visitor/user
        experiment_id: Experiment identifier
        weights: Relative traffic weight per group (group 0 first)
        salt: Optional salt to reshuffle buckets between experiment runs

    Returns:
        int: Index of the assigned group
    """
    if not entity_id:
        raise InvalidArgument("Missing argument: entity_id")
    if not experiment_id:
        raise InvalidArgument("Missing argument: experiment_id")
    if not weights or any(w < 0 for w in weights) or sum(weights) <= 0:
        raise InvalidArgument(f"Invalid group weights: {list(weights)}")

    bucket = _hash_to_bucket(entity_id, experiment_id, salt)
    total = float(sum(weights))
    cumulative = 0.0
    for group, weight in enumerate(weights):
        cumulative += weight / total * N_BUCKETS
        if bucket < cumulative:
            return group
    # float rounding can leave the last bucket uncovered
    return len(weights) - 1
