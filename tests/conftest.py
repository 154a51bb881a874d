"""Pytest configuration - add project root to path."""
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))


@pytest.fixture
def experiment():
    """Fresh experiment registered under the id FROG."""
    from src.abtest.experiment import Experiment
    return Experiment("FROG")
