"""Tests for the in-memory activation log."""
from datetime import datetime, timedelta

from src.abtest.activation_log import ActivationLog
from src.abtest.schema import ActivationEvent

T0 = datetime(2024, 1, 1, 12, 0, 0)


def _log():
    log = ActivationLog()
    log.record(ActivationEvent("FROG", 0, "HashAssignmentHelper", activated_at=T0))
    log.record(ActivationEvent("FROG", 1, "HashAssignmentHelper", activated_at=T0 + timedelta(hours=1)))
    log.record(ActivationEvent("FROG", 1, "HashAssignmentHelper", activated_at=T0 + timedelta(hours=2)))
    log.record(ActivationEvent("TOAD", 2, "PlatformProvider", activated_at=T0))
    return log


def test_empty_frame():
    df = ActivationLog().to_frame()
    assert df.empty
    assert list(df.columns) == ["experiment_id", "group", "helper", "activated_at", "metadata"]


def test_frame_filters():
    log = _log()
    assert len(log.to_frame()) == 4
    assert len(log.to_frame(experiment_id="FROG")) == 3
    assert len(log.to_frame(start_date=T0 + timedelta(minutes=30))) == 2
    assert len(log.to_frame(experiment_id="FROG", end_date=T0 + timedelta(hours=1))) == 2


def test_group_counts():
    log = _log()
    assert log.group_counts("FROG") == {0: 1, 1: 2}
    assert log.group_counts("NEWT") == {}


def test_summary_and_clear():
    log = _log()
    assert log.summary() == {"FROG": {0: 1, 1: 2}, "TOAD": {2: 1}}
    log.clear()
    assert len(log) == 0
    assert log.summary() == {}


def test_group_counts_are_plain_ints():
    counts = _log().group_counts("FROG")
    assert all(type(group) is int for group in counts)
