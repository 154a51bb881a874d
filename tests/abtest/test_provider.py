"""Tests for the platform provider helper."""
import logging
from unittest.mock import Mock

import pytest
from src.abtest.errors import IntegrationUnavailable, InvalidArgument
from src.abtest.experiment import Experiment
from src.abtest.provider import (
    PlatformEventBus,
    PlatformExperience,
    PlatformHandle,
    PlatformProvider,
)
from src.abtest.schema import TrackingChannel, TriggerResult


@pytest.fixture
def platform():
    return PlatformHandle(
        experiences={
            "FROG": PlatformExperience(trigger=lambda cb: cb(1), platform_id="101"),
            "TOAD": PlatformExperience(trigger=None, platform_id="102"),
        },
        event_bus=PlatformEventBus(),
        legacy_events=[],
    )


@pytest.fixture
def provider(platform):
    return PlatformProvider(lambda: platform)


def test_trigger_calls_back(provider):
    callback = Mock()
    result = provider.trigger_experiment(Experiment("FROG"), callback)
    assert result == TriggerResult.TRIGGERED
    callback.assert_called_once_with(1)


def test_trigger_platform_unavailable(caplog):
    provider = PlatformProvider()
    callback = Mock()
    with caplog.at_level(logging.WARNING):
        result = provider.trigger_experiment(Experiment("FROG"), callback)
    assert result == TriggerResult.UNAVAILABLE
    callback.assert_not_called()
    assert "not available" in caplog.text


@pytest.mark.parametrize("eid", ["TOAD", "NEWT"])
def test_trigger_not_found(provider, eid):
    callback = Mock()
    assert provider.trigger_experiment(Experiment(eid), callback) == TriggerResult.NOT_FOUND
    callback.assert_not_called()


def test_trigger_requires_arguments(provider):
    with pytest.raises(InvalidArgument):
        provider.trigger_experiment(None, Mock())
    with pytest.raises(InvalidArgument):
        provider.trigger_experiment(Experiment("FROG"), None)


def test_track_protocol_event(provider, platform):
    provider.track_event(TrackingChannel.PROTOCOL, "checkout", {"value": 3})
    assert platform.event_bus.history == [("checkout", {"value": 3})]


def test_track_legacy_event(provider, platform):
    provider.track_event(TrackingChannel.LEGACY_VARIABLE, "checkout")
    assert platform.legacy_events == [{"action": "checkout"}]


def test_track_event_validation(provider):
    with pytest.raises(InvalidArgument):
        provider.track_event(None, "checkout")
    with pytest.raises(InvalidArgument):
        provider.track_event(TrackingChannel.PROTOCOL, "")
    with pytest.raises(InvalidArgument):
        provider.track_event("Carrier pigeon", "checkout")


def test_track_event_without_targets_warns(caplog):
    provider = PlatformProvider(lambda: PlatformHandle())
    with caplog.at_level(logging.WARNING):
        provider.track_event(TrackingChannel.PROTOCOL, "checkout")
        provider.track_event(TrackingChannel.LEGACY_VARIABLE, "checkout")
    assert caplog.text.count("could not track event: checkout") == 2


def test_platform_experiment_lookup(provider):
    assert set(provider.get_all_platform_experiments()) == {"FROG", "TOAD"}
    assert provider.get_platform_experiment_trigger("FROG") is not None
    assert provider.get_platform_experiment_trigger("NEWT") is None
    assert PlatformProvider().get_all_platform_experiments() is None


def test_traffic_allocation_logged_with_replay(provider, platform, caplog):
    """Past and future experience events are both reported."""
    bus = platform.event_bus
    bus.emit("experience", {"experience_id": "101", "traffic_allocation": 0.5})
    bus.emit("goal", {"experience_id": "101"})
    with caplog.at_level(logging.INFO):
        provider.log_triggered_experiments_with_traffic_allocation()
        bus.emit("experienceShown", {"experience_id": "102", "traffic_allocation": 0.2})
    assert 'Experience: "FROG" was triggered with traffic split: 0.5' in caplog.text
    assert 'Experience: "TOAD" was triggered with traffic split: 0.2' in caplog.text


def test_traffic_allocation_skips_missing_platform_id(platform, caplog):
    platform.experiences["NEWT"] = PlatformExperience(trigger=None)
    provider = PlatformProvider(lambda: platform)
    with caplog.at_level(logging.ERROR):
        provider.log_triggered_experiments_with_traffic_allocation()
    assert "Could not find platform id for experiment: NEWT" in caplog.text


def test_traffic_allocation_requires_event_bus():
    provider = PlatformProvider(lambda: PlatformHandle())
    with pytest.raises(IntegrationUnavailable):
        provider.log_triggered_experiments_with_traffic_allocation()


def test_event_bus_subscription_cancel():
    bus = PlatformEventBus()
    handler = Mock()
    sub = bus.on("exp", handler)
    bus.emit("experience", 1)
    sub.cancel()
    bus.emit("experience", 2)
    handler.assert_called_once_with(1)


def test_describe_logs_experiments(provider, caplog):
    with caplog.at_level(logging.INFO):
        provider.describe()
    assert "['FROG', 'TOAD']" in caplog.text
