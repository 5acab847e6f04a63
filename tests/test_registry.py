import pytest

from status_relay.core.registry import SubscriberRegistry
from status_relay.errors import InvalidRequest

from helpers import decode, read_frames


def test_subscribe_queues_connected_event(registry: SubscriberRegistry):
    sub = registry.subscribe("j1")

    frames = read_frames(sub.channel)
    assert len(frames) == 1
    assert decode(frames[0]) == {
        "type": "connected",
        "jobId": "j1",
        "message": "Connected to status updates",
    }
    assert "j1" in registry
    assert registry.job_ids() == ["j1"]


def test_subscribe_requires_job_id(registry: SubscriberRegistry):
    with pytest.raises(InvalidRequest) as exc:
        registry.subscribe("")
    assert exc.value.message == "Missing jobId query parameter"
    assert len(registry) == 0


def test_publish_without_subscriber_is_not_delivered(registry: SubscriberRegistry):
    assert registry.publish("nobody", {"type": "status_update"}) is False


def test_publish_delivers_exactly_once(registry: SubscriberRegistry):
    sub = registry.subscribe("j1")
    read_frames(sub.channel)  # connected

    assert registry.publish("j1", {"type": "status_update", "n": 1}) is True

    frames = read_frames(sub.channel)
    assert [decode(f) for f in frames] == [{"type": "status_update", "n": 1}]


def test_resubscribe_replaces_and_closes_previous(registry: SubscriberRegistry):
    first = registry.subscribe("j1")
    second = registry.subscribe("j1")

    assert len(registry) == 1
    assert registry.get("j1") is second
    assert first.channel.closed
    assert not second.channel.closed

    registry.publish("j1", {"type": "status_update"})

    # old channel: connected frame then close marker, nothing after
    old_frames = read_frames(first.channel)
    assert decode(old_frames[0])["type"] == "connected"
    assert old_frames[-1] is None

    new_types = [decode(f)["type"] for f in read_frames(second.channel)]
    assert new_types == ["connected", "status_update"]


def test_release_of_replaced_subscription_keeps_newer_entry(registry: SubscriberRegistry):
    first = registry.subscribe("j1")
    second = registry.subscribe("j1")

    assert registry.release(first) is False
    assert registry.get("j1") is second

    assert registry.release(second) is True
    assert registry.job_ids() == []


def test_publish_to_closed_channel_drops_stale_entry(registry: SubscriberRegistry):
    sub = registry.subscribe("j1")
    sub.channel.close()

    assert registry.publish("j1", {"type": "status_update"}) is False
    assert "j1" not in registry


def test_close_all(registry: SubscriberRegistry):
    a = registry.subscribe("a")
    b = registry.subscribe("b")

    registry.close_all()

    assert len(registry) == 0
    assert a.channel.closed and b.channel.closed


def test_registries_are_independent():
    one, two = SubscriberRegistry(), SubscriberRegistry()
    one.subscribe("j1")

    assert "j1" in one
    assert "j1" not in two
    assert two.publish("j1", {}) is False
