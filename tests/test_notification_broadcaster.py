"""Behaviour of the in-process notification broadcaster."""

from __future__ import annotations

import random
import threading

import pytest

from app.infrastructure.notifications import CapacityExceededError, NotificationBroadcaster

SAMPLE = {
    "id": "noti-1",
    "title": "Test",
    "message": "Hello",
    "type": "info",
    "link": None,
    "createdAt": "2024-01-01T00:00:00+00:00",
}


class Recorder:
    def __init__(self) -> None:
        self.received: list[dict] = []

    def __call__(self, payload: dict) -> None:
        self.received.append(payload)


def test_publish_reaches_only_the_target_user(broadcaster):
    first, second = Recorder(), Recorder()
    broadcaster.subscribe("user-1", first)
    broadcaster.subscribe("user-2", second)

    delivered = broadcaster.publish("user-1", SAMPLE)

    assert delivered == 1
    assert first.received == [SAMPLE]
    assert second.received == []


def test_every_connection_of_a_user_receives_the_payload(broadcaster):
    listeners = [Recorder(), Recorder()]
    for listener in listeners:
        broadcaster.subscribe("user-1", listener)

    broadcaster.publish("user-1", SAMPLE)

    assert all(listener.received == [SAMPLE] for listener in listeners)


def test_publish_without_subscribers_is_a_noop(broadcaster):
    assert broadcaster.publish("nobody", SAMPLE) == 0
    assert broadcaster.active_connection_count() == 0


def test_unsubscribe_stops_delivery_and_is_idempotent(broadcaster):
    listener = Recorder()
    unsubscribe = broadcaster.subscribe("user-1", listener)

    unsubscribe()
    unsubscribe()
    broadcaster.publish("user-1", SAMPLE)

    assert listener.received == []
    assert broadcaster.active_connection_count() == 0
    assert broadcaster.connection_count("user-1") == 0


def test_unsubscribe_after_clear_does_not_fail(broadcaster):
    unsubscribe = broadcaster.subscribe("user-1", Recorder())
    broadcaster.clear()

    unsubscribe()

    assert broadcaster.active_connection_count() == 0


def test_identical_callables_are_tracked_separately(broadcaster):
    listener = Recorder()
    first = broadcaster.subscribe("user-1", listener)
    broadcaster.subscribe("user-1", listener)

    first()
    broadcaster.publish("user-1", SAMPLE)

    assert broadcaster.connection_count("user-1") == 1
    assert listener.received == [SAMPLE]


def test_fourth_connection_evicts_the_oldest(broadcaster):
    listeners = [Recorder() for _ in range(4)]
    disposers = [broadcaster.subscribe("user-1", listener) for listener in listeners]

    assert broadcaster.active_connection_count() == 3

    broadcaster.publish("user-1", SAMPLE)
    assert listeners[0].received == []
    assert [len(listener.received) for listener in listeners[1:]] == [1, 1, 1]

    # The evicted subscription's disposer must not remove anyone else.
    disposers[0]()
    assert broadcaster.active_connection_count() == 3


def test_global_cap_refuses_new_connections():
    broadcaster = NotificationBroadcaster(max_connections_per_user=3, max_total_connections=2)
    broadcaster.subscribe("user-1", Recorder())
    broadcaster.subscribe("user-2", Recorder())

    with pytest.raises(CapacityExceededError, match="Too many active connections"):
        broadcaster.subscribe("user-3", Recorder())

    assert broadcaster.active_connection_count() == 2
    assert broadcaster.connection_count("user-3") == 0


def test_global_cap_at_default_size():
    broadcaster = NotificationBroadcaster()
    for index in range(250):
        broadcaster.subscribe(f"user-{index}", Recorder())
        broadcaster.subscribe(f"user-{index}", Recorder())

    assert broadcaster.active_connection_count() == 500
    with pytest.raises(CapacityExceededError):
        broadcaster.subscribe("attacker", Recorder())


def test_failing_subscriber_does_not_block_the_others(broadcaster):
    calls: list[int] = []

    def make_listener(position: int, fail: bool):
        def listener(payload: dict) -> None:
            calls.append(position)
            if fail:
                raise RuntimeError("connection closed")

        return listener

    broadcaster.subscribe("user-1", make_listener(0, False))
    broadcaster.subscribe("user-1", make_listener(1, True))
    broadcaster.subscribe("user-1", make_listener(2, False))

    delivered = broadcaster.publish("user-1", SAMPLE)

    assert sorted(calls) == [0, 1, 2]
    assert delivered == 2


def test_publish_to_many(broadcaster):
    listeners = {user_id: Recorder() for user_id in ("user-1", "user-2", "user-3")}
    for user_id, listener in listeners.items():
        broadcaster.subscribe(user_id, listener)

    broadcaster.publish_to_many(["user-1", "user-3"], SAMPLE)

    assert listeners["user-1"].received == [SAMPLE]
    assert listeners["user-2"].received == []
    assert listeners["user-3"].received == [SAMPLE]


def test_count_matches_registered_callbacks_for_random_sequences():
    rng = random.Random(1234)
    broadcaster = NotificationBroadcaster(max_connections_per_user=3, max_total_connections=500)
    live: list = []

    for _ in range(200):
        if live and (len(live) == 3 or rng.random() < 0.5):
            live.pop(rng.randrange(len(live)))()
        else:
            live.append(broadcaster.subscribe("user-1", Recorder()))
        assert broadcaster.active_connection_count() == len(live)


def test_concurrent_subscribe_and_unsubscribe_keep_count_consistent():
    broadcaster = NotificationBroadcaster(max_connections_per_user=3, max_total_connections=500)
    barrier = threading.Barrier(8)

    def worker(index: int) -> None:
        barrier.wait()
        for _ in range(100):
            unsubscribe = broadcaster.subscribe(f"user-{index}", Recorder())
            broadcaster.publish(f"user-{index}", SAMPLE)
            unsubscribe()

    threads = [threading.Thread(target=worker, args=(index,)) for index in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert broadcaster.active_connection_count() == 0


def test_invalid_caps_are_rejected():
    with pytest.raises(ValueError):
        NotificationBroadcaster(max_connections_per_user=0)


def test_eviction_hook_runs_only_for_the_evicted_subscription():
    broadcaster = NotificationBroadcaster(max_connections_per_user=2, max_total_connections=10)
    evicted: list[str] = []

    broadcaster.subscribe("user-1", Recorder(), on_evict=lambda: evicted.append("first"))
    broadcaster.subscribe("user-1", Recorder(), on_evict=lambda: evicted.append("second"))
    broadcaster.subscribe("user-1", Recorder(), on_evict=lambda: evicted.append("third"))

    assert evicted == ["first"]
    assert broadcaster.connection_count("user-1") == 2


def test_eviction_hook_may_unsubscribe_and_its_failure_is_contained():
    broadcaster = NotificationBroadcaster(max_connections_per_user=1, max_total_connections=10)
    disposers: list = []

    def failing_hook() -> None:
        disposers[0]()
        raise RuntimeError("already gone")

    disposers.append(broadcaster.subscribe("user-1", Recorder(), on_evict=failing_hook))
    listener = Recorder()
    broadcaster.subscribe("user-1", listener)

    assert broadcaster.active_connection_count() == 1
    assert broadcaster.publish("user-1", SAMPLE) == 1
    assert listener.received == [SAMPLE]
