"""Tests for the per-viewer broadcast loop and the viewer registry."""
from __future__ import annotations

import queue
import time

import pytest

from void.Broadcaster import BroadcastLoop, EventBroadcaster, LoopState, queue_sender
from void.MessageStore import MessageStore
from void.sse import TransportError


def wait_for(predicate, timeout=2.0):
    deadline = time.time() + timeout
    while time.time() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return False


def test_tick_evicts_renders_and_pushes():
    store = MessageStore(evict_after=10.0)
    store.insert("fresh", "#00ff00", 50.0, 50.0, created=95.0)
    store.insert("stale", "#ff0000", 50.0, 50.0, created=80.0)
    sent = []
    loop = BroadcastLoop(store, sent.append, clock=lambda: 100.0)

    event = loop.tick()

    assert sent == [event]
    assert event.startswith("event: datastar-merge-fragments\n")
    assert "fresh" in event
    assert "opacity:0.5;" in event
    assert "stale" not in event
    assert len(store) == 1


def test_tick_survives_push_failure():
    store = MessageStore()
    attempts = []

    def broken(event):
        attempts.append(event)
        raise TransportError("viewer gone")

    loop = BroadcastLoop(store, broken, clock=lambda: 0.0)
    loop.tick()
    loop.tick()

    assert len(attempts) == 2
    assert loop.state is LoopState.STREAMING


def test_loop_ticks_until_cancelled():
    store = MessageStore()
    sent = []
    loop = BroadcastLoop(store, sent.append, tick_interval=0.01).start()

    assert wait_for(lambda: len(sent) >= 3)
    loop.cancel()

    assert loop.state is LoopState.CLOSED
    assert not loop._thread.is_alive()
    count = len(sent)
    time.sleep(0.05)
    assert len(sent) == count


def test_loop_as_context_manager_closes_on_exit():
    sent = []
    with BroadcastLoop(MessageStore(), sent.append, tick_interval=0.01) as loop:
        assert loop.state is LoopState.STREAMING
        assert wait_for(lambda: sent)

    assert loop.closed
    assert not loop._thread.is_alive()


def test_full_outbox_keeps_newest_event():
    q = queue.Queue(maxsize=2)
    send = queue_sender(q)

    send("first")
    send("second")
    send("third")

    assert q.get_nowait() == "second"
    assert q.get_nowait() == "third"
    assert q.empty()


class StuckQueue(queue.Queue):
    def put_nowait(self, item):
        raise queue.Full


def test_queue_sender_reports_unusable_outbox():
    send = queue_sender(StuckQueue(maxsize=1))

    with pytest.raises(TransportError):
        send("event")


def test_broadcaster_listen_and_forget():
    broadcaster = EventBroadcaster(MessageStore(), tick_interval=0.01)
    q = broadcaster.listen()

    assert broadcaster.is_listening(q)
    event = q.get(timeout=2.0)
    assert event.startswith("event: datastar-merge-fragments")

    broadcaster.forget(q)
    assert not broadcaster.is_listening(q)
    assert q not in broadcaster.listeners
    # forgetting twice is harmless
    broadcaster.forget(q)


def test_slow_viewer_gets_newest_fragment():
    store = MessageStore()
    broadcaster = EventBroadcaster(store, tick_interval=0.01, outbox_size=1)
    q = broadcaster.listen()
    try:
        assert wait_for(q.full)
        store.insert("newest", "#abcdef", 50.0, 50.0)
        time.sleep(0.1)

        assert broadcaster.is_listening(q)
        event = q.get(timeout=2.0)
        assert "newest" in event
    finally:
        broadcaster.forget(q)


def test_shutdown_cancels_every_loop():
    broadcaster = EventBroadcaster(MessageStore(), tick_interval=0.01)
    queues = [broadcaster.listen() for _ in range(3)]

    broadcaster.shutdown()

    for q in queues:
        assert not broadcaster.is_listening(q)
    assert all(loop.closed for loop in broadcaster.listeners.values())
