# Broadcaster.py
import enum
import queue
import threading
import time

from void.logger import get_logger
from void.render import render_fragment
from void.sse import TransportError, merge_fragments

log = get_logger("broadcaster")


class LoopState(enum.Enum):
    STREAMING = "streaming"
    CLOSED = "closed"


class BroadcastLoop:
    """
    Per-viewer ticker: scan the store, evict, render, push.

    Waiting on the cancellation event doubles as the timer, so cancelling
    wakes the thread immediately and cancel() joins it before returning.
    """

    def __init__(self, store, send, tick_interval=0.2, clock=time.time):
        self.store = store
        self.send = send
        self.tick_interval = tick_interval
        self.clock = clock
        self.state = LoopState.STREAMING
        self._cancelled = threading.Event()
        self._thread = None

    @property
    def closed(self):
        return self.state is LoopState.CLOSED

    def start(self):
        self._thread = threading.Thread(target=self.run, name="void-broadcast", daemon=True)
        self._thread.start()
        return self

    def run(self):
        while not self._cancelled.wait(self.tick_interval):
            self.tick()

    def tick(self):
        """One broadcast tick. Push failures are logged and left to the next tick."""
        now = self.clock()
        live = self.store.snapshot_and_evict(now)
        event = merge_fragments(render_fragment(live, now, self.store.evict_after))
        try:
            self.send(event)
        except TransportError as e:
            log.warning(f"⚠️ push failed, retrying next tick: {e}")
        return event

    def cancel(self):
        self._cancelled.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join()
        self.state = LoopState.CLOSED

    def __enter__(self):
        return self.start()

    def __exit__(self, exc_type, exc, tb):
        self.cancel()


def queue_sender(q):
    """
    Adapt a viewer's outbox queue to the loop's send callable.

    Every event replaces the whole feed, so a full outbox drops its oldest
    event to make room for the newest one.
    """
    def send(event):
        try:
            q.put_nowait(event)
            return
        except queue.Full:
            pass
        try:
            q.get_nowait()
            log.warning(f"⚠️ slow viewer, dropped oldest of {q.maxsize} queued events")
        except queue.Empty:
            pass
        try:
            q.put_nowait(event)
        except queue.Full:
            raise TransportError(f"outbox full ({q.maxsize} events queued)")
    return send


class EventBroadcaster:
    """Registry of the broadcast loops of all connected viewers."""

    def __init__(self, store, tick_interval=0.2, outbox_size=10):
        self.store = store
        self.tick_interval = tick_interval
        self.outbox_size = outbox_size
        self.listeners = {}
        self.lock = threading.Lock()

    def listen(self):
        """Start a broadcast loop for a new viewer and return its outbox."""
        q = queue.Queue(maxsize=self.outbox_size)
        loop = BroadcastLoop(self.store, queue_sender(q), self.tick_interval)
        with self.lock:
            self.listeners[q] = loop
            listening = len(self.listeners)
        loop.start()
        log.info(f"🎧 viewer subscribed ({listening} listening)")
        return q

    def is_listening(self, q):
        with self.lock:
            loop = self.listeners.get(q)
        return loop is not None and not loop.closed

    def forget(self, q):
        """Stop the viewer's loop; safe to call more than once."""
        with self.lock:
            loop = self.listeners.pop(q, None)
            listening = len(self.listeners)
        if loop is not None:
            loop.cancel()
            log.info(f"🛑 viewer disconnected ({listening} listening)")

    def shutdown(self):
        with self.lock:
            loops = list(self.listeners.values())
        for loop in loops:
            loop.cancel()
        log.info(f"🛑 cancelled {len(loops)} broadcast loop(s)")
