# MessageStore.py
import threading
import time
import uuid
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Message:
    id: str
    text: str
    colour: str
    x: float
    y: float
    created: float = field(default_factory=time.time)

    def age(self, now):
        return now - self.created


class MessageStore:
    """
    Shared, lock-guarded map of live messages.

    Ingest requests insert, every viewer's broadcast loop scans and evicts.
    The lock is held only for the in-memory work, never while pushing to a viewer.
    """

    def __init__(self, evict_after=10.0):
        self.evict_after = evict_after
        self._messages = {}
        self._lock = threading.Lock()

    def insert(self, text, colour, x, y, created=None):
        """Store a new message under a fresh id and return the record."""
        msg = Message(
            id=str(uuid.uuid4()),
            text=text,
            colour=colour,
            x=x,
            y=y,
            created=time.time() if created is None else created,
        )
        with self._lock:
            self._messages[msg.id] = msg
        return msg

    def snapshot_and_evict(self, now=None):
        """
        Return the live messages at `now`, permanently dropping expired ones.

        A message is live while now - created <= evict_after.
        """
        if now is None:
            now = time.time()
        live = []
        with self._lock:
            for key, msg in list(self._messages.items()):
                if msg.age(now) > self.evict_after:
                    del self._messages[key]
                    continue
                live.append(msg)
        return live

    def __len__(self):
        with self._lock:
            return len(self._messages)
