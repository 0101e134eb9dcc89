"""Thread-safe event feed of host-bridge notifications exposed via the API."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class GameEvent:
    """A single notification as it was handed to the host bridge."""

    seq: int
    time_ms: int
    event: str
    message: str
    delivered: bool = True


class EventLog:
    """Bounded event log. Writers append; readers snapshot a slice.

    Thread-safe via a simple lock — the engine thread and request handlers
    both write, and reads are non-blocking copies.
    """

    __slots__ = ("_buffer", "_lock", "_next_seq")

    def __init__(self, maxlen: int = 1000) -> None:
        self._buffer: deque[GameEvent] = deque(maxlen=maxlen)
        self._lock = threading.Lock()
        self._next_seq = 1

    def append(self, time_ms: int, event: str, message: str, delivered: bool = True) -> GameEvent:
        with self._lock:
            entry = GameEvent(
                seq=self._next_seq, time_ms=time_ms, event=event,
                message=message, delivered=delivered,
            )
            self._next_seq += 1
            self._buffer.append(entry)
            return entry

    def since(self, seq: int) -> list[GameEvent]:
        """Return all events with sequence number >= *seq*."""
        with self._lock:
            return [e for e in self._buffer if e.seq >= seq]

    def latest(self, count: int = 50) -> list[GameEvent]:
        """Return the *count* most recent events."""
        with self._lock:
            items = list(self._buffer)
        return items[-count:]

    def __len__(self) -> int:
        with self._lock:
            return len(self._buffer)

    def clear(self) -> None:
        with self._lock:
            self._buffer.clear()
