"""Host bridge — forwards game events to the embedding application.

The host accepts exactly one string per event: either the bare event name
(``close_webview``) or a JSON envelope ``{"event": ..., "data": {...}}``
for events that carry a payload.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable

from minigames.utils.event_log import EventLog, GameEvent

logger = logging.getLogger(__name__)

Transport = Callable[[str], None]


def encode_message(event: str, data: dict[str, Any] | None = None) -> str:
    """Build the wire string for ``event``."""
    if data is None:
        return event
    return json.dumps({"event": event, "data": data})


class HostBridge:
    """Best-effort notification sink.

    Without a transport the message is only logged. A failing transport is
    logged and swallowed; game state never depends on delivery.
    """

    __slots__ = ("_transport", "_event_log", "_clock")

    def __init__(
        self,
        transport: Transport | None = None,
        event_log: EventLog | None = None,
        clock: Callable[[], int] | None = None,
    ) -> None:
        self._transport = transport
        self._event_log = event_log if event_log is not None else EventLog()
        self._clock = clock or (lambda: 0)

    @property
    def event_log(self) -> EventLog:
        return self._event_log

    def emit(self, event: str, data: dict[str, Any] | None = None) -> GameEvent:
        """Send ``event`` to the host and record it in the event log."""
        message = encode_message(event, data)
        delivered = False
        if self._transport is None:
            logger.info("Host bridge not available, message: %s", message)
        else:
            try:
                self._transport(message)
                delivered = True
            except Exception:
                logger.exception("Error sending to host bridge: %s", message)
        return self._event_log.append(self._clock(), event, message, delivered=delivered)
