"""/api/v1/events and /api/v1/bridge — host-bridge notifications."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Path, Query

from minigames.api.dependencies import get_session_manager
from minigames.api.engine_manager import SessionManager
from minigames.api.schemas import EventSchema, EventsResponse

router = APIRouter()


def _to_schema(e) -> EventSchema:
    return EventSchema(seq=e.seq, time_ms=e.time_ms, event=e.event, message=e.message, delivered=e.delivered)


@router.get("/events", response_model=EventsResponse)
def get_events(
    since: int | None = Query(None, ge=1, description="Return events with seq >= since; omit for the most recent"),
    limit: int = Query(100, ge=1, le=1000),
    manager: SessionManager = Depends(get_session_manager),
) -> EventsResponse:
    if since is None:
        events = manager.event_log.latest(limit)
    else:
        events = manager.event_log.since(since)[:limit]
    next_seq = events[-1].seq + 1 if events else (since or 1)
    return EventsResponse(events=[_to_schema(e) for e in events], next_seq=next_seq)


@router.post("/bridge/{event}", response_model=EventSchema)
def send_event(
    event: str = Path(min_length=1, max_length=64, pattern=r"^[A-Za-z0-9_.-]+$"),
    data: dict[str, Any] | None = Body(None),
    manager: SessionManager = Depends(get_session_manager),
) -> EventSchema:
    """Forward an arbitrary event; without a body it is sent as a bare name."""
    return _to_schema(manager.emit(event, data))
