"""POST /api/v1/control/{action} — game clock controls."""

from __future__ import annotations

from enum import Enum

from fastapi import APIRouter, Depends, Query

from minigames.api.dependencies import get_session_manager
from minigames.api.engine_manager import SessionManager
from minigames.api.schemas import ControlResponse

router = APIRouter()


class ControlAction(str, Enum):
    pause = "pause"
    resume = "resume"
    step = "step"
    reset = "reset"


def _respond(manager: SessionManager, status: str, message: str) -> ControlResponse:
    return ControlResponse(
        status=status, message=message,
        time_ms=manager.now_ms, next_due_ms=manager.next_due_ms,
    )


@router.post("/control/{action}", response_model=ControlResponse)
def control(
    action: ControlAction,
    manager: SessionManager = Depends(get_session_manager),
) -> ControlResponse:
    match action:
        case ControlAction.pause:
            if manager.paused:
                return _respond(manager, "noop", "Already paused.")
            manager.pause()
            return _respond(manager, "ok", "Clock paused.")

        case ControlAction.resume:
            if not manager.paused:
                return _respond(manager, "noop", "Not paused.")
            manager.resume()
            return _respond(manager, "ok", "Clock resumed.")

        case ControlAction.step:
            fired = manager.step()
            return _respond(manager, "ok", f"Advanced one frame ({fired} task(s)).")

        case ControlAction.reset:
            manager.reset()
            return _respond(manager, "ok", "Both games reset.")


@router.post("/speed", response_model=ControlResponse)
def set_speed(
    rate: float = Query(50.0, gt=1.0, le=200.0, description="Clock advances per second"),
    manager: SessionManager = Depends(get_session_manager),
) -> ControlResponse:
    manager.tick_rate = 1.0 / rate
    return _respond(manager, "ok", f"Clock rate set to {rate:.1f}/s.")
