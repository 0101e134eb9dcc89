"""/api/v1/snake — Snake projection and commands."""

from __future__ import annotations

from enum import Enum

from fastapi import APIRouter, Depends, HTTPException

from minigames.api.dependencies import get_session_manager
from minigames.api.engine_manager import SessionManager
from minigames.api.schemas import KeyRequest, SnakeStateResponse, StepRequest
from minigames.core.commands import SnakeCommand
from minigames.core.enums import SnakeAction
from minigames.core.models import Vector2

router = APIRouter()


class SnakeControl(str, Enum):
    start = "start"
    stop = "stop"


def _dispatch(manager: SessionManager, command: SnakeCommand) -> SnakeStateResponse:
    snap = manager.with_snake(lambda s: s.dispatch(command))
    return SnakeStateResponse.from_snapshot(snap)


@router.get("/snake", response_model=SnakeStateResponse)
def get_snake_state(manager: SessionManager = Depends(get_session_manager)) -> SnakeStateResponse:
    return SnakeStateResponse.from_snapshot(manager.snake_snapshot())


@router.post("/snake/direction", response_model=SnakeStateResponse)
def turn(body: StepRequest, manager: SessionManager = Depends(get_session_manager)) -> SnakeStateResponse:
    if abs(body.dx) + abs(body.dy) != 1:
        raise HTTPException(status_code=422, detail="direction must be a unit vector")
    return _dispatch(manager, SnakeCommand(SnakeAction.TURN, Vector2(body.dx, body.dy)))


@router.post("/snake/key", response_model=SnakeStateResponse)
def press_key(body: KeyRequest, manager: SessionManager = Depends(get_session_manager)) -> SnakeStateResponse:
    return _dispatch(manager, SnakeCommand(SnakeAction.KEY, body.key))


@router.post("/snake/{control}", response_model=SnakeStateResponse)
def control(control: SnakeControl, manager: SessionManager = Depends(get_session_manager)) -> SnakeStateResponse:
    verb = SnakeAction.START if control == SnakeControl.start else SnakeAction.STOP
    return _dispatch(manager, SnakeCommand(verb))
