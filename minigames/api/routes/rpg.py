"""/api/v1/rpg — RPG projection and commands."""

from __future__ import annotations

from enum import Enum

from fastapi import APIRouter, Depends, HTTPException, Query

from minigames.api.dependencies import get_session_manager
from minigames.api.engine_manager import SessionManager
from minigames.api.schemas import KeyRequest, PositionSchema, RPGStateResponse, StepRequest
from minigames.core.commands import RPGCommand
from minigames.core.enums import RPGAction
from minigames.core.grid import OutOfBoundsError
from minigames.core.models import Vector2

router = APIRouter()


class RPGActionName(str, Enum):
    attack = "attack"
    defend = "defend"
    flee = "flee"
    buy_potion = "buy_potion"
    buy_sword = "buy_sword"
    leave_shop = "leave_shop"
    rest = "rest"
    leave_inn = "leave_inn"


_ACTION_VERBS: dict[RPGActionName, RPGAction] = {
    RPGActionName.attack: RPGAction.ATTACK,
    RPGActionName.defend: RPGAction.DEFEND,
    RPGActionName.flee: RPGAction.FLEE,
    RPGActionName.buy_potion: RPGAction.BUY_POTION,
    RPGActionName.buy_sword: RPGAction.BUY_SWORD,
    RPGActionName.leave_shop: RPGAction.LEAVE_SHOP,
    RPGActionName.rest: RPGAction.REST,
    RPGActionName.leave_inn: RPGAction.LEAVE_INN,
}


def _dispatch(manager: SessionManager, command: RPGCommand) -> RPGStateResponse:
    try:
        snap = manager.with_rpg(lambda s: s.dispatch(command))
    except (OutOfBoundsError, ValueError) as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return RPGStateResponse.from_snapshot(snap)


@router.get("/rpg", response_model=RPGStateResponse)
def get_rpg_state(manager: SessionManager = Depends(get_session_manager)) -> RPGStateResponse:
    return RPGStateResponse.from_snapshot(manager.rpg_snapshot())


@router.post("/rpg/move", response_model=RPGStateResponse)
def move(body: StepRequest, manager: SessionManager = Depends(get_session_manager)) -> RPGStateResponse:
    return _dispatch(manager, RPGCommand(RPGAction.MOVE, Vector2(body.dx, body.dy)))


@router.post("/rpg/destination", response_model=RPGStateResponse)
def set_destination(
    body: PositionSchema,
    manager: SessionManager = Depends(get_session_manager),
) -> RPGStateResponse:
    return _dispatch(manager, RPGCommand(RPGAction.SET_DESTINATION, Vector2(body.x, body.y)))


@router.post("/rpg/key", response_model=RPGStateResponse)
def press_key(body: KeyRequest, manager: SessionManager = Depends(get_session_manager)) -> RPGStateResponse:
    return _dispatch(manager, RPGCommand(RPGAction.KEY, body.key))


@router.post("/rpg/action/{action}", response_model=RPGStateResponse)
def act(action: RPGActionName, manager: SessionManager = Depends(get_session_manager)) -> RPGStateResponse:
    return _dispatch(manager, RPGCommand(_ACTION_VERBS[action]))


@router.post("/rpg/reset", response_model=RPGStateResponse)
def reset(
    new_map: bool = Query(False, description="Also regenerate the tile grid"),
    manager: SessionManager = Depends(get_session_manager),
) -> RPGStateResponse:
    manager.with_rpg(lambda s: s.reset(new_map=new_map))
    return RPGStateResponse.from_snapshot(manager.rpg_snapshot())
