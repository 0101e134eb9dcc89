"""Pydantic request/response models for the REST API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from minigames.core.models import Character, Vector2
from minigames.core.snapshot import RPGSnapshot, SnakeSnapshot


# --- Shared ---

class PositionSchema(BaseModel):
    x: int
    y: int

    @classmethod
    def from_vector(cls, v: Vector2) -> PositionSchema:
        return cls(x=v.x, y=v.y)


class StepRequest(BaseModel):
    """A unit movement vector."""

    dx: int = Field(ge=-1, le=1)
    dy: int = Field(ge=-1, le=1)


class KeyRequest(BaseModel):
    key: str = Field(description="Keyboard key name, e.g. 'ArrowUp'")


class ControlResponse(BaseModel):
    status: str
    message: str
    time_ms: int
    next_due_ms: int | None = Field(None, description="Game time of the next pending timer")


# --- RPG ---

class CharacterSchema(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    hp: int
    max_hp: int = Field(alias="maxHp")
    attack: int
    gold: int
    level: int
    xp: int

    @classmethod
    def from_character(cls, c: Character) -> CharacterSchema:
        return cls(
            name=c.name, hp=c.hp, max_hp=c.max_hp, attack=c.attack,
            gold=c.gold, level=c.level, xp=c.xp,
        )


class RPGStateResponse(BaseModel):
    time_ms: int
    mode: str
    message: str
    player: CharacterSchema
    player_pos: PositionSchema
    enemy: CharacterSchema | None = None
    enemy_pos: PositionSchema | None = None
    destination: PositionSchema | None = None
    xp_to_next: int
    grid_size: int
    tiles: list[list[str]] = Field(description="Row-major tile names, tiles[y][x]")

    @classmethod
    def from_snapshot(cls, snap: RPGSnapshot) -> RPGStateResponse:
        return cls(
            time_ms=snap.time_ms,
            mode=snap.mode.name.lower(),
            message=snap.message,
            player=CharacterSchema.from_character(snap.player),
            player_pos=PositionSchema.from_vector(snap.player_pos),
            enemy=CharacterSchema.from_character(snap.enemy) if snap.enemy else None,
            enemy_pos=PositionSchema.from_vector(snap.enemy_pos) if snap.enemy_pos else None,
            destination=PositionSchema.from_vector(snap.destination) if snap.destination else None,
            xp_to_next=snap.xp_to_next,
            grid_size=snap.grid_size,
            tiles=[[t.name.lower() for t in row] for row in snap.tiles],
        )


# --- Snake ---

class SnakeStateResponse(BaseModel):
    time_ms: int
    body: list[PositionSchema]
    food: PositionSchema
    direction: PositionSchema
    score: int
    alive: bool
    running: bool
    board_size: int

    @classmethod
    def from_snapshot(cls, snap: SnakeSnapshot) -> SnakeStateResponse:
        return cls(
            time_ms=snap.time_ms,
            body=[PositionSchema.from_vector(p) for p in snap.body],
            food=PositionSchema.from_vector(snap.food),
            direction=PositionSchema.from_vector(snap.direction),
            score=snap.score,
            alive=snap.alive,
            running=snap.running,
            board_size=snap.board_size,
        )


# --- Events ---

class EventSchema(BaseModel):
    seq: int
    time_ms: int
    event: str
    message: str
    delivered: bool


class EventsResponse(BaseModel):
    events: list[EventSchema]
    next_seq: int


# --- Config ---

class GameConfigResponse(BaseModel):
    seed: int
    rpg_grid_size: int
    map_layout: str
    path_step_ms: int
    enemy_turn_delay_ms: int
    respawn_delay_ms: int
    snake_board_size: int
    snake_tick_ms: int
    tick_rate: float
