"""Enumerations used throughout the engines."""

from __future__ import annotations

from enum import IntEnum, unique


@unique
class Tile(IntEnum):
    """Contents of a single RPG grid cell."""

    GRASS = 0
    ENEMY = 1
    SHOP = 2
    INN = 3


@unique
class GameMode(IntEnum):
    """States of the RPG state machine. Exactly one is active."""

    WORLD = 0
    COMBAT = 1
    SHOP = 2
    INN = 3


@unique
class RPGAction(IntEnum):
    """Commands accepted by the RPG dispatch interface."""

    MOVE = 0
    SET_DESTINATION = 1
    ATTACK = 2
    DEFEND = 3
    FLEE = 4
    BUY_POTION = 5
    BUY_SWORD = 6
    LEAVE_SHOP = 7
    REST = 8
    LEAVE_INN = 9
    KEY = 10


@unique
class SnakeAction(IntEnum):
    """Commands accepted by the Snake dispatch interface."""

    START = 0
    STOP = 1
    TURN = 2
    KEY = 3


@unique
class Direction(IntEnum):
    """Cardinal movement directions."""

    NORTH = 0
    EAST = 1
    SOUTH = 2
    WEST = 3


@unique
class Domain(IntEnum):
    """RNG domains for deterministic randomness isolation."""

    COMBAT = 0
    MAP_GEN = 1
    FOOD = 2
