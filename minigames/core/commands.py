"""Command objects — the dispatch currency between the view layer and the engines."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from minigames.core.enums import RPGAction, SnakeAction


@dataclass(frozen=True, slots=True)
class RPGCommand:
    """A player intent for the RPG session.

    ``target`` is a ``Vector2`` for MOVE / SET_DESTINATION, a key name for
    KEY, and unused otherwise.
    """

    verb: RPGAction
    target: Any = None

    def __repr__(self) -> str:
        return f"RPGCommand({self.verb.name}, target={self.target})"


@dataclass(frozen=True, slots=True)
class SnakeCommand:
    """A player intent for the Snake session (``target`` as for RPGCommand)."""

    verb: SnakeAction
    target: Any = None

    def __repr__(self) -> str:
        return f"SnakeCommand({self.verb.name}, target={self.target})"
