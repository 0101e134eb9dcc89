"""Key-value persistence for the RPG player character."""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from minigames.core.models import Character

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def load(self, key: str) -> str | None: ...

    def save(self, key: str, value: str) -> None: ...


class InMemoryStore:
    """Process-local store, used by tests and when no file is configured."""

    __slots__ = ("_data", "_lock")

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def load(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    def save(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value


class JsonFileStore:
    """All keys kept in one JSON object on disk, rewritten on every save.

    Saves go to a temporary file in the same directory that then replaces
    the store file, so a crash mid-write leaves the previous contents intact.
    """

    __slots__ = ("_path", "_lock")

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError):
            logger.warning("Store file %s is unreadable, starting empty", self._path)
            return {}
        if not isinstance(data, dict):
            logger.warning("Store file %s does not hold an object, starting empty", self._path)
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def load(self, key: str) -> str | None:
        with self._lock:
            return self._read_all().get(key)

    def save(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read_all()
            data[key] = value
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._write_atomic(json.dumps(data, indent=2))

    def _write_atomic(self, text: str) -> None:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self._path.name}.", suffix=".tmp", dir=self._path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(text)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


class CharacterRecord(BaseModel):
    """Stored shape of a character (camelCase keys as the host page saved them)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str
    hp: int = Field(ge=0)
    max_hp: int = Field(alias="maxHp", ge=1)
    attack: int = Field(ge=0)
    gold: int = Field(ge=0)
    level: int = Field(ge=1)
    xp: int = Field(ge=0)

    @model_validator(mode="after")
    def _hp_within_max(self) -> CharacterRecord:
        if self.hp > self.max_hp:
            raise ValueError(f"hp {self.hp} exceeds maxHp {self.max_hp}")
        return self

    @classmethod
    def from_character(cls, c: Character) -> CharacterRecord:
        return cls(
            name=c.name, hp=c.hp, max_hp=c.max_hp, attack=c.attack,
            gold=c.gold, level=c.level, xp=c.xp,
        )

    def to_character(self) -> Character:
        return Character(
            name=self.name, hp=self.hp, max_hp=self.max_hp, attack=self.attack,
            gold=self.gold, level=self.level, xp=self.xp,
        )


class CharacterRepository:
    """Saves and restores the player character under a single key."""

    __slots__ = ("_store", "_key")

    def __init__(self, store: KeyValueStore, key: str = "rpg-player-progress") -> None:
        self._store = store
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def save(self, character: Character) -> None:
        record = CharacterRecord.from_character(character)
        self._store.save(self._key, record.model_dump_json(by_alias=True))

    def load(self) -> Character | None:
        """Return the stored character, or None if missing or malformed."""
        raw = self._store.load(self._key)
        if raw is None:
            return None
        try:
            return CharacterRecord.model_validate_json(raw).to_character()
        except ValidationError as exc:
            logger.warning("Failed to load saved progress (%d error(s)), using defaults", exc.error_count())
            return None
