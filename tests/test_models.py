"""Tests for Vector2, Character invariants and the key mapping."""

import pytest

from minigames.core.enums import Direction
from minigames.core.models import DIRECTION_OFFSETS, Character, Vector2, key_to_offset


def _hero(**kw) -> Character:
    base = dict(name="Hero", hp=100, max_hp=100, attack=20, gold=0, level=1, xp=0)
    base.update(kw)
    return Character(**base)


class TestVector2:

    def test_add_and_sub(self):
        assert Vector2(1, 2) + Vector2(3, -1) == Vector2(4, 1)
        assert Vector2(1, 2) - Vector2(3, -1) == Vector2(-2, 3)

    def test_wrap_folds_negative_and_overflow(self):
        assert Vector2(-1, 20).wrap(20) == Vector2(19, 0)
        assert Vector2(5, -1).wrap(20) == Vector2(5, 19)

    def test_hashable_for_set_membership(self):
        assert Vector2(3, 4) in {Vector2(3, 4)}


class TestCharacterInvariants:

    def test_damage_floors_at_zero(self):
        assert _hero().damaged(250).hp == 0

    def test_heal_clamps_to_max(self):
        assert _hero(hp=80).healed(50).hp == 100

    def test_spend_refuses_when_short(self):
        assert _hero(gold=5).spend(10) is None
        assert _hero(gold=15).spend(10).gold == 5

    def test_copies_do_not_mutate_original(self):
        original = _hero(hp=50)
        original.healed(10)
        assert original.hp == 50

    @pytest.mark.parametrize("bad", [
        dict(hp=-1),
        dict(hp=101),
        dict(gold=-1),
        dict(xp=-5),
        dict(level=0),
    ])
    def test_invalid_state_rejected(self, bad):
        with pytest.raises(ValueError):
            _hero(**bad)

    def test_alive_and_ratio(self):
        c = _hero(hp=25)
        assert c.alive
        assert c.hp_ratio == 0.25
        assert not c.damaged(25).alive


class TestKeyMapping:

    def test_arrow_keys_map_to_unit_vectors(self):
        assert key_to_offset("ArrowUp") == Vector2(0, -1)
        assert key_to_offset("ArrowDown") == Vector2(0, 1)
        assert key_to_offset("ArrowLeft") == Vector2(-1, 0)
        assert key_to_offset("ArrowRight") == Vector2(1, 0)

    def test_other_keys_ignored(self):
        assert key_to_offset("w") is None
        assert key_to_offset("Enter") is None

    def test_every_direction_is_a_unit_step(self):
        for d in Direction:
            v = DIRECTION_OFFSETS[d]
            assert abs(v.x) + abs(v.y) == 1
