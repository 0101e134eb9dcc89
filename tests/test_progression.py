"""Tests for the XP curve and level-up loop."""

import pytest

from minigames.core.models import Character
from minigames.systems.progression import ProgressionSystem


def _hero(**kw) -> Character:
    base = dict(name="Hero", hp=100, max_hp=100, attack=20, gold=0, level=1, xp=0)
    base.update(kw)
    return Character(**base)


class TestCurve:

    def test_threshold_scales_with_level(self):
        prog = ProgressionSystem()
        assert prog.xp_to_next_level(1) == 100
        assert prog.xp_to_next_level(2) == 200
        assert prog.xp_to_next_level(7) == 700


class TestApplyXp:

    def test_threshold_rechecked_after_each_level(self):
        """250 XP at level 1: one level (100), then 150 < 200 stops the loop."""
        result, leveled = ProgressionSystem().apply_xp(_hero(), 250)
        assert leveled
        assert result.level == 2
        assert result.xp == 150

    def test_multi_level_from_one_gain(self):
        result, leveled = ProgressionSystem().apply_xp(_hero(), 300)
        assert leveled
        assert result.level == 3
        assert result.xp == 0
        assert result.max_hp == 120
        assert result.attack == 24

    def test_level_up_heal_is_clamped(self):
        result, _ = ProgressionSystem().apply_xp(_hero(hp=95), 100)
        assert result.max_hp == 110
        assert result.hp == 105

        result, _ = ProgressionSystem().apply_xp(_hero(hp=100), 100)
        assert result.hp == 110

    def test_below_threshold_unchanged(self):
        hero = _hero(xp=40)
        result, leveled = ProgressionSystem().apply_xp(hero, 20)
        assert not leveled
        assert result == _hero(xp=60)

    def test_idempotent_once_below_threshold(self):
        prog = ProgressionSystem()
        once, _ = prog.apply_xp(_hero(), 250)
        twice, leveled = prog.apply_xp(once, 0)
        assert twice == once
        assert not leveled

    def test_negative_gain_rejected(self):
        with pytest.raises(ValueError):
            ProgressionSystem().apply_xp(_hero(), -1)
