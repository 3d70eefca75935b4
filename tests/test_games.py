"""Tests for the die type catalog and the game registry."""

import pytest

from yzroll.domain import games
from yzroll.domain.dice_types import DieType, get_die_type
from yzroll.domain.errors import DieTypeError, GameTypeError
from yzroll.domain.games import GameContext, ModifierRule, get_game


class TestDieTypes:
    def test_core_dice(self):
        base = get_die_type("base")
        assert (base.type_tag, base.denomination, base.faces) == ("base", "b", 6)
        assert base.is_locked(1) and base.is_locked(6)
        assert not get_die_type("skill").is_locked(1)

    def test_default_successes(self):
        skill = get_die_type("skill")
        assert [skill.successes(v) for v in range(1, 7)] == [0, 0, 0, 0, 0, 1]

    def test_twilight_success_table(self):
        a = get_die_type("a")
        assert a.successes(9) == 1
        assert a.successes(10) == 2
        assert a.is_locked(1) and a.is_locked(12)

    def test_unknown_key(self):
        with pytest.raises(DieTypeError, match='Unknown die type: "d20"'):
            get_die_type("d20")

    def test_invalid_type_tag(self):
        with pytest.raises(ValueError):
            DieType("boost", "boost", "x")

    def test_invalid_denomination(self):
        with pytest.raises(ValueError):
            DieType("odd", "skill", "xy")

    def test_too_few_faces(self):
        with pytest.raises(ValueError):
            DieType("coin", "skill", "c", faces=1)


class TestGameContext:
    def test_rules(self):
        assert get_game("myz").modifier_rule is ModifierRule.PAIRED
        assert get_game("t2k").modifier_rule is ModifierRule.LADDER
        assert get_game("br").modifier_rule is ModifierRule.ADVANTAGE
        assert get_game("vae").modifier_rule is ModifierRule.FLOOR

    def test_unknown_game(self):
        with pytest.raises(GameTypeError, match='Unknown game: "xyz"'):
            get_game("xyz")

    def test_context_passes_through(self):
        context = get_game("alien")
        assert get_game(context) is context

    def test_die_lookup_by_key_then_denomination(self):
        t2k = get_game("t2k")
        assert t2k.get_die_type("a").key == "a"
        assert t2k.get_die_type("8").key == "c"
        assert get_game("fbl").get_die_type("8").key == "artoD8"
        assert get_game("br").get_die_type("8").key == "brD8"

    def test_die_outside_game(self):
        with pytest.raises(DieTypeError):
            get_game("tales").get_die_type("base")

    def test_find_die_type(self):
        assert get_game("t2k").find_die_type("base", 12).key == "a"
        assert get_game("br").find_die_type("base", 6).key == "brD6"
        with pytest.raises(DieTypeError):
            get_game("myz").find_die_type("base", 8)


class TestRegistry:
    def test_register_custom_game(self):
        context = GameContext("test", "Test Game", ("skill", "gear"))
        try:
            games.register_game(context)
            assert get_game("test") is context
            assert context in games.list_games()
        finally:
            games.GAMES.pop("test", None)

    def test_register_unknown_die(self):
        with pytest.raises(DieTypeError):
            games.register_game(GameContext("test", "Test Game", ("skill", "d20")))
        assert "test" not in games.GAMES

    def test_register_bad_fallback(self):
        with pytest.raises(DieTypeError):
            games.register_game(GameContext("test", "Test Game", ("gear",)))
