"""
Unit tests for item_config.py and the level helpers in core/constants.py.
"""
import logging

import pytest

from genshin_calc.core.constants import (
    LEVEL_BREAKPOINTS,
    get_level_breakpoint_index,
    interpolate_level_curve,
)
from genshin_calc.item_config import (
    ItemConfigType,
    bool_config,
    config_from_dict,
    float_config,
    int_config,
)

ITEMS = [
    bool_config("active", "Active"),
    float_config("rate", "Rate", 0.0, 1.0, 0.5),
    int_config("stack", "Stacks", 0, 4, 2),
]


class TestCoerce:
    """Loose value conversion per item type."""

    @pytest.mark.parametrize("raw,expected", [
        ("true", True), ("YES", True), ("0", False), ("off", False), ("", False), (1, True), (0, False),
    ])
    def test_bool(self, raw, expected):
        assert bool_config("x", "X").coerce(raw) is expected

    def test_bool_unparseable(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert bool_config("x", "X", default=False).coerce("maybe") is False
        assert "maybe" in caplog.text

    def test_float_clamped(self):
        item = float_config("rate", "Rate", 0.0, 1.0, 0.5)
        assert item.coerce("0.25") == 0.25
        assert item.coerce(3) == 1.0
        assert item.coerce(-1) == 0.0

    def test_float_unparseable(self):
        assert float_config("rate", "Rate", 0.0, 1.0, 0.5).coerce("abc") == 0.5

    def test_int(self):
        item = int_config("stack", "Stacks", 0, 4, 2)
        assert item.config_type == ItemConfigType.INT
        assert item.coerce("3") == 3
        assert isinstance(item.coerce(2.7), int)
        assert item.coerce(9) == 4


class TestConfigFromDict:
    """Keyword arguments from a loose row."""

    def test_defaults(self):
        assert config_from_dict(ITEMS) == {"active": True, "rate": 0.5, "stack": 2}

    def test_partial(self):
        values = config_from_dict(ITEMS, {"rate": "0.1", "active": "false"})
        assert values == {"active": False, "rate": 0.1, "stack": 2}

    def test_unknown_key_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="genshin_calc.item_config"):
            values = config_from_dict(ITEMS, {"typo": 1})
        assert "typo" not in values
        assert "typo" in caplog.text


class TestLevelCurve:
    """Breakpoint lookup and interpolation."""

    def test_breakpoint_count(self):
        assert len(LEVEL_BREAKPOINTS) == 14

    @pytest.mark.parametrize("level,ascended,index", [
        (1, False, 0),
        (19, False, 0),
        (20, False, 1),
        (20, True, 2),
        (45, False, 4),
        (80, True, 12),
        (90, False, 13),
        (90, True, 13),
    ])
    def test_index(self, level, ascended, index):
        assert get_level_breakpoint_index(level, ascended) == index

    @pytest.mark.parametrize("level", [0, 91, -5])
    def test_out_of_range(self, level):
        with pytest.raises(ValueError):
            get_level_breakpoint_index(level, False)

    def test_interpolation(self):
        curve = list(range(0, 140, 10))
        assert interpolate_level_curve(curve, 90, False) == 130.0
        assert interpolate_level_curve(curve, 85, True) == pytest.approx(125.0)
        assert interpolate_level_curve(curve, 10, False) == pytest.approx(10 * 9 / 19)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
