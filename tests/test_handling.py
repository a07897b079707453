import json

from gslog.formatter import JSONFormatter, Record, TextFormatter
from gslog.handling import (
    LevelFormatting,
    LevelMode,
    LevelsWithFormatter,
    LevelWithFormatter,
    new_levels_formatting,
    new_max_level_formatting,
)
from gslog.levels import NORMAL_LEVELS, Level


def test_level_with_formatter():
    lf = LevelWithFormatter(Level.INFO)
    assert lf.is_handling(Level.ERROR)
    assert lf.is_handling(Level.INFO)
    assert not lf.is_handling(Level.DEBUG)

    lf.set_max_level(Level.DEBUG)
    assert lf.is_handling(Level.DEBUG)
    assert not lf.is_handling(Level.TRACE)


def test_levels_with_formatter():
    lf = LevelsWithFormatter([Level.INFO, Level.ERROR])
    assert lf.is_handling(Level.INFO)
    assert not lf.is_handling(Level.DEBUG)

    lf.set_limit_levels([Level.INFO, Level.ERROR, Level.DEBUG])
    assert lf.is_handling(Level.DEBUG)


def test_levels_with_formatter_normal_levels():
    lsf = LevelsWithFormatter(NORMAL_LEVELS)
    assert not lsf.is_handling(Level.ERROR)
    assert lsf.is_handling(Level.INFO)
    assert lsf.is_handling(Level.DEBUG)


def test_level_formatting():
    lf = new_max_level_formatting(Level.INFO)
    assert lf.mode is LevelMode.MAX
    assert lf.is_handling(Level.INFO)
    assert not lf.is_handling(Level.TRACE)

    lf = new_levels_formatting([Level.INFO, Level.ERROR])
    assert lf.mode is LevelMode.LIST
    assert lf.is_handling(Level.INFO)
    assert lf.is_handling(Level.ERROR)
    assert not lf.is_handling(Level.TRACE)


def test_level_mode_string():
    assert str(new_levels_formatting([Level.INFO]).mode) == "list"
    assert str(new_max_level_formatting(Level.INFO).mode) == "max"


def test_level_handling_mode_switch():
    lf = LevelFormatting()
    assert not lf.is_handling(Level.INFO)
    lf.set_max_level(Level.WARN)
    assert lf.is_handling(Level.ERROR)
    assert not lf.is_handling(Level.INFO)
    lf.set_limit_levels([Level.INFO])
    assert lf.is_handling(Level.INFO)
    assert not lf.is_handling(Level.ERROR)
    assert lf.levels == [Level.INFO]


def test_default_formatter_is_text():
    lf = LevelWithFormatter(Level.INFO)
    assert isinstance(lf.formatter, TextFormatter)
    out = lf.format(Record(message="hello handling")).decode()
    assert "hello handling" in out
    assert "[INFO]" in out


def test_custom_formatter():
    lf = new_levels_formatting([Level.INFO])
    lf.formatter = JSONFormatter()
    data = json.loads(lf.format(Record(message="json message")))
    assert data["message"] == "json message"
    assert data["level"] == "INFO"