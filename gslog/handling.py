"""Level filtering combined with a record formatter, shared by log handlers."""

from __future__ import annotations

from collections.abc import Iterable
from enum import IntEnum

from gslog.formatter import Formatter, FormatterWrapper
from gslog.levels import Level


class LevelWithFormatter(FormatterWrapper):
    """Handles every record at or above a maximum level, with a formatter."""

    def __init__(self, level: int = Level.INFO, formatter: Formatter | None = None) -> None:
        super().__init__(formatter)
        self.level = Level(level)

    def set_max_level(self, max_level: int) -> None:
        """Set the least severe level that is still handled."""
        self.level = Level(max_level)

    def is_handling(self, level: int) -> bool:
        """Return True if records of ``level`` are handled."""
        return self.level.should_handling(level)


class LevelsWithFormatter(FormatterWrapper):
    """Handles records whose level is in an explicit list, with a formatter."""

    def __init__(
        self, levels: Iterable[int] = (), formatter: Formatter | None = None
    ) -> None:
        super().__init__(formatter)
        self.levels = [Level(lv) for lv in levels]

    def set_limit_levels(self, levels: Iterable[int]) -> None:
        """Replace the list of handled levels."""
        self.levels = [Level(lv) for lv in levels]

    def is_handling(self, level: int) -> bool:
        """Return True if ``level`` is one of the handled levels."""
        return level in self.levels


class LevelMode(IntEnum):
    """How a handler decides which levels it handles."""

    LIST = 0
    MAX = 1

    def __str__(self) -> str:
        return self.name.lower()


class LevelHandling:
    """Level check that works either from a level list or a maximum level."""

    def __init__(self) -> None:
        self._mode = LevelMode.LIST
        self._max_level = Level.INFO
        self._levels: list[Level] = []

    @property
    def mode(self) -> LevelMode:
        return self._mode

    @property
    def max_level(self) -> Level:
        return self._max_level

    @property
    def levels(self) -> list[Level]:
        return list(self._levels)

    def set_max_level(self, max_level: int) -> None:
        """Switch to maximum-level mode with ``max_level``."""
        self._mode = LevelMode.MAX
        self._max_level = Level(max_level)

    def set_limit_levels(self, levels: Iterable[int]) -> None:
        """Switch to list mode with ``levels``."""
        self._mode = LevelMode.LIST
        self._levels = [Level(lv) for lv in levels]

    def is_handling(self, level: int) -> bool:
        """Return True if records of ``level`` are handled."""
        if self._mode is LevelMode.MAX:
            return self._max_level.should_handling(level)
        return level in self._levels


class LevelFormatting(LevelHandling, FormatterWrapper):
    """Level handling together with a record formatter."""

    def __init__(self, formatter: Formatter | None = None) -> None:
        LevelHandling.__init__(self)
        FormatterWrapper.__init__(self, formatter)


def new_max_level_formatting(max_level: int) -> LevelFormatting:
    """Create a LevelFormatting in maximum-level mode."""
    lf = LevelFormatting()
    lf.set_max_level(max_level)
    return lf


def new_levels_formatting(levels: Iterable[int]) -> LevelFormatting:
    """Create a LevelFormatting in list mode."""
    lf = LevelFormatting()
    lf.set_limit_levels(levels)
    return lf