"""Handler configuration, option functions and a handler builder."""

from __future__ import annotations

import io
import os
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from gslog.bufwrite import BufferedWriter, new_line_writer
from gslog.formatter import JSONFormatter
from gslog.handlers.writers import (
    DEFAULT_BUFFER_SIZE,
    DEFAULT_FILE_PERM,
    FlushCloseHandler,
    IOWriterHandler,
    SyncCloseHandler,
    WriteCloserHandler,
)
from gslog.handling import LevelMode, LevelsWithFormatter, LevelWithFormatter
from gslog.levels import ALL_LEVELS, DEBUG_MODE, Level, level_by_name

BUFF_MODE_LINE = "line"
BUFF_MODE_BITE = "bite"

LEVEL_MODE_LIST = LevelMode.LIST
LEVEL_MODE_VALUE = LevelMode.MAX

ConfigFn = Callable[["Config"], None]


class _AppendFile:
    """A file opened for appending, with write, flush, sync and close."""

    def __init__(self, path: str | os.PathLike[str], perm: int) -> None:
        parent = os.path.dirname(os.fspath(path))
        if parent:
            os.makedirs(parent, exist_ok=True)
        fd = os.open(path, os.O_CREAT | os.O_WRONLY | os.O_APPEND, perm)
        self._file = io.FileIO(fd, "ab", closefd=True)

    @property
    def closed(self) -> bool:
        return self._file.closed

    def fileno(self) -> int:
        return self._file.fileno()

    def write(self, data: bytes) -> int:
        return self._file.write(data) or 0

    def flush(self) -> None:
        """Flush the underlying file object."""
        self._file.flush()

    def sync(self) -> None:
        """Commit written data to storage."""
        os.fsync(self._file.fileno())

    def close(self) -> None:
        self._file.close()


@dataclass
class Config:
    """Settings for creating a file writer or handler."""

    logfile: str = ""
    file_perm: int = 0
    level_mode: LevelMode = LevelMode.LIST
    level: Level = Level(0)
    levels: list[Level] = field(default_factory=lambda: list(ALL_LEVELS))
    use_json: bool = False
    buff_mode: str = ""
    buff_size: int = 0
    debug_mode: bool = False

    def with_config(self, *args: ConfigFn) -> Config:
        """Apply option functions and return self."""
        for fn in args:
            fn(self)
        return self

    def _new_level_formattable(self) -> LevelWithFormatter | LevelsWithFormatter:
        if self.level_mode == LevelMode.MAX:
            return LevelWithFormatter(self.level)
        return LevelsWithFormatter(self.levels)

    def _wrap_buffer(self, writer: Any) -> Any:
        if self.buff_mode == BUFF_MODE_LINE:
            return new_line_writer(writer, self.buff_size)
        return BufferedWriter(writer, self.buff_size)

    def create_writer(self) -> Any:
        """Open the log file for appending, buffered if a size is set."""
        if not self.logfile:
            raise ValueError("slog: logfile cannot be empty for create writer")
        if self.file_perm == 0:
            self.file_perm = DEFAULT_FILE_PERM

        output: Any = _AppendFile(self.logfile, self.file_perm)
        if self.buff_size > 0:
            output = self._wrap_buffer(output)
        return output

    def create_handler(self) -> SyncCloseHandler:
        """Create a SyncCloseHandler writing to the configured file."""
        output = self.create_writer()
        handler = SyncCloseHandler(output, self._new_level_formattable())
        if self.use_json:
            handler.formatter = JSONFormatter()
        return handler


def new_empty_config(*args: ConfigFn) -> Config:
    """Create a Config with all levels and no buffering."""
    return Config().with_config(*args)


def new_config(*args: ConfigFn) -> Config:
    """Create a Config with line buffering and the default buffer size."""
    config = Config(
        buff_mode=BUFF_MODE_LINE,
        buff_size=DEFAULT_BUFFER_SIZE,
        debug_mode=DEBUG_MODE,
    )
    return config.with_config(*args)


def with_logfile(logfile: str) -> ConfigFn:
    def apply(c: Config) -> None:
        c.logfile = logfile

    return apply


def with_file_perm(perm: int) -> ConfigFn:
    def apply(c: Config) -> None:
        c.file_perm = perm

    return apply


def with_level_mode(mode: LevelMode) -> ConfigFn:
    def apply(c: Config) -> None:
        c.level_mode = LevelMode(mode)

    return apply


def with_log_level(level: int) -> ConfigFn:
    """Set a maximum level and switch to maximum-level mode."""

    def apply(c: Config) -> None:
        c.level = Level(level)
        c.level_mode = LevelMode.MAX

    return apply


def with_level_name(name: str) -> ConfigFn:
    """Set a maximum level by name."""
    return with_log_level(level_by_name(name))


def with_log_levels(levels: Iterable[int]) -> ConfigFn:
    """Set the handled levels and switch to list mode."""
    chosen = [Level(lv) for lv in levels]

    def apply(c: Config) -> None:
        c.levels = list(chosen)
        c.level_mode = LevelMode.LIST

    return apply


def with_level_names(names: Iterable[str]) -> ConfigFn:
    """Set the handled levels by name."""
    return with_log_levels([level_by_name(name) for name in names])


def with_level_names_string(names: str) -> ConfigFn:
    """Set the handled levels from comma separated names."""
    return with_level_names(names.split(","))


def with_buff_mode(mode: str) -> ConfigFn:
    def apply(c: Config) -> None:
        c.buff_mode = mode

    return apply


def with_buff_size(size: int) -> ConfigFn:
    def apply(c: Config) -> None:
        c.buff_size = size

    return apply


def with_use_json(use_json: bool) -> ConfigFn:
    def apply(c: Config) -> None:
        c.use_json = use_json

    return apply


def with_debug_mode(config: Config) -> None:
    """Option function turning on debug mode."""
    config.debug_mode = True


def _has(obj: Any, *names: str) -> bool:
    return all(callable(getattr(obj, name, None)) for name in names)


class Builder:
    """Collects settings and builds a handler from an output or a log file."""

    def __init__(self) -> None:
        self.config = new_empty_config()
        self.output: Any = None

    def with_output(self, out: Any) -> Builder:
        self.output = out
        return self

    def with_config_fn(self, *args: ConfigFn) -> Builder:
        self.config.with_config(*args)
        return self

    def with_logfile(self, logfile: str) -> Builder:
        self.config.logfile = logfile
        return self

    def with_level_mode(self, mode: LevelMode) -> Builder:
        self.config.level_mode = LevelMode(mode)
        return self

    def with_log_level(self, level: int) -> Builder:
        self.config.level = Level(level)
        return self

    def with_log_levels(self, levels: Iterable[int]) -> Builder:
        self.config.levels = [Level(lv) for lv in levels]
        return self

    def with_buff_mode(self, mode: str) -> Builder:
        self.config.buff_mode = mode
        return self

    def with_buff_size(self, size: int) -> Builder:
        self.config.buff_size = size
        return self

    def with_use_json(self, use_json: bool) -> Builder:
        self.config.use_json = use_json
        return self

    def build(self) -> Any:
        """Build a handler; raise ValueError if neither output nor logfile is set."""
        if self.output is not None:
            return self._build_from_writer(self.output)
        if self.config.logfile:
            return self._build_from_writer(self.config.create_writer())
        raise ValueError("slog: missing information for build slog handler")

    def _build_from_writer(self, writer: Any) -> Any:
        try:
            cfg = self.config
            lf = cfg._new_level_formattable()
            out = cfg._wrap_buffer(writer) if cfg.buff_size > 0 else writer

            if _has(writer, "sync", "close"):
                handler: Any = SyncCloseHandler(out, lf)
            elif _has(writer, "flush", "close"):
                handler = FlushCloseHandler(out, lf)
            elif _has(writer, "close"):
                handler = WriteCloserHandler(out, lf)
            else:
                handler = IOWriterHandler(out, lf)

            if cfg.use_json:
                handler.formatter = JSONFormatter()
            return handler
        finally:
            self._reset()

    def _reset(self) -> None:
        self.output = None
        self.config = new_empty_config()