"""Handlers writing to log files and buffered outputs."""

from __future__ import annotations

import os
from collections.abc import Iterable
from typing import Any

from gslog.bufwrite import BufferedWriter, new_line_writer
from gslog.handlers.config import (
    BUFF_MODE_LINE,
    new_config,
    new_empty_config,
    with_buff_mode,
    with_buff_size,
    with_log_levels,
    with_logfile,
    with_use_json,
)
from gslog.handlers.writers import (
    FlushCloseHandler,
    IOWriterHandler,
    SyncCloseHandler,
    new_flush_closer,
    new_io_writer,
    new_sync_closer,
    quick_open_file,
    sync_closer_with_max_level,
)
from gslog.levels import ALL_LEVELS, Level


def new_file_handler(logfile: str, *args) -> SyncCloseHandler:
    """Create a handler appending to ``logfile``."""
    return new_empty_config(*args).with_config(with_logfile(logfile)).create_handler()


def json_file_handler(logfile: str, *args) -> SyncCloseHandler:
    """Create a file handler using the JSON formatter."""
    return new_file_handler(logfile, *args, with_use_json(True))


def new_buff_file_handler(logfile: str, buff_size: int, *args) -> SyncCloseHandler:
    """Create a file handler with a write buffer of ``buff_size`` bytes."""
    return new_file_handler(logfile, *args, with_buff_size(buff_size))


def new_simple_file_handler(
    path: str | os.PathLike[str], max_level: int = Level.INFO
) -> SyncCloseHandler:
    """Create a file handler with a maximum level, INFO by default."""
    return sync_closer_with_max_level(quick_open_file(path), max_level)


def new_buffered_handler(out: Any, buf_size: int, *args: int) -> FlushCloseHandler:
    """Wrap ``out`` in a fixed-size buffer; handles all levels unless given."""
    levels = args or ALL_LEVELS
    return new_flush_closer(BufferedWriter(out, buf_size), levels)


def line_buffered_file(
    logfile: str, buf_size: int, levels: Iterable[int]
) -> SyncCloseHandler:
    """Create a file handler with a line buffer of ``buf_size`` bytes."""
    levels = list(levels)
    config = new_config(
        with_logfile(logfile),
        with_buff_size(buf_size),
        with_log_levels(levels),
        with_buff_mode(BUFF_MODE_LINE),
    )
    return new_sync_closer(config.create_writer(), levels)


def line_buff_writer(out: Any, buf_size: int, levels: Iterable[int]) -> IOWriterHandler:
    """Wrap ``out`` in a line buffer; raise ValueError if ``out`` is None."""
    if out is None:
        raise ValueError("slog: the io writer cannot be nil")
    return new_io_writer(new_line_writer(out, buf_size), levels)