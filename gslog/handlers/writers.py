"""Log handlers that write formatted records to streams and files."""

from __future__ import annotations

import io
import os
import sys
import threading
from collections.abc import Iterable
from typing import Any

from gslog.formatter import Formatter, Record, TextFormatter, as_text_formatter
from gslog.handling import LevelsWithFormatter, LevelWithFormatter

# Size of the write buffer used for log files. Large so that records can
# accumulate without the logging thread blocking on disk I/O.
DEFAULT_BUFFER_SIZE = 8 * 1024

DEFAULT_FILE_PERM = 0o664
DEFAULT_FILE_FLAGS = os.O_CREAT | os.O_WRONLY | os.O_APPEND


class NopFlushClose:
    """Flush and close that never fail and leave the output open."""

    @property
    def closed(self) -> bool:
        """True once close() has been called."""
        return getattr(self, "_nop_closed", False)

    def flush(self) -> None:
        """Push out data held by a Python stream output, if there is one."""
        out = getattr(self, "output", None)
        if isinstance(out, io.IOBase) and not out.closed:
            out.flush()

    def close(self) -> None:
        """Mark as closed; the output itself is left open."""
        self._nop_closed = True


class LockWrapper:
    """A mutex that can be switched off."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._disable = False

    def lock(self) -> None:
        """Acquire the lock unless locking is disabled."""
        if not self._disable:
            self._lock.acquire()

    def unlock(self) -> None:
        """Release the lock unless locking is disabled."""
        if not self._disable:
            self._lock.release()

    def enable_lock(self, enable: bool) -> None:
        """Turn locking on or off."""
        self._disable = not enable

    def lock_enabled(self) -> bool:
        """Return True if locking is on."""
        return not self._disable

    def __enter__(self) -> LockWrapper:
        self.lock()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.unlock()


LevelFormattable = LevelWithFormatter | LevelsWithFormatter


def _write(out: Any, data: bytes) -> None:
    if isinstance(out, io.TextIOBase):
        out.write(data.decode("utf-8"))
    else:
        out.write(data)


class _Handler:
    """Common parts: an output plus level filtering and a formatter."""

    def __init__(self, out: Any, lf: Any) -> None:
        self.output = out
        self.level_formattable = lf

    @property
    def formatter(self) -> Formatter:
        return self.level_formattable.formatter

    @formatter.setter
    def formatter(self, formatter: Formatter) -> None:
        self.level_formattable.formatter = formatter

    def is_handling(self, level: int) -> bool:
        """Return True if records of ``level`` are handled."""
        return self.level_formattable.is_handling(level)

    def handle(self, record: Record) -> None:
        """Format ``record`` and write it to the output."""
        _write(self.output, self.formatter.format(record))

    def flush(self) -> None:
        """Flush the output."""
        self.output.flush()

    def close(self) -> None:
        """Close the output."""
        self.output.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class IOWriterHandler(NopFlushClose, _Handler):
    """Writes records to any writable object; close leaves the output open."""

    def is_handling(self, level: int) -> bool:
        return self.level_formattable.is_handling(level)

    def handle(self, record: Record) -> None:
        _write(self.output, self.formatter.format(record))

    def text_formatter(self) -> TextFormatter:
        """Return the formatter; raise TypeError if it is not a TextFormatter."""
        return as_text_formatter(self.formatter)


ConsoleHandler = IOWriterHandler
SimpleHandler = IOWriterHandler


class WriteCloserHandler(_Handler):
    """Writes records to an output that can be closed."""

    def handle(self, record: Record) -> None:
        _write(self.output, self.formatter.format(record))

    def flush(self) -> None:
        """Push out data held by a Python stream output, if there is one."""
        if isinstance(self.output, io.IOBase) and not self.output.closed:
            self.output.flush()

    def close(self) -> None:
        """Close the output."""
        self.output.close()


class FlushCloseHandler(_Handler):
    """Writes records to an output that can be flushed and closed."""

    def handle(self, record: Record) -> None:
        _write(self.output, self.formatter.format(record))

    def flush(self) -> None:
        """Flush the output."""
        self.output.flush()

    def close(self) -> None:
        """Flush, then close the output."""
        self.flush()
        self.output.close()


class SyncCloseHandler(_Handler):
    """Writes records to an output that can be synced and closed, e.g. a file."""

    @property
    def writer(self) -> Any:
        """The output of the handler."""
        return self.output

    def handle(self, record: Record) -> None:
        _write(self.output, self.formatter.format(record))

    def flush(self) -> None:
        """Sync the output to its storage."""
        sync = getattr(self.output, "sync", None)
        if callable(sync):
            sync()
            return
        self.output.flush()
        try:
            fd = self.output.fileno()
        except (AttributeError, OSError, ValueError):
            return
        os.fsync(fd)

    def close(self) -> None:
        """Sync, then close the output."""
        self.flush()
        self.output.close()


def _max_level(level: int) -> LevelWithFormatter:
    return LevelWithFormatter(level)


def _levels(levels: Iterable[int]) -> LevelsWithFormatter:
    return LevelsWithFormatter(levels)


def io_writer_with_max_level(out: Any, max_level: int) -> IOWriterHandler:
    """Create an IOWriterHandler handling levels at or above ``max_level``."""
    return IOWriterHandler(out, _max_level(max_level))


def new_io_writer(out: Any, levels: Iterable[int]) -> IOWriterHandler:
    """Create an IOWriterHandler handling the given levels."""
    return IOWriterHandler(out, _levels(levels))


def new_simple_handler(out: Any, max_level: int) -> IOWriterHandler:
    """Create a simple handler with a maximum level."""
    return io_writer_with_max_level(out, max_level)


def write_closer_with_max_level(out: Any, max_level: int) -> WriteCloserHandler:
    """Create a WriteCloserHandler with a maximum level."""
    return WriteCloserHandler(out, _max_level(max_level))


def new_write_closer(out: Any, levels: Iterable[int]) -> WriteCloserHandler:
    """Create a WriteCloserHandler handling the given levels."""
    return WriteCloserHandler(out, _levels(levels))


def flush_closer_with_max_level(out: Any, max_level: int) -> FlushCloseHandler:
    """Create a FlushCloseHandler with a maximum level."""
    return FlushCloseHandler(out, _max_level(max_level))


def new_flush_closer(out: Any, levels: Iterable[int]) -> FlushCloseHandler:
    """Create a FlushCloseHandler handling the given levels."""
    return FlushCloseHandler(out, _levels(levels))


def sync_closer_with_max_level(out: Any, max_level: int) -> SyncCloseHandler:
    """Create a SyncCloseHandler with a maximum level."""
    return SyncCloseHandler(out, _max_level(max_level))


def new_sync_closer(out: Any, levels: Iterable[int]) -> SyncCloseHandler:
    """Create a SyncCloseHandler handling the given levels."""
    return SyncCloseHandler(out, _levels(levels))


class _StdoutWriter:
    """Writes to whatever ``sys.stdout`` is at the time of writing."""

    def write(self, data: bytes) -> int:
        sys.stdout.write(data.decode("utf-8"))
        return len(data)

    def flush(self) -> None:
        sys.stdout.flush()


def _supports_color() -> bool:
    if os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb":
        return False
    isatty = getattr(sys.stdout, "isatty", None)
    return bool(callable(isatty) and isatty())


def _new_console(lf: Any) -> IOWriterHandler:
    handler = IOWriterHandler(_StdoutWriter(), lf)
    handler.formatter = TextFormatter().with_enable_color(_supports_color())
    return handler


def new_console(levels: Iterable[int]) -> IOWriterHandler:
    """Create a console handler for the given levels, colored on terminals."""
    return _new_console(_levels(levels))


def console_with_max_level(level: int) -> IOWriterHandler:
    """Create a console handler with a maximum level, colored on terminals."""
    return _new_console(_max_level(level))


def quick_open_file(path: str | os.PathLike[str]) -> io.FileIO:
    """Open ``path`` for unbuffered appending, creating it and its directories."""
    parent = os.path.dirname(os.fspath(path))
    if parent:
        os.makedirs(parent, exist_ok=True)
    fd = os.open(path, DEFAULT_FILE_FLAGS, DEFAULT_FILE_PERM)
    return io.FileIO(fd, "ab", closefd=True)