"""Buffered writers with sync and close methods."""

from __future__ import annotations

from typing import Any

DEFAULT_BUF_SIZE = 8 * 1024


class ShortWriteError(OSError):
    """The underlying writer accepted fewer bytes than requested."""

    def __init__(self, message: str = "short write") -> None:
        super().__init__(message)


def _as_bytes(data: Any) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def _write_to(writer: Any, chunk: bytes) -> int:
    n = writer.write(chunk)
    return len(chunk) if n is None else int(n)


class _BaseBuffered:
    def __init__(self, writer: Any, size: int) -> None:
        self._writer = writer
        self._size = size if size > 0 else DEFAULT_BUF_SIZE
        self._buf = bytearray()
        self._err: BaseException | None = None

    @property
    def size(self) -> int:
        """Capacity of the buffer in bytes."""
        return self._size

    def _available(self) -> int:
        return self._size - len(self._buf)

    def _flush(self) -> BaseException | None:
        if self._err is not None:
            return self._err
        if not self._buf:
            return None
        pending = len(self._buf)
        err: BaseException | None = None
        try:
            n = _write_to(self._writer, bytes(self._buf))
        except Exception as exc:  # noqa: BLE001 - kept as the sticky error
            n, err = 0, exc
        n = max(0, min(n, pending))
        if n < pending and err is None:
            err = ShortWriteError()
        del self._buf[:n]
        if err is not None:
            self._err = err
        return err

    def _flush_or_raise(self) -> None:
        err = self._flush()
        if err is not None:
            raise err

    def _close(self) -> None:
        self._flush_or_raise()
        closer = getattr(self._writer, "close", None)
        if callable(closer):
            closer()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info: object) -> None:
        self._close()


class BufferedWriter(_BaseBuffered):
    """Fixed-size write buffer; fills the buffer completely before flushing."""

    def __init__(self, writer: Any, size: int = DEFAULT_BUF_SIZE) -> None:
        super().__init__(writer, size)

    def write(self, data: bytes | str) -> int:
        """Buffer ``data``, flushing whenever the buffer is full."""
        chunk = _as_bytes(data)
        total = 0
        while len(chunk) > self._available() and self._err is None:
            if not self._buf:
                try:
                    n = _write_to(self._writer, chunk)
                except Exception as exc:  # noqa: BLE001
                    self._err, n = exc, 0
            else:
                n = self._available()
                self._buf += chunk[:n]
                self._flush()
            total += n
            chunk = chunk[n:]
        if self._err is not None:
            raise self._err
        self._buf += chunk
        return total + len(chunk)

    def flush(self) -> None:
        """Write buffered data to the underlying writer."""
        self._flush_or_raise()

    def sync(self) -> None:
        """Flush buffered data."""
        self._flush_or_raise()

    def close(self) -> None:
        """Flush, then close the underlying writer if it can be closed."""
        self._close()


class LineWriter(_BaseBuffered):
    """Write buffer that never splits one write across a flush.

    When a write does not fit, the buffer is flushed and the whole write
    goes straight to the underlying writer.
    """

    def __init__(self, writer: Any, size: int = DEFAULT_BUF_SIZE) -> None:
        super().__init__(writer, size)

    def available(self) -> int:
        """Unused bytes in the buffer."""
        return self._available()

    def buffered(self) -> int:
        """Bytes held in the buffer."""
        return len(self._buf)

    def reset(self, writer: Any) -> None:
        """Discard buffered data and any error, and write to ``writer``."""
        self._writer = writer
        self._err = None
        self._buf.clear()

    def write(self, data: bytes | str) -> int:
        """Buffer ``data`` or write it whole when it does not fit."""
        chunk = _as_bytes(data)
        if len(chunk) > self._available() and self._err is None:
            written = len(self._buf)
            if written:
                self._flush_or_raise()
            try:
                n = _write_to(self._writer, chunk)
            except Exception as exc:  # noqa: BLE001
                self._err = exc
                raise
            return written + n

        if self._err is not None:
            raise self._err
        self._buf += chunk
        return len(chunk)

    def flush(self) -> None:
        """Write buffered data to the underlying writer."""
        self._flush_or_raise()

    def sync(self) -> None:
        """Flush buffered data."""
        self._flush_or_raise()

    def close(self) -> None:
        """Flush, then close the underlying writer if it can be closed."""
        self._close()


def new_line_writer(writer: Any, size: int = DEFAULT_BUF_SIZE) -> LineWriter:
    """Return a LineWriter of at least ``size``, reusing ``writer`` if it is one."""
    if isinstance(writer, LineWriter) and writer.size >= size:
        return writer
    return LineWriter(writer, size)