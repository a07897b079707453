import pytest

from gslog.bufwrite import (
    BufferedWriter,
    LineWriter,
    ShortWriteError,
    new_line_writer,
)


class Sink:
    """Collects written bytes; has no close method."""

    def __init__(self):
        self.data = bytearray()

    def write(self, chunk):
        self.data += chunk
        return len(chunk)

    @property
    def text(self):
        return self.data.decode()


class CloseWriter:
    def __init__(self, err_on_write=False, err_on_close=False, write_num=0):
        self.err_on_write = err_on_write
        self.err_on_close = err_on_close
        self.write_num = write_num

    def write(self, chunk):
        if self.err_on_write:
            raise OSError("write error")
        if self.write_num > 0:
            return self.write_num
        return len(chunk)

    def close(self):
        if self.err_on_close:
            raise OSError("close error")


def test_buffered_writer_write_string():
    w = Sink()
    bw = BufferedWriter(w, 12)

    bw.write("hello, ")
    assert len(w.data) == 0

    bw.write("worlds. oh")
    assert w.text == "hello, world"

    bw.close()
    assert w.text == "hello, worlds. oh"


def test_buffered_writer_close_error():
    bw = BufferedWriter(CloseWriter(err_on_write=True), 24)
    assert bw.write("hi") == 2

    with pytest.raises(OSError, match="write error"):
        bw.close()

    bw = BufferedWriter(CloseWriter(err_on_close=True), 24)
    with pytest.raises(OSError, match="close error"):
        bw.close()


def test_new_line_writer():
    w = Sink()
    bw = new_line_writer(w)
    assert bw.size > 0
    bw.flush()

    bw.write("hello")
    assert w.text == ""

    bw.sync()
    assert w.text == "hello"

    bw.write("more")
    bw.reset(w)
    assert bw.buffered() == 0


def test_line_writer_write_error_on_flush():
    bw = LineWriter(CloseWriter(err_on_write=True), 6)
    w1 = CloseWriter()
    bw.reset(w1)
    assert bw.write("hi") == 2

    w1.err_on_write = True
    with pytest.raises(OSError, match="write error"):
        bw.write("hello, tom")


def test_line_writer_write_error_sticky():
    w = CloseWriter(err_on_write=True)
    bw = LineWriter(w, 6)

    with pytest.raises(OSError, match="write error"):
        bw.write("hello, tom")

    w.err_on_write = False
    with pytest.raises(OSError, match="write error"):
        bw.write("hello, wo")

    bw.reset(w)
    assert bw.write("hello") == 5


def test_line_writer_flush_short_write():
    w = CloseWriter()
    bw = LineWriter(w, 6)
    bw.write("hi!")

    w.write_num = 1
    with pytest.raises(ShortWriteError, match="short write"):
        bw.flush()
    assert bw.buffered() == 2


def test_line_writer_flush_write_error_with_partial():
    w = CloseWriter()
    bw = LineWriter(w, 6)
    bw.write("hi!")

    w.write_num = 1
    w.err_on_write = True
    with pytest.raises(OSError, match="write error"):
        bw.flush()


def test_line_writer_flush_error_sticky():
    w = CloseWriter()
    bw = LineWriter(w, 6)
    bw.write("hello")

    w.err_on_write = True
    with pytest.raises(OSError, match="write error"):
        bw.flush()

    w.write_num = 2
    with pytest.raises(OSError):
        bw.flush()
    w.write_num = 0

    w.err_on_write = False
    with pytest.raises(OSError, match="write error"):
        bw.flush()

    bw.reset(w)
    assert bw.write("hello") == 5


def test_line_writer_close_error():
    w = CloseWriter()
    bw = LineWriter(w, 8)
    bw.write("hello")

    w.err_on_write = True
    with pytest.raises(OSError, match="write error"):
        bw.close()

    bw = LineWriter(CloseWriter(err_on_close=True), 8)
    with pytest.raises(OSError, match="close error"):
        bw.close()


def test_new_line_writer_size():
    w = Sink()
    bw = new_line_writer(w, 12)

    bw.write("hello, ")
    assert len(w.data) == 0
    assert bw.size > 0

    bw.write("worlds. oh")
    assert w.text == "hello, worlds. oh"

    bw.write("...")
    bw.close()
    assert w.text == "hello, worlds. oh..."

    same = new_line_writer(bw, 8)
    assert same is bw
    assert same.size == 12

    bw = new_line_writer(Sink(), -12)
    assert bw.size > 12


def test_line_writer_available_and_buffered():
    bw = LineWriter(Sink(), 10)
    bw.write(b"abc")
    assert bw.buffered() == 3
    assert bw.available() == 7