import pytest

from gslog.formatter import Record
from gslog.handlers.files import (
    json_file_handler,
    line_buff_writer,
    line_buffered_file,
    new_buff_file_handler,
    new_buffered_handler,
    new_file_handler,
    new_simple_file_handler,
)
from gslog.handlers.config import with_file_perm
from gslog.handlers.writers import quick_open_file
from gslog.levels import ALL_LEVELS, Level


def make_record(msg, level=Level.INFO, data=True):
    return Record(
        channel="handler_test",
        level=level,
        message=msg,
        data={"name": "inhere", "age": 100} if data else {},
        extra={"source": "linux", "extra_key0": "hello"} if data else {},
    )


def test_new_file_handler(tmp_path):
    logfile = tmp_path / "file.log"
    h = new_file_handler(str(logfile), with_file_perm(0o644))
    h.handle(make_record("info message"))
    h.handle(make_record("warn message", Level.WARN))
    h.close()

    text = logfile.read_text()
    assert "[INFO]" in text
    assert "info message" in text
    assert "[WARN]" in text
    assert "warn message" in text


def test_new_file_handler_basic(tmp_path):
    logfile = tmp_path / "file-basic.log"
    h = new_file_handler(str(logfile))
    assert h.writer is h.output
    h.handle(make_record("test file handler"))
    h.close()
    text = logfile.read_text()
    assert "INFO" in text
    assert "test file handler" in text


def test_new_buff_file_handler(tmp_path):
    logfile = tmp_path / "file-buff.log"
    h = new_buff_file_handler(str(logfile), 56)
    h.handle(make_record("test file buff handler"))
    h.close()
    text = logfile.read_text()
    assert "INFO" in text
    assert "test file buff handler" in text


def test_json_file_handler(tmp_path):
    logfile = tmp_path / "file-json.log"
    h = json_file_handler(str(logfile))
    h.handle(make_record("test json file handler"))
    h.close()
    text = logfile.read_text()
    assert '"level":"INFO"' in text
    assert '"message":"test json file handler"' in text


def test_new_simple_file_handler(tmp_path):
    logfile = tmp_path / "simple-file.log"
    assert not logfile.exists()
    h = new_simple_file_handler(str(logfile))
    assert h.is_handling(Level.INFO)
    assert not h.is_handling(Level.DEBUG)

    h.handle(make_record("info message"))
    h.handle(make_record("warn message", Level.WARN))
    h.close()
    text = logfile.read_text()
    assert "[INFO]" in text
    assert Level.WARN.name in text


def test_new_simple_file_handler_max_level(tmp_path):
    h = new_simple_file_handler(str(tmp_path / "m.log"), Level.ERROR)
    assert h.is_handling(Level.ERROR)
    assert not h.is_handling(Level.WARN)
    h.close()


def test_new_buffered_handler(tmp_path):
    logfile = tmp_path / "buffer-os-file.log"
    out = quick_open_file(str(logfile))
    assert logfile.is_file()

    h = new_buffered_handler(out, 128)
    assert h.is_handling(Level.TRACE)
    h.handle(make_record("buffered info message", data=False))
    assert logfile.read_bytes() == b""

    h.handle(make_record("buffered warn message", Level.WARN, data=False))
    assert "[INFO]" in logfile.read_text()

    h.flush()
    assert "buffered warn message" in logfile.read_text()
    h.close()


def test_new_buffered_handler_levels(tmp_path):
    out = quick_open_file(str(tmp_path / "b.log"))
    h = new_buffered_handler(out, 64, Level.ERROR)
    assert h.is_handling(Level.ERROR)
    assert not h.is_handling(Level.INFO)
    h.close()


def test_line_buffered_file(tmp_path):
    logfile = tmp_path / "line-buff-file.log"
    h = line_buffered_file(str(logfile), 12, ALL_LEVELS)
    assert logfile.is_file()

    h.handle(make_record("Test LineBufferedFile"))
    text = logfile.read_text()
    assert "[INFO]" in text
    assert "Test LineBufferedFile" in text
    h.close()


def test_line_buff_writer(tmp_path):
    logfile = tmp_path / "line-buff-writer.log"
    out = quick_open_file(str(logfile))
    h = line_buff_writer(out, 12, ALL_LEVELS)

    with pytest.raises(ValueError):
        line_buff_writer(None, 12, ALL_LEVELS)

    h.handle(make_record("Test LineBuffWriter"))
    text = logfile.read_text()
    assert "[INFO]" in text
    assert "Test LineBuffWriter" in text
    out.close()