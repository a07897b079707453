import pytest

from gslog.levels import (
    DANGER_LEVELS,
    LEVEL_NAMES,
    NORMAL_LEVELS,
    Level,
    exit_handlers,
    level_by_name,
    level_name,
    name_to_level,
    prepend_exit_handler,
    register_exit_handler,
    reset_exit_handlers,
    run_exit_handlers,
)


@pytest.fixture(autouse=True)
def _clean_exit_handlers():
    reset_exit_handlers()
    yield
    reset_exit_handlers()


def test_level_name():
    assert Level.INFO.name == "INFO"
    assert str(Level.INFO) == "INFO"
    assert Level.INFO.lower_name() == "info"
    assert Level(330).lower_name() == "unknown"


def test_level_by_name():
    assert level_by_name("info") == Level.INFO
    assert level_by_name("invalid") == Level.INFO
    assert level_by_name("WARNING") == Level.WARN


def test_level_name_function():
    for level, want in LEVEL_NAMES.items():
        assert level_name(level) == want
    assert level_name(20) == "UNKNOWN"


@pytest.mark.parametrize(
    "name, expected",
    [
        ("panic", Level.PANIC),
        ("fatal", Level.FATAL),
        ("err", Level.ERROR),
        ("Error", Level.ERROR),
        ("warn", Level.WARN),
        ("note", Level.NOTICE),
        ("notice", Level.NOTICE),
        ("", Level.INFO),
        ("debug", Level.DEBUG),
        ("TRACE", Level.TRACE),
    ],
)
def test_name_to_level(name, expected):
    assert name_to_level(name) == expected


def test_name_to_level_invalid():
    with pytest.raises(ValueError, match="invalid log level name: nope"):
        name_to_level("nope")


def test_should_handling():
    assert Level.INFO.should_handling(Level.ERROR)
    assert not Level.INFO.should_handling(Level.TRACE)
    assert Level.DEBUG.should_handling(Level.INFO)
    assert not Level.DEBUG.should_handling(Level.TRACE)


def test_levels_contains():
    assert name_to_level("error") in DANGER_LEVELS
    assert name_to_level("info") not in DANGER_LEVELS
    assert name_to_level("info") in NORMAL_LEVELS
    assert name_to_level("panic") not in NORMAL_LEVELS


def test_exit_handlers_order():
    calls = []
    register_exit_handler(lambda: calls.append("a"))
    prepend_exit_handler(lambda: calls.append("b"))
    assert len(exit_handlers()) == 2
    run_exit_handlers()
    assert calls == ["b", "a"]

    reset_exit_handlers()
    assert exit_handlers() == []


def test_run_exit_handlers_recovers(capsys):
    calls = []

    def boom():
        raise RuntimeError("exit failed")

    register_exit_handler(boom)
    register_exit_handler(lambda: calls.append("after"))
    run_exit_handlers()

    err = capsys.readouterr().err
    assert "run exit handler(global) recovered" in err
    assert "exit failed" in err
    assert calls == []