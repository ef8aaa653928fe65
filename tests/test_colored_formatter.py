"""Tests for ColoredFormatter and setup_logging."""

import logging
from io import StringIO
from unittest.mock import patch

import pytest

from jukebox_voting.utils.logging import ColoredFormatter, setup_logging

RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[1;31m",
}


class _TTY(StringIO):
    def isatty(self) -> bool:
        return True


def _make_record(level: int, message: str = "ballot counted") -> logging.LogRecord:
    return logging.LogRecord(
        name="jukebox_voting.test",
        level=level,
        pathname="test.py",
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )


class TestColoredFormatter:
    """Tests for ANSI color formatting."""

    @pytest.mark.parametrize("level", sorted(LEVEL_COLORS))
    def test_color_applied_per_level(self, level: int):
        fmt = ColoredFormatter("%(levelname)s | %(message)s", stream=_TTY())
        output = fmt.format(_make_record(level))

        assert output.startswith(LEVEL_COLORS[level])
        assert RESET in output

    def test_no_color_when_no_color_env_set(self):
        fmt = ColoredFormatter("%(levelname)s | %(message)s", stream=_TTY())

        with patch.dict("os.environ", {"NO_COLOR": "1"}):
            output = fmt.format(_make_record(logging.INFO))

        assert output == "INFO | ballot counted"

    def test_no_color_when_stream_not_tty(self):
        fmt = ColoredFormatter("%(levelname)s | %(message)s", stream=StringIO())
        assert "\033[" not in fmt.format(_make_record(logging.ERROR))

    def test_original_record_not_mutated(self):
        fmt = ColoredFormatter("%(levelname)s | %(message)s", stream=_TTY())
        record = _make_record(logging.WARNING)

        fmt.format(record)

        assert record.levelname == "WARNING"


class TestSetupLogging:
    @pytest.fixture(autouse=True)
    def restore_root(self):
        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_installs_handler_and_level(self):
        stream = StringIO()
        handler = setup_logging("debug", stream=stream)

        root = logging.getLogger()
        assert handler in root.handlers
        assert root.level == logging.DEBUG

        logging.getLogger("jukebox_voting.test").debug("flush window opened")
        assert "flush window opened" in stream.getvalue()
        assert "jukebox_voting.test" in stream.getvalue()

    def test_repeated_setup_replaces_own_handler(self):
        first = setup_logging(stream=StringIO())
        second = setup_logging(stream=StringIO())

        root = logging.getLogger()
        assert first not in root.handlers
        assert second in root.handlers

    def test_unknown_level_falls_back_to_info(self):
        setup_logging("chatty", stream=StringIO())
        assert logging.getLogger().level == logging.INFO
