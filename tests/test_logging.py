"""Tests for the console logger and progress bar helper."""

import io

import pytest
from chipcore.logging import ConsoleLogger, progress_bar


def make_logger(level="INFO"):
    stream = io.StringIO()
    return ConsoleLogger(log_level=level, show_timestamps=False, stream=stream), stream


def test_message_format():
    logger, stream = make_logger()
    logger.info("Loaded pong.ch8")
    assert stream.getvalue() == "[    INFO][chipcore] Loaded pong.ch8\n"


def test_level_filtering():
    logger, stream = make_logger("WARNING")
    logger.debug("hidden")
    logger.info("hidden")
    logger.warning("shown")
    logger.error("shown too")

    lines = stream.getvalue().splitlines()
    assert len(lines) == 2
    assert "WARNING" in lines[0]
    assert "ERROR" in lines[1]


def test_no_colors_on_non_tty():
    logger, stream = make_logger()
    logger.error("boom")
    assert "\033[" not in stream.getvalue()


def test_set_level():
    logger, stream = make_logger()
    logger.set_level("debug")
    assert logger.log_level == "DEBUG"
    logger.debug("now visible")
    assert "now visible" in stream.getvalue()

    with pytest.raises(ValueError):
        logger.set_level("VERBOSE")


def test_timestamps():
    stream = io.StringIO()
    logger = ConsoleLogger(stream=stream)
    logger.info("tick")
    assert stream.getvalue().startswith("[")
    assert "s][    INFO]" in stream.getvalue()


def test_progress_bar():
    out = io.StringIO()
    with progress_bar(10, file=out, unit="ignored") as bar:
        bar.update(4)
        assert bar.total == 10
        assert bar.unit == "cycle"
        assert bar.desc == "Running (10 cycles)"
    assert "4/10" in out.getvalue() or "10/10" in out.getvalue()


def test_progress_bar_disabled():
    out = io.StringIO()
    with progress_bar(10, disable=True, file=out) as bar:
        bar.update(10)
    assert out.getvalue() == ""


def test_unknown_level_logs_as_info():
    logger, stream = make_logger()
    logger.log("verbose", "custom level")
    assert stream.getvalue() == "[ VERBOSE][chipcore] custom level\n"

    logger.set_level("WARNING")
    logger.log("VERBOSE", "filtered like INFO")
    assert "filtered" not in stream.getvalue()
