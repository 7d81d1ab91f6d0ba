"""Tests for surtgate.utils.logger."""

from __future__ import annotations

import io
import json
import time

import pytest
import structlog

from surtgate.utils.logger import PerformanceLogger, configure_logging


@pytest.fixture
def log_stream():
    """Route log lines into a buffer, restoring the default setup afterwards."""
    stream = io.StringIO()
    configure_logging("INFO", json_output=True, stream=stream)
    yield stream
    configure_logging()


def _lines(stream: io.StringIO) -> list[dict]:
    return [json.loads(line) for line in stream.getvalue().splitlines()]


class TestConfigureLogging:
    def test_json_line_fields(self, log_stream):
        structlog.get_logger("test").info("whitelist checked", entries=3)
        (line,) = _lines(log_stream)
        assert line["event"] == "whitelist checked"
        assert line["entries"] == 3
        assert line["level"] == "info"
        assert "timestamp" in line

    def test_level_filtering(self, log_stream):
        logger = structlog.get_logger("test")
        logger.debug("hidden")
        logger.warning("shown")
        assert [line["event"] for line in _lines(log_stream)] == ["shown"]

    def test_bound_context_merged(self, log_stream):
        with structlog.contextvars.bound_contextvars(evaluation_id="eval-1"):
            structlog.get_logger("test").info("inside")
        structlog.get_logger("test").info("outside")
        inside, outside = _lines(log_stream)
        assert inside["evaluation_id"] == "eval-1"
        assert "evaluation_id" not in outside


class TestPerformanceLogger:
    def test_fast_operation_logged_at_debug(self, recording_logger):
        with PerformanceLogger("whitelist_load", logger=recording_logger, path="/w.txt") as perf:
            pass
        assert perf.duration_ms >= 0
        ((level, event, fields),) = recording_logger.calls
        assert level == "debug"
        assert event == "whitelist_load completed"
        assert fields["path"] == "/w.txt"
        assert fields["operation"] == "whitelist_load"

    def test_slow_operation_logged_at_warning(self, recording_logger):
        with PerformanceLogger("whitelist_load", logger=recording_logger, warn_ms=0.0):
            time.sleep(0.002)
        assert recording_logger.calls[0][0] == "warning"

    def test_failure_logged_once_and_propagated(self, recording_logger):
        with pytest.raises(RuntimeError):
            with PerformanceLogger("whitelist_load", logger=recording_logger):
                raise RuntimeError("boom")
        ((level, event, fields),) = recording_logger.calls
        assert level == "error"
        assert event == "whitelist_load failed"
        assert fields["error"] == "boom"
        assert fields["error_type"] == "RuntimeError"

    def test_duration_is_frozen_after_exit(self, recording_logger):
        with PerformanceLogger("op", logger=recording_logger) as perf:
            pass
        first = perf.duration_ms
        time.sleep(0.002)
        assert perf.duration_ms == first

    def test_duration_before_enter(self):
        assert PerformanceLogger("op").duration_ms == 0.0
