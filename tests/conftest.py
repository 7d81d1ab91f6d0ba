"""Root test configuration for surtgate.

Clears SURTGATE_* environment variables for the whole suite so a developer's
shell settings never leak into config tests, and provides helpers for writing
whitelist files with controlled modification times.
"""

import os

import pytest


@pytest.fixture(autouse=True)
def clean_surtgate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove surtgate env overrides for every test.

    Tests that exercise overrides set them again with their own monkeypatch calls.
    """
    for name in (
        "SURTGATE_CONFIG",
        "SURTGATE_WHITELIST_FILE",
        "SURTGATE_CHECK_INTERVAL",
        "SURTGATE_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def write_whitelist(tmp_path):
    """Return a writer: write_whitelist(lines, mtime_ns=None, name=...) -> path.

    mtime_ns pins the file's modification time so reload tests never depend
    on filesystem timestamp resolution.
    """

    def _write(lines, mtime_ns=None, name="whitelist.txt"):
        path = os.path.join(str(tmp_path), name)
        with open(path, "w", encoding="utf-8") as f:
            f.write("\n".join(lines))
            if lines:
                f.write("\n")
        if mtime_ns is not None:
            os.utime(path, ns=(mtime_ns, mtime_ns))
        return path

    return _write


class RecordingLogger:
    """Logger stand-in that keeps (level, event, fields) for every call."""

    def __init__(self):
        self.calls = []

    def _log(self, level, event, **fields):
        self.calls.append((level, event, fields))

    def debug(self, event, **fields):
        self._log("debug", event, **fields)

    def info(self, event, **fields):
        self._log("info", event, **fields)

    def warning(self, event, **fields):
        self._log("warning", event, **fields)

    def error(self, event, **fields):
        self._log("error", event, **fields)

    def levels(self, level):
        return [call for call in self.calls if call[0] == level]


@pytest.fixture
def recording_logger():
    return RecordingLogger()
