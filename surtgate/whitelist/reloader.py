"""Whitelist reload manager for surtgate.

Owns the currently installed WhitelistSnapshot for one whitelist file, detects
file changes by modification time and swaps in freshly loaded snapshots.
An optional asyncio task polls the file on a fixed interval.

Usage (in an async service startup):
    reloader = WhitelistReloader("/srv/wayback/whitelist.txt", SurtUrlCanonicalizer())
    reloader.reload()
    reloader.start_scheduled(600)
    ...
    await reloader.stop()

Concurrency:
    - current_snapshot() is lock-free: snapshots are immutable and installed
      by a single reference assignment.
    - reload() holds an internal lock, so at most one load is in flight.
    - start_scheduled()/stop() share a second lock; at most one scheduled
      task exists per reloader.

Failure policy:
    - File missing → ERROR log, nothing changes (previous snapshot, if any, stays).
    - Load failure → ERROR log, previous snapshot stays installed, timestamp is
      set to INVALID_MTIME so the next reload() retries.
"""

from __future__ import annotations

import asyncio
import enum
import os
import threading
from typing import Optional

from surtgate.constants import FILE_MISSING_MTIME, INVALID_MTIME
from surtgate.surt.canonicalizer import UrlCanonicalizer
from surtgate.utils.logger import PerformanceLogger, get_logger
from surtgate.whitelist.loader import WhitelistLoadError, load_whitelist
from surtgate.whitelist.store import WhitelistSnapshot

logger = get_logger(__name__)


class ReloadOutcome(str, enum.Enum):
    """Result of one reload() call."""

    UNCHANGED = "UNCHANGED"
    MISSING = "MISSING"
    RELOADED = "RELOADED"
    FAILED = "FAILED"


def file_modified_ns(path: str) -> int:
    """Modification time of path in ns, or FILE_MISSING_MTIME if it cannot be stat'ed."""
    try:
        return os.stat(path).st_mtime_ns
    except OSError:
        return FILE_MISSING_MTIME


class WhitelistReloader:
    """Keeps the whitelist snapshot for one file current."""

    def __init__(self, path: str, canonicalizer: UrlCanonicalizer) -> None:
        self._path = os.path.abspath(path)
        self._canonicalizer = canonicalizer
        self._snapshot: Optional[WhitelistSnapshot] = None
        self._last_modified: int = FILE_MISSING_MTIME
        self._reload_lock = threading.Lock()
        self._task_lock = threading.Lock()
        self._task: Optional[asyncio.Task] = None  # type: ignore[type-arg]

    @property
    def path(self) -> str:
        return self._path

    @property
    def last_modified(self) -> int:
        """Timestamp of the installed snapshot's file, or a sentinel."""
        return self._last_modified

    @property
    def is_scheduled(self) -> bool:
        task = self._task
        return task is not None and not task.done()

    # ── Snapshot access ───────────────────────────────────────────────────────

    def current_snapshot(self) -> Optional[WhitelistSnapshot]:
        """Return the installed snapshot, or None if no load has ever succeeded."""
        return self._snapshot

    # ── Reload ────────────────────────────────────────────────────────────────

    def reload(self) -> ReloadOutcome:
        """Reload the whitelist file if its modification time changed.

        Never raises on missing or unreadable files; the outcome says what
        happened and the condition is logged.
        """
        with self._reload_lock:
            current_mod = file_modified_ns(self._path)

            if current_mod == FILE_MISSING_MTIME:
                logger.error(
                    "No whitelist file",
                    path=self._path,
                    has_snapshot=self._snapshot is not None,
                )
                return ReloadOutcome.MISSING

            if current_mod == self._last_modified:
                return ReloadOutcome.UNCHANGED

            logger.info("Reloading whitelist file", path=self._path)
            try:
                # Failures are logged by PerformanceLogger.
                with PerformanceLogger(
                    "whitelist_load",
                    logger,
                    path=self._path,
                    has_snapshot=self._snapshot is not None,
                ):
                    snapshot = load_whitelist(
                        self._path, self._canonicalizer, modified_ns=current_mod
                    )
            except WhitelistLoadError:
                self._last_modified = INVALID_MTIME
                return ReloadOutcome.FAILED

            self._snapshot = snapshot
            self._last_modified = current_mod
            logger.info("Whitelist reload OK", path=self._path, entries=len(snapshot))
            return ReloadOutcome.RELOADED

    # ── Scheduled reload ──────────────────────────────────────────────────────

    def start_scheduled(self, interval_s: float) -> bool:
        """Start the periodic reload task on the running event loop.

        Returns False (and does nothing) if a scheduled task is already running.

        Raises:
            ValueError:   If interval_s is not positive.
            RuntimeError: If called without a running event loop.
        """
        if interval_s <= 0:
            raise ValueError(f"Reload interval must be positive, got {interval_s}")
        with self._task_lock:
            if self.is_scheduled:
                return False
            loop = asyncio.get_running_loop()
            self._task = loop.create_task(self._run_scheduled(interval_s))
        logger.info("Whitelist reload task started", path=self._path, interval_s=interval_s)
        return True

    async def stop(self) -> None:
        """Cancel the periodic reload task and wait for it to finish. Idempotent."""
        with self._task_lock:
            task, self._task = self._task, None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Whitelist reload task stopped", path=self._path)

    async def _run_scheduled(self, interval_s: float) -> None:
        """Background task: reload(), sleep interval_s, repeat until cancelled.

        Retry policy:
          - asyncio.CancelledError → exit cleanly (expected on shutdown)
          - Any other exception    → log ERROR, keep the schedule
        """
        while True:
            try:
                # File I/O runs off the event loop
                await asyncio.to_thread(self.reload)
            except asyncio.CancelledError:
                logger.debug("Whitelist reload task cancelled", path=self._path)
                raise
            except Exception as exc:  # noqa: BLE001
                logger.error(
                    "Scheduled whitelist reload error (non-fatal)",
                    path=self._path,
                    error=str(exc),
                    error_type=type(exc).__name__,
                )
            try:
                await asyncio.sleep(interval_s)
            except asyncio.CancelledError:
                logger.debug("Whitelist reload task cancelled", path=self._path)
                raise

    def __repr__(self) -> str:
        return f"WhitelistReloader(path={self._path!r}, last_modified={self._last_modified})"
