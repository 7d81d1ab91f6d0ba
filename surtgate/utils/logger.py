"""Structured logging for surtgate, built on structlog.

Modules log through ``logger = get_logger(__name__)`` with an event string and
key/value fields. Anything bound with ``structlog.contextvars`` (the CLI binds
an ``evaluation_id`` for each run) is merged into every line.
"""

import logging
import sys
import time
from typing import Any, Optional, TextIO

import structlog
from structlog.types import Processor

from surtgate.constants import SLOW_LOAD_WARN_MS


def configure_logging(
    log_level: str = "INFO",
    json_output: bool = True,
    stream: Optional[TextIO] = None,
) -> None:
    """Configure structlog for the process.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        json_output: JSON lines if True, human-readable console lines otherwise
        stream: Where lines are written (stdout by default)
    """
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(log_level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stdout),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = "surtgate") -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


class PerformanceLogger:
    """Times a block and writes one log line when it ends.

    DEBUG on success, WARNING when slower than ``warn_ms``, ERROR with the
    exception text on failure. Exceptions are never suppressed.

    Usage:
        with PerformanceLogger("whitelist_load", logger, path=path):
            snapshot = load_whitelist(path, canonicalizer)
    """

    def __init__(
        self,
        operation: str,
        logger: Optional[structlog.stdlib.BoundLogger] = None,
        warn_ms: float = SLOW_LOAD_WARN_MS,
        **fields: Any,
    ):
        self.operation = operation
        self.warn_ms = warn_ms
        self.fields = fields
        self._logger = logger or get_logger()
        self._start: Optional[float] = None
        self._elapsed: Optional[float] = None

    def __enter__(self) -> "PerformanceLogger":
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self._elapsed = time.perf_counter() - (self._start or 0.0)
        fields = {
            "operation": self.operation,
            "duration_ms": round(self.duration_ms, 3),
            **self.fields,
        }
        if exc_val is not None:
            self._logger.error(
                f"{self.operation} failed",
                error=str(exc_val),
                error_type=exc_type.__name__,
                **fields,
            )
        elif self.duration_ms > self.warn_ms:
            self._logger.warning(f"{self.operation} slow", **fields)
        else:
            self._logger.debug(f"{self.operation} completed", **fields)

    @property
    def duration_ms(self) -> float:
        """Elapsed time so far, frozen once the block has exited."""
        if self._start is None:
            return 0.0
        if self._elapsed is None:
            return (time.perf_counter() - self._start) * 1000
        return self._elapsed * 1000


# Defaults until the CLI (or the embedding service) reconfigures from config
configure_logging()
