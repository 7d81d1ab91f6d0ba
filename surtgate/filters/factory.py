"""Whitelist filter factory — the pipeline-facing entry point of surtgate.

Blocks every capture except those whose URL is covered by a whitelist file.

Example config.yaml:
    version: 1
    whitelist:
      file: /srv/wayback/whitelisted_urls.txt
      check_interval: 600

Lifecycle:
    factory = WhitelistFilterFactory.from_config(config.whitelist)
    await factory.initialize()      # first load + optional scheduled reload
    flt = factory.build_filter()    # None until a whitelist has loaded
    ...
    await factory.shutdown()
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Optional

from surtgate.constants import DEFAULT_CHECK_INTERVAL_S
from surtgate.filters.whitelist_filter import WhitelistFilter
from surtgate.surt.canonicalizer import SurtUrlCanonicalizer, UrlCanonicalizer, get_canonicalizer
from surtgate.utils.logger import get_logger
from surtgate.whitelist.reloader import WhitelistReloader

if TYPE_CHECKING:
    from surtgate.config import WhitelistConfig

logger = get_logger(__name__)


class WhitelistFilterFactory:
    """Builds WhitelistFilter instances backed by one reloadable whitelist file.

    Each factory owns its own WhitelistReloader; nothing is shared between
    factory instances.
    """

    def __init__(
        self,
        file: str,
        check_interval: int = DEFAULT_CHECK_INTERVAL_S,
        canonicalizer: Optional[UrlCanonicalizer] = None,
    ) -> None:
        if check_interval < 0:
            raise ValueError(f"check_interval must be >= 0, got {check_interval}")
        self._file = file
        self._check_interval = check_interval
        self._canonicalizer: UrlCanonicalizer = canonicalizer or SurtUrlCanonicalizer()
        self._reloader = WhitelistReloader(file, self._canonicalizer)

    @classmethod
    def from_config(cls, config: "WhitelistConfig") -> "WhitelistFilterFactory":
        """Build a factory from the ``whitelist:`` config section.

        Raises:
            ValueError: If the config has no whitelist file or an unknown canonicalizer.
        """
        if not config.file:
            raise ValueError("whitelist.file is not configured")
        return cls(
            file=config.file,
            check_interval=config.check_interval,
            canonicalizer=get_canonicalizer(config.canonicalizer),
        )

    @property
    def file(self) -> str:
        return self._reloader.path

    @property
    def check_interval(self) -> int:
        return self._check_interval

    @property
    def canonicalizer(self) -> UrlCanonicalizer:
        return self._canonicalizer

    @property
    def reloader(self) -> WhitelistReloader:
        return self._reloader

    # ── Lifecycle ─────────────────────────────────────────────────────────────

    async def initialize(self) -> None:
        """Load the whitelist and start the reload schedule (if check_interval > 0).

        A missing or unreadable file is logged, not raised; build_filter()
        returns None until a load succeeds.
        """
        outcome = await asyncio.to_thread(self._reloader.reload)
        logger.info(
            "Whitelist filter factory initialized",
            path=self.file,
            outcome=outcome.value,
            check_interval_s=self._check_interval,
        )
        if self._check_interval > 0:
            self._reloader.start_scheduled(self._check_interval)

    async def shutdown(self) -> None:
        """Stop the reload schedule. Idempotent."""
        await self._reloader.stop()

    # ── Filters ───────────────────────────────────────────────────────────────

    def build_filter(self) -> Optional[WhitelistFilter]:
        """Return a new filter, or None if no whitelist has ever loaded."""
        if self._reloader.current_snapshot() is None:
            return None
        return WhitelistFilter(self._reloader.current_snapshot, self._canonicalizer)
