"""Whitelist decision filter for surtgate.

WhitelistFilter.decide() is called once per capture record by the replay
pipeline. A record is INCLUDED only if one of its SURT prefix search terms is
in the current whitelist snapshot; everything else is EXCLUDED.

INVARIANT:
  - NEVER raises for bad input. Unparseable keys and a missing snapshot both
    produce EXCLUDE (fail-closed).
  - Consecutive records with the same url_key reuse the previous verdict,
    even if the whitelist was reloaded in between.
  - The filter group is told "saw administrative" on the first record and
    "passed administrative" on the first INCLUDE, each at most once.

Not thread-safe: callers sharing one instance must serialise decide().
"""

from __future__ import annotations

from typing import Callable, Iterable, Optional

from surtgate.filters.models import CaptureRecord, FilterVerdict
from surtgate.filters.protocol import ExclusionFilterGroup
from surtgate.surt.canonicalizer import MalformedURLError, UrlCanonicalizer
from surtgate.surt.tokenizer import SurtTokenizer
from surtgate.utils.logger import get_logger
from surtgate.whitelist.store import WhitelistSnapshot

logger = get_logger(__name__)

SnapshotSource = Callable[[], Optional[WhitelistSnapshot]]
Tokenizer = Callable[[str, bool], Iterable[str]]


class WhitelistFilter:
    """Per-evaluation filter over a reloadable whitelist.

    Args:
        snapshot_source: Returns the currently installed snapshot (or None).
        canonicalizer:   Tells the tokenizer whether url keys are SURT-ordered.
        tokenizer:       Produces search terms for a key; SurtTokenizer by default.
    """

    def __init__(
        self,
        snapshot_source: SnapshotSource,
        canonicalizer: UrlCanonicalizer,
        tokenizer: Tokenizer = SurtTokenizer,
    ) -> None:
        self._snapshot_source = snapshot_source
        self._canonicalizer = canonicalizer
        self._tokenizer = tokenizer
        self._filter_group: Optional[ExclusionFilterGroup] = None

        self._last_checked: Optional[str] = None
        self._last_checked_excluded = False
        self._notified_seen = False
        self._notified_passed = False

    @property
    def canonicalizer(self) -> UrlCanonicalizer:
        return self._canonicalizer

    @property
    def filter_group(self) -> Optional[ExclusionFilterGroup]:
        return self._filter_group

    def set_filter_group(self, group: Optional[ExclusionFilterGroup]) -> None:
        """Attach the evaluation group.

        The group's canonicalizer, if set, replaces the configured one.
        """
        self._filter_group = group
        override = getattr(group, "canonicalizer", None) if group is not None else None
        if override is not None:
            self._canonicalizer = override

    # ── Decision ──────────────────────────────────────────────────────────────

    def is_excluded(self, url_key: str) -> bool:
        """True unless some search term for url_key is in the whitelist."""
        snapshot = self._snapshot_source()
        if snapshot is None:
            logger.warning("No whitelist snapshot — excluding", url=url_key)
            return True

        try:
            for term in self._tokenizer(url_key, self._canonicalizer.is_surt_form()):
                logger.debug("Whitelist checking", term=term)
                if term in snapshot:
                    logger.debug("Whitelist included", term=term, url=url_key)
                    return False
        except MalformedURLError as exc:
            logger.warning("Malformed URL key — excluding", url=url_key, error=str(exc))
            return True
        return True

    def decide(self, record: CaptureRecord) -> FilterVerdict:
        """Return INCLUDE or EXCLUDE for one capture record."""
        if not self._notified_seen:
            if self._filter_group is not None:
                self._filter_group.set_saw_administrative()
            self._notified_seen = True

        url_key = record.url_key
        if self._last_checked is not None and self._last_checked == url_key:
            return FilterVerdict.EXCLUDE if self._last_checked_excluded else FilterVerdict.INCLUDE

        self._last_checked = url_key
        self._last_checked_excluded = self.is_excluded(url_key)
        if self._last_checked_excluded:
            return FilterVerdict.EXCLUDE

        if not self._notified_passed:
            if self._filter_group is not None:
                self._filter_group.set_passed_administrative()
            self._notified_passed = True
        return FilterVerdict.INCLUDE

    __call__ = decide
