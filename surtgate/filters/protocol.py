"""Extension-point Protocols between surtgate and the replay pipeline.

The pipeline drives filtering; surtgate only implements these narrow
capabilities:

    ExclusionFilter        — decides INCLUDE/EXCLUDE for one capture at a time
    ExclusionFilterFactory — builds per-evaluation filters, owns lifecycle
    ExclusionFilterGroup   — the pipeline's per-evaluation group, notified
                             when administrative filtering happens
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from surtgate.filters.models import CaptureRecord, FilterVerdict
from surtgate.surt.canonicalizer import UrlCanonicalizer


@runtime_checkable
class ExclusionFilterGroup(Protocol):
    """Per-evaluation group that collects administrative-filter signals.

    canonicalizer, when not None, overrides the factory's configured
    canonicalizer for every filter attached to the group.
    """

    canonicalizer: Optional[UrlCanonicalizer]

    def set_saw_administrative(self) -> None:
        """Called once per filter: administrative filtering was applied."""
        ...

    def set_passed_administrative(self) -> None:
        """Called once per filter: at least one record passed it."""
        ...


@runtime_checkable
class ExclusionFilter(Protocol):
    """Stateful per-evaluation filter. Driven by one caller at a time."""

    def set_filter_group(self, group: Optional[ExclusionFilterGroup]) -> None:
        ...

    def decide(self, record: CaptureRecord) -> FilterVerdict:
        ...


@runtime_checkable
class ExclusionFilterFactory(Protocol):
    """Pluggable exclusion filter factory.

    build_filter() returns None when the factory has no data to filter with;
    the composite chain decides what that means.
    """

    def build_filter(self) -> Optional[ExclusionFilter]:
        ...

    async def initialize(self) -> None:
        ...

    async def shutdown(self) -> None:
        ...
