"""surtgate filters — per-record whitelist decisions for the replay pipeline.

Public API:
    WhitelistFilterFactory — pipeline extension point (build_filter/initialize/shutdown)
    WhitelistFilter        — per-evaluation INCLUDE/EXCLUDE decision filter
    CaptureRecord          — capture being filtered
    FilterVerdict          — INCLUDE / EXCLUDE
    CaptureFilterGroup     — simple evaluation group
"""
from surtgate.filters.factory import WhitelistFilterFactory
from surtgate.filters.group import CaptureFilterGroup
from surtgate.filters.models import CaptureRecord, FilterVerdict
from surtgate.filters.protocol import (
    ExclusionFilter,
    ExclusionFilterFactory,
    ExclusionFilterGroup,
)
from surtgate.filters.whitelist_filter import WhitelistFilter

__all__ = [
    "CaptureFilterGroup",
    "CaptureRecord",
    "ExclusionFilter",
    "ExclusionFilterFactory",
    "ExclusionFilterGroup",
    "FilterVerdict",
    "WhitelistFilter",
    "WhitelistFilterFactory",
]
