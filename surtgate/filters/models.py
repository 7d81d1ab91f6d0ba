"""Record and verdict types exchanged with the replay pipeline."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional


class FilterVerdict(str, enum.Enum):
    """Outcome of filtering one capture record."""

    INCLUDE = "INCLUDE"
    EXCLUDE = "EXCLUDE"


@dataclass(frozen=True)
class CaptureRecord:
    """One archived capture being considered for replay.

    url_key is the canonical lookup key produced by the index canonicalizer
    (e.g. ``com,example)/page.html``); it is the only field filters read.
    """

    url_key: str
    original_url: Optional[str] = None
    timestamp: Optional[str] = None
