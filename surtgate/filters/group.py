"""Plain ExclusionFilterGroup implementation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from surtgate.surt.canonicalizer import UrlCanonicalizer


@dataclass
class CaptureFilterGroup:
    """Records the administrative-filter signals for one evaluation.

    A pipeline may supply its own group; this one is used by the CLI and is
    enough for callers that only need the two flags.
    """

    canonicalizer: Optional[UrlCanonicalizer] = None
    saw_administrative: bool = False
    passed_administrative: bool = False

    def set_saw_administrative(self) -> None:
        self.saw_administrative = True

    def set_passed_administrative(self) -> None:
        self.passed_administrative = True
