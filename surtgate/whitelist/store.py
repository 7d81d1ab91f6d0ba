"""Immutable whitelist snapshot."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Iterable, Iterator


@dataclass(frozen=True)
class WhitelistSnapshot:
    """One successfully loaded version of the whitelist file.

    Fields:
        keys:        SURT prefixes that are included.
        path:        File the snapshot was loaded from.
        modified_ns: File modification time (ns) at load.
        loaded_at:   Epoch seconds when the snapshot was built.

    INVARIANT: never mutated after construction. A reload builds a new
    snapshot and swaps the reference; readers holding the old one keep a
    consistent view.
    """

    keys: frozenset[str]
    path: str = ""
    modified_ns: int = 0
    loaded_at: float = field(default_factory=time.time)

    @classmethod
    def from_keys(cls, keys: Iterable[str], path: str = "", modified_ns: int = 0) -> "WhitelistSnapshot":
        return cls(keys=frozenset(keys), path=path, modified_ns=modified_ns)

    def __contains__(self, key: object) -> bool:
        return key in self.keys

    def __len__(self) -> int:
        return len(self.keys)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys)
