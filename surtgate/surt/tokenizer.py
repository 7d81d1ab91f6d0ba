"""SURT search-term generation.

SurtTokenizer turns one canonical URL key into the ordered list of prefix
search terms tried against the whitelist, most specific first::

    com,example)/a/b.html?x=1
    com,example)/a/b.html
    com,example)/a/
    com,example)/a
    com,example)/
    com,example

INVARIANTS:
  - Every term is a strict prefix of the term before it.
  - The sequence is finite and restarts on every iter().
  - Unparseable keys fail at construction with MalformedURLError.
"""

from __future__ import annotations

from typing import Iterator, Optional

from surtgate.surt.canonicalizer import (
    MalformedURLError,
    is_surt_key,
    normalize_surt_key,
    surt_host,
)


def to_surt(url_key: str) -> str:
    """Convert a host-first canonical key (``host[:port]/path?query``) to SURT form.

    Keys that are already SURT-shaped are normalised and returned.

    Raises:
        MalformedURLError: If the key has no usable host.
    """
    key = (url_key or "").strip()
    if not key:
        raise MalformedURLError("Empty URL key")
    if is_surt_key(key):
        return normalize_surt_key(key)

    cut = len(key)
    for sep in ("/", "?"):
        idx = key.find(sep)
        if idx != -1:
            cut = min(cut, idx)
    authority, rest = key[:cut], key[cut:]
    # userinfo never takes part in the key
    authority = authority.rpartition("@")[2]
    if not rest.startswith("/"):
        rest = "/" + rest
    return f"{surt_host(authority)}){rest}"


def rooted_key(key: str) -> str:
    """Give a SURT key with no path the root path: ``com,example)`` becomes ``com,example)/``.

    Search terms never end at a bare ``)``, so host-level entries must be
    stored in their ``host)/`` form to be found.
    """
    host, sep, rest = key.partition(")")
    if sep and not rest.startswith("/"):
        rest = "/" + rest
    return f"{host}{sep}{rest}"


def prefix_key(url_key: str) -> str:
    """SURT prefix for a whitelist entry built from a canonical key.

    A trailing slash on a non-root path is dropped so that
    ``example.com/dir/`` matches the ``com,example)/dir`` search term.
    """
    key = rooted_key(to_surt(url_key))
    host, _, rest = key.partition(")")
    if len(rest) > 1 and rest.endswith("/") and "?" not in rest:
        rest = rest.rstrip("/") or "/"
    return f"{host}){rest}"


class SurtTokenizer:
    """Ordered SURT prefix search terms for one URL key.

    Args:
        url_key:   Canonical key of the capture (as produced by the canonicalizer).
        surt_form: True if url_key is already SURT-ordered.
    """

    def __init__(self, url_key: str, surt_form: bool) -> None:
        key = (url_key or "").strip()
        if not key:
            raise MalformedURLError("Empty URL key")
        if surt_form or is_surt_key(key):
            key = normalize_surt_key(key)
        else:
            key = to_surt(key)

        host, sep, rest = key.partition(")")
        if not sep or not host:
            raise MalformedURLError(f"No host in SURT key {url_key!r}")
        if not rest.startswith("/"):
            rest = "/" + rest
        self._host = host
        self._rest = rest

    @property
    def key(self) -> str:
        """The full SURT key (first search term)."""
        return f"{self._host}){self._rest}"

    def __iter__(self) -> Iterator[str]:
        last: Optional[str] = None
        for term in self._candidates():
            if last is None or (len(term) < len(last) and last.startswith(term)):
                last = term
                yield term

    def _candidates(self) -> Iterator[str]:
        base = f"{self._host})"
        yield base + self._rest

        path = self._rest.partition("?")[0]
        yield base + path

        while path != "/":
            trimmed = path.rstrip("/")
            if not trimmed:
                path = "/"
            elif trimmed != path:
                path = trimmed
            else:
                path = path[: path.rfind("/") + 1]
            yield base + path

        yield self._host

    def __repr__(self) -> str:
        return f"SurtTokenizer({self.key!r})"
