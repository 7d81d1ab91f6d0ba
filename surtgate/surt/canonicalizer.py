"""URL canonicalizers for surtgate.

A canonicalizer turns a raw URL string into the lookup key used by the
capture index. Two implementations are provided:

  SurtUrlCanonicalizer       — keys in SURT form: ``com,example)/path?a=1``
  AggressiveUrlCanonicalizer — keys in host-first form: ``example.com/path?a=1``

Both apply the same normalisation (lowercasing, ``www`` stripping, default
port removal, session-id removal, query argument sorting); they differ only
in how the host is written. Input that is already a SURT key passes through
with light normalisation, so whitelist files may mix URLs and SURT prefixes.

IMPORT RULES:
  - `import re2` ONLY — `import re` is PROHIBITED in this package.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable
from urllib.parse import urlsplit

import re2

from surtgate.constants import DEFAULT_PORTS, SESSION_QUERY_PARAMS

# ─── Patterns ─────────────────────────────────────────────────────────────────

_SCHEME_RE = re2.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*://")

# host-surt followed by ")", e.g. "com,example)" or "(com,example,)"
_SURT_KEY_RE = re2.compile(r"^\(?[^\s/?#()]+\)")

_WWW_PREFIX_RE = re2.compile(r"^www\d*\.")

_PATH_SESSION_RE = re2.compile(r"(?i);jsessionid=[0-9a-z$._\-]*")


class MalformedURLError(ValueError):
    """Raised when a URL (or URL key) cannot be canonicalized or tokenized."""


@runtime_checkable
class UrlCanonicalizer(Protocol):
    """Turns URL strings into index lookup keys."""

    def url_string_to_key(self, url: str) -> str:
        """Return the canonical key for url. Raises MalformedURLError."""
        ...

    def is_surt_form(self) -> bool:
        """True if url_string_to_key() returns SURT-ordered keys."""
        ...


def is_surt_key(text: str) -> bool:
    """True if text already looks like a SURT key (``host-surt)`` prefix)."""
    return _SURT_KEY_RE.match(text) is not None


def normalize_surt_key(text: str) -> str:
    """Lowercase a SURT key, drop a leading ``(`` and collapse ``,)`` to ``)``."""
    key = text.strip().lower()
    if key.startswith("("):
        key = key[1:]
    return key.replace(",)", ")", 1)


def surt_host(host: str) -> str:
    """Reverse a dotted host (with optional ``:port``) into SURT order.

    >>> surt_host("www.example.com:8080")
    'com,example,www:8080'
    """
    name, sep, port = host.rpartition(":")
    if not sep or not port.isdigit():
        name, port = host, ""
    labels = name.split(".")
    if not name or any(not label for label in labels):
        raise MalformedURLError(f"Invalid host: {host!r}")
    reversed_host = ",".join(reversed(labels))
    return f"{reversed_host}:{port}" if port else reversed_host


def _canonical_query(query: str) -> str:
    args = []
    for arg in query.split("&"):
        if not arg:
            continue
        name = arg.split("=", 1)[0].lower()
        if name in SESSION_QUERY_PARAMS or name.startswith("aspsessionid"):
            continue
        args.append(arg)
    return "&".join(sorted(args))


class _BaseCanonicalizer:
    """Shared normalisation. Subclasses decide how the host is rendered."""

    def url_string_to_key(self, url: str) -> str:
        text = (url or "").strip()
        if not text:
            raise MalformedURLError("Empty URL")

        if is_surt_key(text):
            return normalize_surt_key(text)

        if not _SCHEME_RE.match(text):
            text = "http://" + text

        try:
            parts = urlsplit(text)
            port = parts.port
        except ValueError as exc:
            raise MalformedURLError(f"Cannot parse URL {url!r}: {exc}") from exc

        scheme = parts.scheme.lower()
        host = (parts.hostname or "").strip(".")
        if not host:
            raise MalformedURLError(f"URL has no host: {url!r}")
        host = _WWW_PREFIX_RE.sub("", host)
        if port is not None and port != DEFAULT_PORTS.get(scheme):
            host = f"{host}:{port}"

        path = _PATH_SESSION_RE.sub("", parts.path) or "/"
        if not path.startswith("/"):
            path = "/" + path
        query = _canonical_query(parts.query)
        rest = f"{path}?{query}" if query else path

        return self._render(host, rest.lower())

    def _render(self, host: str, rest: str) -> str:
        raise NotImplementedError

    def is_surt_form(self) -> bool:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class AggressiveUrlCanonicalizer(_BaseCanonicalizer):
    """Host-first keys: ``http://www.Example.com/A?b=2&a=1`` → ``example.com/a?a=1&b=2``."""

    def _render(self, host: str, rest: str) -> str:
        return f"{host}{rest}"

    def is_surt_form(self) -> bool:
        return False


class SurtUrlCanonicalizer(_BaseCanonicalizer):
    """SURT keys: ``http://www.Example.com/A?b=2&a=1`` → ``com,example)/a?a=1&b=2``."""

    def _render(self, host: str, rest: str) -> str:
        return f"{surt_host(host)}){rest}"

    def is_surt_form(self) -> bool:
        return True


_CANONICALIZERS: dict[str, type[_BaseCanonicalizer]] = {
    "surt": SurtUrlCanonicalizer,
    "aggressive": AggressiveUrlCanonicalizer,
}

CANONICALIZER_NAMES: frozenset[str] = frozenset(_CANONICALIZERS)


def get_canonicalizer(name: str) -> UrlCanonicalizer:
    """Build a canonicalizer by its configured name ("surt" or "aggressive").

    Raises:
        ValueError: On an unknown name.
    """
    try:
        return _CANONICALIZERS[name.lower()]()
    except KeyError:
        raise ValueError(
            f"Unknown canonicalizer {name!r}; expected one of {sorted(CANONICALIZER_NAMES)}"
        ) from None
