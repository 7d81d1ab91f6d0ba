"""Whitelist file loader for surtgate.

Reads a plain-text whitelist (one URL or SURT prefix per line) and builds an
immutable WhitelistSnapshot. Lines are canonicalized with the configured
canonicalizer so entries and capture keys are always compared in the same form.

File format:
    # comment lines and blank lines are ignored
    http://example.com/allowed/
    com,example)/other
    example.org

Malformed lines are skipped; only I/O failures fail the load.
"""

from __future__ import annotations

from surtgate.surt.canonicalizer import MalformedURLError, UrlCanonicalizer
from surtgate.surt.tokenizer import prefix_key, rooted_key
from surtgate.utils.logger import get_logger
from surtgate.whitelist.store import WhitelistSnapshot

logger = get_logger(__name__)


class WhitelistLoadError(Exception):
    """The whitelist file could not be opened or fully read."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot load whitelist {path}: {reason}")
        self.path = path
        self.reason = reason


def entry_key(line: str, canonicalizer: UrlCanonicalizer) -> str:
    """Canonical whitelist key for one (trimmed, non-empty) line.

    Raises:
        MalformedURLError: If the line cannot be canonicalized.
    """
    canonical = canonicalizer.url_string_to_key(line)
    if canonicalizer.is_surt_form():
        return rooted_key(canonical)
    if canonical.startswith("("):
        return canonical
    return prefix_key(canonical)


def load_whitelist(
    path: str,
    canonicalizer: UrlCanonicalizer,
    modified_ns: int = 0,
) -> WhitelistSnapshot:
    """Load a whitelist file into a new snapshot.

    Returns the complete snapshot; nothing is published until the whole file
    has been read.

    Raises:
        WhitelistLoadError: If the file cannot be opened or read (chained to
                            the underlying OSError / UnicodeDecodeError).
    """
    keys: set[str] = set()
    skipped = 0
    try:
        with open(path, encoding="utf-8") as fh:
            for lineno, raw_line in enumerate(fh, start=1):
                line = raw_line.strip()
                if not line or line.startswith("#"):
                    continue
                try:
                    key = entry_key(line, canonicalizer)
                except MalformedURLError as exc:
                    skipped += 1
                    logger.debug(
                        "Whitelist line not a valid URL — skipping",
                        path=path,
                        lineno=lineno,
                        error=str(exc),
                    )
                    continue
                logger.debug("Whitelist adding", key=key)
                keys.add(key)
    except (OSError, UnicodeDecodeError) as exc:
        raise WhitelistLoadError(path, str(exc)) from exc

    if skipped:
        logger.warning("Whitelist lines skipped", path=path, skipped=skipped)
    return WhitelistSnapshot.from_keys(keys, path=path, modified_ns=modified_ns)
