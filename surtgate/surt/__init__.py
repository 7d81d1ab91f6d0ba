"""surtgate SURT handling — canonical keys and prefix search terms.

Public API:
    UrlCanonicalizer            — canonicalizer Protocol
    SurtUrlCanonicalizer        — SURT-form keys (default)
    AggressiveUrlCanonicalizer  — host-first keys
    MalformedURLError           — raised for unparseable URLs / keys
    SurtTokenizer               — ordered prefix search terms for one key
"""
from surtgate.surt.canonicalizer import (
    AggressiveUrlCanonicalizer,
    MalformedURLError,
    SurtUrlCanonicalizer,
    UrlCanonicalizer,
    get_canonicalizer,
)
from surtgate.surt.tokenizer import SurtTokenizer, prefix_key, rooted_key, to_surt

__all__ = [
    "AggressiveUrlCanonicalizer",
    "MalformedURLError",
    "SurtTokenizer",
    "SurtUrlCanonicalizer",
    "UrlCanonicalizer",
    "get_canonicalizer",
    "prefix_key",
    "rooted_key",
    "to_surt",
]
