"""surtgate whitelist — snapshot, file loader and reload manager.

Public API:
    WhitelistSnapshot  — immutable set of included SURT prefixes
    load_whitelist     — build a snapshot from a whitelist file
    WhitelistLoadError — the file could not be read
    WhitelistReloader  — owns the current snapshot, reloads on file change
    ReloadOutcome      — result of WhitelistReloader.reload()
"""
from surtgate.whitelist.loader import WhitelistLoadError, load_whitelist
from surtgate.whitelist.reloader import ReloadOutcome, WhitelistReloader
from surtgate.whitelist.store import WhitelistSnapshot

__all__ = [
    "ReloadOutcome",
    "WhitelistLoadError",
    "WhitelistReloader",
    "WhitelistSnapshot",
    "load_whitelist",
]
