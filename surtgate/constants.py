"""Shared constants for surtgate.

Sentinels, defaults and thresholds used across modules are defined here.
No magic numbers in other modules; import from here.
"""

# ─── Whitelist file timestamp sentinels ───────────────────────────────────────

# Modification time reported for a whitelist file that does not exist (or
# cannot be stat'ed). A reload that sees this value leaves the installed
# snapshot untouched.
FILE_MISSING_MTIME: int = 0

# Recorded after a failed load. Never equal to a real file timestamp, so the
# next reload() always retries instead of treating the broken state as current.
INVALID_MTIME: int = -1

# ─── Reload scheduling ────────────────────────────────────────────────────────

# Default interval between scheduled whitelist reloads (seconds).
# 0 disables the background reload task; the whitelist is loaded once at startup.
DEFAULT_CHECK_INTERVAL_S: int = 0

# Load durations above this threshold are logged at WARNING by PerformanceLogger.
SLOW_LOAD_WARN_MS: float = 500.0

# ─── Canonicalization ─────────────────────────────────────────────────────────

# Canonicalizer used when none is configured. "surt" keys look like
# com,example)/path; "aggressive" keys look like example.com/path.
DEFAULT_CANONICALIZER: str = "surt"

# Ports dropped from canonical keys when they match the scheme default.
DEFAULT_PORTS: dict[str, int] = {
    "http": 80,
    "https": 443,
}

# Query argument names stripped from canonical keys (compared lowercased).
# Any argument starting with "aspsessionid" is stripped as well.
SESSION_QUERY_PARAMS: frozenset[str] = frozenset({
    "jsessionid",
    "phpsessid",
    "sid",
    "cfid",
    "cftoken",
})
