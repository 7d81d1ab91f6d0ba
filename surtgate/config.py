"""Config loading for surtgate.

Reads `.surtgate/config.yaml` (or `~/.surtgate/config.yaml`).
Raises SystemExit on parse errors or missing `version` field.
If no config file is found, returns default values.

Config search order:
  1. `config_path` argument (if provided)
  2. SURTGATE_CONFIG environment variable (if set)
  3. `.surtgate/config.yaml` (working directory)
  4. `~/.surtgate/config.yaml` (home directory)

Environment variable overrides (applied after the file):
  SURTGATE_WHITELIST_FILE    — overrides whitelist.file
  SURTGATE_CHECK_INTERVAL    — overrides whitelist.check_interval (integer seconds, >= 0)
  SURTGATE_LOG_LEVEL         — overrides logging.level
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from typing import NoReturn, Optional

import yaml

from surtgate.constants import DEFAULT_CANONICALIZER, DEFAULT_CHECK_INTERVAL_S
from surtgate.surt.canonicalizer import CANONICALIZER_NAMES
from surtgate.utils.logger import get_logger

logger = get_logger(__name__)

# ─── Version constants ────────────────────────────────────────────────────────

SUPPORTED_CONFIG_VERSION = 1

SUPPORTED_VERSIONS: frozenset[int] = frozenset({1})

VALID_LOG_LEVELS: frozenset[str] = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

DEFAULT_CONFIG_PATHS = [
    ".surtgate/config.yaml",
    os.path.expanduser("~/.surtgate/config.yaml"),
]


# ─── Dataclasses ─────────────────────────────────────────────────────────────


@dataclass
class WhitelistConfig:
    """Whitelist filter configuration.

    file:           Path to the whitelist file (one URL or SURT prefix per line).
    check_interval: Seconds between scheduled reloads; 0 disables the schedule.
    canonicalizer:  "surt" (default) or "aggressive".

    The canonicalizer also decides how whitelist lines are read:
      - "surt":       each line is stored as its SURT key, trailing slash kept.
                      `http://example.com/dir/` is stored as `com,example)/dir/` and
                      matches `com,example)/dir/page.html` but not `com,example)/dir`.
      - "aggressive": a trailing slash on a non-root path is dropped.
                      `http://example.com/dir/` is stored as `com,example)/dir` and
                      matches `com,example)/dir` as well as everything below it.
    Under both, a bare host (`com,example)`) is stored as `com,example)/`.
    """

    file: Optional[str] = None
    check_interval: int = DEFAULT_CHECK_INTERVAL_S
    canonicalizer: str = DEFAULT_CANONICALIZER


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    json: bool = True


@dataclass
class Config:
    """Root configuration object populated from .surtgate/config.yaml.

    All fields have safe defaults; surtgate can start without any config file,
    but build_filter() stays None until whitelist.file points at a readable file.
    """

    version: int = SUPPORTED_CONFIG_VERSION
    whitelist: WhitelistConfig = field(default_factory=WhitelistConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    path: Optional[str] = None  # Path to the loaded config file

    @classmethod
    def defaults(cls) -> "Config":
        """Return a fully-default Config (no file required)."""
        return cls()

    @classmethod
    def from_dict(cls, raw: dict, path: Optional[str] = None) -> "Config":
        """Construct Config from a parsed YAML dict.

        Merges user-supplied values onto defaults; unknown keys are silently ignored.

        Raises:
            SystemExit(1): On invalid whitelist.canonicalizer, whitelist.check_interval
                           or logging.level values.
        """
        # ── Whitelist ─────────────────────────────────────────────────────────
        whitelist_raw = raw.get("whitelist") or {}
        canonicalizer = str(whitelist_raw.get("canonicalizer", DEFAULT_CANONICALIZER)).lower()
        if canonicalizer not in CANONICALIZER_NAMES:
            _config_error(
                f"Invalid whitelist.canonicalizer: '{canonicalizer}'. "
                f"Valid values: {sorted(CANONICALIZER_NAMES)}."
            )
        check_interval = whitelist_raw.get("check_interval", DEFAULT_CHECK_INTERVAL_S)
        if isinstance(check_interval, bool) or not isinstance(check_interval, int) or check_interval < 0:
            _config_error(
                f"Invalid whitelist.check_interval: {check_interval!r}. "
                "Expected a whole number of seconds >= 0 (0 disables reloading)."
            )
        whitelist = WhitelistConfig(
            file=whitelist_raw.get("file"),
            check_interval=check_interval,
            canonicalizer=canonicalizer,
        )

        # ── Logging ───────────────────────────────────────────────────────────
        logging_raw = raw.get("logging") or {}
        level = str(logging_raw.get("level", "INFO")).upper()
        if level not in VALID_LOG_LEVELS:
            _config_error(
                f"Invalid logging.level: '{level}'. Valid values: {sorted(VALID_LOG_LEVELS)}."
            )
        log_config = LoggingConfig(
            level=level,
            json=bool(logging_raw.get("json", True)),
        )

        return cls(
            version=raw.get("version", SUPPORTED_CONFIG_VERSION),
            whitelist=whitelist,
            logging=log_config,
            path=path,
        )


# ─── Config loading ───────────────────────────────────────────────────────────


def load_config(config_path: Optional[str] = None) -> Config:
    """Load and validate surtgate configuration.

    Search order:
      1. ``config_path`` argument (if provided)
      2. ``SURTGATE_CONFIG`` environment variable (if set)
      3. ``.surtgate/config.yaml``
      4. ``~/.surtgate/config.yaml``

    If no file is found at any of these paths, returns default Config (not an error).
    If a file is found but invalid, writes error to stderr and raises SystemExit(1).

    Environment overrides are applied whether or not a file was found.

    Raises:
        SystemExit(1): On YAML parse error, missing ``version`` field, unsupported
                       version, invalid field values, or invalid env overrides.
    """
    search_paths: list[str] = []
    if config_path:
        search_paths.append(config_path)
    env_config = os.environ.get("SURTGATE_CONFIG")
    if env_config:
        search_paths.append(env_config)
    search_paths.extend(DEFAULT_CONFIG_PATHS)

    found_path: Optional[str] = None
    for candidate in search_paths:
        expanded = os.path.expanduser(candidate)
        if os.path.isfile(expanded):
            found_path = expanded
            break

    # ── No config file found ─────────────────────────────────────────────────
    if found_path is None:
        logger.info("No config file found — using defaults", searched=search_paths)
        config = Config.defaults()
        _apply_env_overrides(config)
        return config

    # ── Parse config file ─────────────────────────────────────────────────────
    logger.info("Loading config", path=found_path)

    try:
        with open(found_path) as fh:
            raw = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        _config_error(
            f"Failed to parse {found_path}: {exc}\n"
            "surtgate refuses to start with an invalid config. "
            "Check the YAML syntax and try again."
        )
    except OSError as exc:
        _config_error(f"Could not read {found_path}: {exc}")

    if not isinstance(raw, dict):
        if raw is None:
            _config_error(
                f"{found_path} is missing the required 'version' field.\n"
                "Add 'version: 1' to the top of your config file."
            )
        _config_error(
            f"{found_path} is not a valid YAML mapping.\n"
            "The config file must be a YAML dictionary at the top level."
        )

    # ── Version validation ────────────────────────────────────────────────────
    version = raw.get("version")
    if version is None:
        _config_error(
            f"{found_path} is missing the required 'version' field.\n"
            "Add 'version: 1' to the top of your config file."
        )
    if version not in SUPPORTED_VERSIONS:
        _config_error(
            f"Unsupported config version: {version}. "
            f"Supported versions: {sorted(SUPPORTED_VERSIONS)}."
        )

    config = Config.from_dict(raw, path=found_path)
    _apply_env_overrides(config)

    if config.whitelist.file is None:
        logger.warning("whitelist.file is not set — no filter will be built", path=found_path)

    logger.info(
        "Config loaded",
        path=found_path,
        version=config.version,
        whitelist_file=config.whitelist.file,
        check_interval_s=config.whitelist.check_interval,
    )
    return config


def _apply_env_overrides(config: Config) -> None:
    """Apply environment variable overrides to a Config object in-place.

    Raises:
        SystemExit(1): If SURTGATE_CHECK_INTERVAL is not a non-negative integer
                       or SURTGATE_LOG_LEVEL is not a known level.
    """
    env_file = os.environ.get("SURTGATE_WHITELIST_FILE")
    if env_file:
        config.whitelist.file = env_file

    env_interval = os.environ.get("SURTGATE_CHECK_INTERVAL")
    if env_interval is not None:
        try:
            interval = int(env_interval)
        except ValueError:
            interval = -1
        if interval < 0:
            _config_error(
                "SURTGATE_CHECK_INTERVAL environment variable is not a valid "
                f"non-negative integer: '{env_interval}'"
            )
        config.whitelist.check_interval = interval

    env_level = os.environ.get("SURTGATE_LOG_LEVEL")
    if env_level is not None:
        level = env_level.upper()
        if level not in VALID_LOG_LEVELS:
            _config_error(f"SURTGATE_LOG_LEVEL environment variable is not a valid level: '{env_level}'")
        config.logging.level = level


def _config_error(message: str) -> NoReturn:
    print(f"CONFIG ERROR: {message}", file=sys.stderr)
    raise SystemExit(1)
