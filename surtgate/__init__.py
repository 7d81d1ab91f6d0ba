"""surtgate — SURT-prefix whitelist access control for web-archive replay."""

__version__ = "0.1.0"
