"""Terminal dashboard for EVE edge nodes."""

__version__ = "0.1.0"
