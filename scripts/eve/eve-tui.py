#!/usr/bin/env python3
"""Thin script entrypoint for the EVE terminal dashboard."""

from __future__ import annotations

from eve_tui.app import main


if __name__ == "__main__":
    raise SystemExit(main())
