"""
Watchpick - watchlist core

Stable public import paths live under `watchpick.*`. Backend code stays
physically under `backend/`, the same as the server and CLI entrypoints.
"""

from __future__ import annotations

__version__ = "0.1.0"
