"""
GRAPHZ configuration: all environment variables in one place.

Read from environment at import. Everything has a working default;
nothing here is a secret (the hosted store and auth provider hold theirs).
"""

from __future__ import annotations

import os


class Settings:
    """Application settings from environment variables."""

    # Store subscription
    COLLECTION: str = os.environ.get("GRAPHZ_COLLECTION", "graphs")
    ORDER_FIELD: str = os.environ.get("GRAPHZ_ORDER_FIELD", "created_at")
    ORDER_DIRECTION: str = os.environ.get("GRAPHZ_ORDER_DIRECTION", "desc")

    # Search box quiet period before a recompute
    SEARCH_DEBOUNCE_MS: int = int(os.environ.get("GRAPHZ_SEARCH_DEBOUNCE_MS", "300"))


# Singleton instance
settings = Settings()

if settings.ORDER_DIRECTION.lower() not in ("asc", "desc"):
    raise RuntimeError("GRAPHZ_ORDER_DIRECTION must be 'asc' or 'desc'")
if settings.SEARCH_DEBOUNCE_MS < 0:
    raise RuntimeError("GRAPHZ_SEARCH_DEBOUNCE_MS must be >= 0")
