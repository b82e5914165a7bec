"""Configuration package for Localing Feed.

Re-exports the settings symbols so that callers can write::

    from localing_feed.config import get_settings
"""

from __future__ import annotations

from localing_feed.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
