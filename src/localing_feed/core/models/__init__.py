"""SQLAlchemy ORM models for the SQL store backend.

All models are imported here so that ``Base.metadata`` knows every table
and callers can write ``from localing_feed.core.models import ContentItem``.
"""

from __future__ import annotations

from localing_feed.core.models.base import Base, ItemMixin
from localing_feed.core.models.content import ContentItem
from localing_feed.core.models.media import MediaItem

MODELS_BY_KIND = {
    "media": MediaItem,
    "content": ContentItem,
}

__all__ = [
    "Base",
    "ItemMixin",
    "ContentItem",
    "MediaItem",
    "MODELS_BY_KIND",
]
