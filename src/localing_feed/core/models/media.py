"""Media (content source) ORM model."""

from __future__ import annotations

from typing import Any

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from localing_feed.core.models.base import Base, ItemMixin


class MediaItem(ItemMixin, Base):
    """A publisher whose feed supplies content items."""

    __tablename__ = "media"

    ATTRIBUTES = {
        "id": "id",
        "publicState": "public_state",
        "createdDate": "created_date",
    }

    id: Mapped[str] = mapped_column(sa.String(128), primary_key=True)
    public_state: Mapped[int] = mapped_column(sa.SmallInteger, nullable=False)
    created_date: Mapped[int] = mapped_column(sa.BigInteger, nullable=False)
    payload: Mapped[dict[str, Any]] = mapped_column(
        JSONB,
        nullable=False,
        server_default=sa.text("'{}'::jsonb"),
    )

    __table_args__ = (
        sa.Index("ix_media_public", "public_state", "created_date", "id"),
    )
