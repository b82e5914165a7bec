"""Content item ORM model.

Mirrors the DynamoDB content collection: ``(public_state, published_date)``
is the ``public`` index, ``prefecture_list`` is the multi-valued region
attribute, and everything else an item carries is kept in ``payload``.
The table is written by the ingestion side; this service only reads it.
"""

from __future__ import annotations

from typing import Any, Optional

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import ARRAY, JSONB
from sqlalchemy.orm import Mapped, mapped_column

from localing_feed.core.models.base import Base, ItemMixin


class ContentItem(ItemMixin, Base):
    """One published unit of content."""

    __tablename__ = "content"

    ATTRIBUTES = {
        "id": "id",
        "publicState": "public_state",
        "publishedDate": "published_date",
        "mediaId": "media_id",
        "prefectureList": "prefecture_list",
    }

    id: Mapped[str] = mapped_column(sa.String(128), primary_key=True)
    public_state: Mapped[int] = mapped_column(sa.SmallInteger, nullable=False)
    published_date: Mapped[int] = mapped_column(sa.BigInteger, nullable=False)
    media_id: Mapped[Optional[str]] = mapped_column(sa.String(128), nullable=True)
    prefecture_list: Mapped[list[int]] = mapped_column(
        ARRAY(sa.Integer),
        nullable=False,
        server_default=sa.text("'{}'"),
    )
    payload: Mapped[dict[str, Any]] = mapped_column(
        JSONB,
        nullable=False,
        server_default=sa.text("'{}'::jsonb"),
    )

    __table_args__ = (
        sa.Index("ix_content_public", "public_state", "published_date", "id"),
        sa.Index("ix_content_prefecture_list", "prefecture_list", postgresql_using="gin"),
    )
