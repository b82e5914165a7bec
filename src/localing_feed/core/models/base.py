"""SQLAlchemy declarative base and the item-mapping mixin shared by models."""

from __future__ import annotations

from typing import Any, ClassVar

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Shared declarative base for all Localing Feed models."""


class ItemMixin:
    """Maps between item attribute names and ORM column attributes.

    ``ATTRIBUTES`` lists ``item attribute -> ORM attribute`` pairs for the
    key and filter columns.  Remaining item fields live in the ``payload``
    JSONB column and are merged into the item unchanged.
    """

    ATTRIBUTES: ClassVar[dict[str, str]] = {}

    @classmethod
    def column_for(cls, attribute: str) -> Any:  # noqa: ANN401
        """Return the ORM column for an item attribute name.

        Raises:
            KeyError: If the attribute is not a mapped column.
        """
        return getattr(cls, cls.ATTRIBUTES[attribute])

    def to_item(self) -> dict[str, Any]:
        """Return the row as a store item dict."""
        item: dict[str, Any] = dict(getattr(self, "payload", None) or {})
        for attribute, column in self.ATTRIBUTES.items():
            item[attribute] = getattr(self, column)
        return item
