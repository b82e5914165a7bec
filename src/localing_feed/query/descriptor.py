"""Store-neutral description of one bounded range query.

A :class:`QueryDescriptor` is what the synthesizer produces and what every
pagination executor consumes.  It names attributes by their item names
(``publicState``, ``publishedDate`` ...) and leaves placeholder naming,
expression syntax and SQL translation to the executor.

Filter predicates are ANDed in order.  An :class:`AnyOf` group is the one
place where OR appears: it matches when any of its members matches.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Optional, Union

# Item attribute names shared by the index and the stored items.
ID = "id"
PUBLIC_STATE = "publicState"
PUBLISHED_DATE = "publishedDate"
CREATED_DATE = "createdDate"
MEDIA_ID = "mediaId"
PREFECTURE_LIST = "prefectureList"

VISIBLE = 1
"""``publicState`` value of items eligible for public listing."""

CollectionKind = Literal["media", "content"]
RangeOperator = Literal["<", "<=", ">", ">="]


@dataclass(frozen=True)
class KeyCondition:
    """Equality on the index partition key."""

    attribute: str
    value: Any


@dataclass(frozen=True)
class RangeCondition:
    """Comparison on the index sort key."""

    attribute: str
    operator: RangeOperator
    value: Any


@dataclass(frozen=True)
class Contains:
    """Containment check: the multi-valued *attribute* includes *value*."""

    attribute: str
    value: Any


@dataclass(frozen=True)
class AnyOf:
    """OR-group of containment checks.  Never empty."""

    predicates: tuple[Contains, ...]

    def __post_init__(self) -> None:
        if not self.predicates:
            raise ValueError("AnyOf requires at least one predicate")


FilterPredicate = Union[Contains, AnyOf]


@dataclass(frozen=True)
class QueryDescriptor:
    """A single bounded range query against a secondary index.

    Attributes:
        kind: Logical collection, ``"media"`` or ``"content"``.
        table_name: Physical table name.
        index_name: Secondary index to query.
        partition: Equality condition on the index partition key.
        sort_key: Name of the index sort attribute; defines the page order.
        sort_range: Optional comparison on ``sort_key``.
        filters: ANDed post-conditions on non-key attributes.
        exclusive_start_key: Resume cursor from a previous page, passed
            through untouched.
        limit: Page size; ``None`` leaves it to the store.
        scan_forward: ``True`` for ascending sort-key order.
        projection: Attributes to return; empty means the whole item.
    """

    kind: CollectionKind
    table_name: str
    index_name: str
    partition: KeyCondition
    sort_key: str
    sort_range: Optional[RangeCondition] = None
    filters: tuple[FilterPredicate, ...] = ()
    exclusive_start_key: Optional[dict[str, Any]] = None
    limit: Optional[int] = None
    scan_forward: bool = False
    projection: tuple[str, ...] = ()
