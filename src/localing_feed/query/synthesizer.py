"""Query synthesis for the media and content list routes.

The store only offers keyed range queries: every query needs an equality
condition on the partition key and, to page in order, a condition on the
sort key.  There is no "all items, ordered" query.  Content listing gets
around this with a present-time upper bound: ``publishedDate < now`` matches
every published item while keeping the index order and cursor semantics.
``now`` is taken per request.  A cached bound would hide newly published
items and would not line up with cursors issued under a later bound.

The content index does not know whether an item's media is visible, so the
content query also carries an OR-group of ``contains(mediaId, id)`` checks
built from the separately resolved visible media ids.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Optional

from localing_feed.config.settings import Settings
from localing_feed.query.descriptor import (
    CREATED_DATE,
    ID,
    MEDIA_ID,
    PREFECTURE_LIST,
    PUBLIC_STATE,
    PUBLISHED_DATE,
    VISIBLE,
    AnyOf,
    Contains,
    FilterPredicate,
    KeyCondition,
    QueryDescriptor,
    RangeCondition,
)
from localing_feed.query.params import ContentListParams, MediaListParams


def current_timestamp() -> int:
    """Return the current time as integer seconds since the epoch (UTC)."""
    return int(datetime.now(timezone.utc).timestamp())


def _visible() -> KeyCondition:
    return KeyCondition(attribute=PUBLIC_STATE, value=VISIBLE)


def build_content_query(
    params: ContentListParams,
    visible_media_ids: Sequence[str],
    now: int,
    settings: Settings,
) -> QueryDescriptor:
    """Build the content page query.

    Args:
        params: Normalised request parameters.
        visible_media_ids: Ids of currently visible media.  An empty sequence
            adds no media filter at all.
        now: Upper bound on ``publishedDate``, in epoch seconds.
        settings: Supplies table and index names.

    Returns:
        A descriptor whose filters are, in order, the media OR-group (when
        there are visible media) and the region check (when a prefecture
        was requested).
    """
    filters: list[FilterPredicate] = []
    if visible_media_ids:
        filters.append(
            AnyOf(tuple(Contains(MEDIA_ID, media_id) for media_id in visible_media_ids))
        )
    if params.prefecture is not None:
        filters.append(Contains(PREFECTURE_LIST, params.prefecture))

    return QueryDescriptor(
        kind="content",
        table_name=settings.table_name(settings.content_collection),
        index_name=settings.public_index_name,
        partition=_visible(),
        sort_key=PUBLISHED_DATE,
        sort_range=RangeCondition(attribute=PUBLISHED_DATE, operator="<", value=now),
        filters=tuple(filters),
        exclusive_start_key=params.last_evaluated_key,
        limit=params.limit,
        scan_forward=params.ascending,
    )


def build_media_query(params: MediaListParams, settings: Settings) -> QueryDescriptor:
    """Build one page of the media list: visible media, newest first by default."""
    return QueryDescriptor(
        kind="media",
        table_name=settings.table_name(settings.media_collection),
        index_name=settings.public_index_name,
        partition=_visible(),
        sort_key=CREATED_DATE,
        exclusive_start_key=params.last_evaluated_key,
        limit=params.limit,
        scan_forward=params.ascending,
    )


def build_visible_media_ids_query(
    settings: Settings,
    exclusive_start_key: Optional[dict] = None,
) -> QueryDescriptor:
    """Build one page of the id-only query used to resolve visible media."""
    return QueryDescriptor(
        kind="media",
        table_name=settings.table_name(settings.media_collection),
        index_name=settings.public_index_name,
        partition=_visible(),
        sort_key=CREATED_DATE,
        exclusive_start_key=exclusive_start_key,
        projection=(ID,),
    )
