"""Per-request pipelines behind the list routes.

Each call normalises the raw query parameters, synthesizes one query and
runs it.  Content listing first resolves the visible media ids.  Nothing is
kept between calls.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

import structlog

from localing_feed.config.settings import Settings
from localing_feed.query.params import normalize_content_params, normalize_media_params
from localing_feed.query.synthesizer import (
    build_content_query,
    build_media_query,
    current_timestamp,
)
from localing_feed.query.visibility import resolve_visible_media_ids
from localing_feed.store.base import PaginationExecutor, QueryPage

logger = structlog.get_logger(__name__)


async def list_content(
    query: Mapping[str, Any],
    executor: PaginationExecutor,
    settings: Settings,
    clock: Callable[[], int] = current_timestamp,
) -> QueryPage:
    """Return one page of visible content, newest first unless asked otherwise.

    Args:
        query: Raw query parameters (``lastEvaluatedKey``, ``limit``,
            ``prefecture``, ``order``).
        executor: Pagination executor for the configured store.
        settings: Application settings.
        clock: Source of the ``publishedDate`` upper bound.  Called once
            per request.

    Raises:
        StoreQueryError: If either store read fails.
    """
    params = normalize_content_params(query)
    visible_media_ids = await resolve_visible_media_ids(executor, settings)
    descriptor = build_content_query(params, visible_media_ids, clock(), settings)

    logger.info(
        "content_list.query",
        table=descriptor.table_name,
        limit=params.limit,
        prefecture=params.prefecture,
        ascending=params.ascending,
        resumed=params.last_evaluated_key is not None,
        visible_media=len(visible_media_ids),
    )
    return await executor.execute(descriptor)


async def list_media(
    query: Mapping[str, Any],
    executor: PaginationExecutor,
    settings: Settings,
) -> QueryPage:
    """Return one page of visible media in the requested order."""
    params = normalize_media_params(query)
    descriptor = build_media_query(params, settings)
    logger.info(
        "media_list.query",
        table=descriptor.table_name,
        limit=params.limit,
        ascending=params.ascending,
        resumed=params.last_evaluated_key is not None,
    )
    return await executor.execute(descriptor)
