"""Resolution of the publicly visible media id set.

Content items do not record whether their media is visible, so the content
list needs the ids of every visible media item before it can filter.  The
media index is read page by page until the store stops returning a cursor.
``visible_media_max_pages`` caps the loop, and reaching the cap is logged.
"""

from __future__ import annotations

import structlog

from localing_feed.config.settings import Settings
from localing_feed.query.descriptor import ID
from localing_feed.query.synthesizer import build_visible_media_ids_query
from localing_feed.store.base import PaginationExecutor

logger = structlog.get_logger(__name__)


async def resolve_visible_media_ids(
    executor: PaginationExecutor,
    settings: Settings,
) -> list[str]:
    """Return the ids of all media with ``publicState = 1``, in index order.

    Store failures propagate to the caller unchanged.

    Args:
        executor: Pagination executor for the configured store.
        settings: Supplies table names and the page cap.

    Returns:
        Media ids.  Items without an ``id`` attribute are skipped.
    """
    media_ids: list[str] = []
    cursor = None
    for _ in range(max(settings.visible_media_max_pages, 1)):
        page = await executor.execute(build_visible_media_ids_query(settings, cursor))
        media_ids.extend(item[ID] for item in page.items if item.get(ID) is not None)
        cursor = page.last_evaluated_key
        if cursor is None:
            break
    else:
        logger.warning(
            "visible_media.page_cap_reached",
            max_pages=settings.visible_media_max_pages,
            resolved=len(media_ids),
        )

    logger.debug("visible_media.resolved", count=len(media_ids))
    return media_ids
