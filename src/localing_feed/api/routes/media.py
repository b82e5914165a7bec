"""Media list route.

Routes:
    GET /media/list — one page of publicly visible media
"""

from __future__ import annotations

from typing import Annotated, Optional

import structlog
from fastapi import APIRouter, Depends, Query, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from localing_feed.api.dependencies import get_app_settings, get_executor
from localing_feed.config.settings import Settings
from localing_feed.core.exceptions import StoreQueryError
from localing_feed.query.service import list_media
from localing_feed.store.base import PaginationExecutor

logger = structlog.get_logger(__name__)

router = APIRouter()

_HEADERS: dict[str, str] = {"Content-Type": "application/json; charset=utf-8"}


@router.get("/list")
async def read_media_list(
    executor: Annotated[PaginationExecutor, Depends(get_executor)],
    settings: Annotated[Settings, Depends(get_app_settings)],
    last_evaluated_key: Annotated[
        Optional[str],
        Query(alias="lastEvaluatedKey", description="Cursor from the previous page."),
    ] = None,
    limit: Annotated[Optional[str], Query(description="Page size.")] = None,
    order: Annotated[
        Optional[str], Query(description='"true" for oldest first.')
    ] = None,
) -> JSONResponse:
    """Return ``{"mediaList": [...], "lastEvaluatedKey"?: {...}}``.

    A store failure is answered with HTTP 400 and ``{"message": ...}``.
    """
    raw_query = {"lastEvaluatedKey": last_evaluated_key, "limit": limit, "order": order}
    try:
        page = await list_media(raw_query, executor, settings)
    except StoreQueryError as exc:
        logger.error("media_list.failed", error=exc.message, table=exc.collection)
        return JSONResponse(
            {"message": exc.message},
            status_code=status.HTTP_400_BAD_REQUEST,
            headers=_HEADERS,
        )

    body: dict = {"mediaList": page.items}
    if page.last_evaluated_key is not None:
        body["lastEvaluatedKey"] = page.last_evaluated_key
    return JSONResponse(
        jsonable_encoder(body),
        status_code=status.HTTP_200_OK,
        headers=_HEADERS,
    )
