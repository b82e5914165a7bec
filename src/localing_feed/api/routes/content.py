"""Content list route.

Routes:
    GET /content/list — one page of publicly visible content

Query parameters are declared as plain optional strings so that FastAPI
never rejects a request for a malformed value; interpretation and defaults
live in :mod:`localing_feed.query.params`.

Responses always carry ``Content-Type: application/json; charset=utf-8``
and, while every origin is allowed, ``Access-Control-Allow-Origin: *``.
A store failure is answered with HTTP 400 and ``{"message": ...}``.
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
from localing_feed.query.service import list_content
from localing_feed.store.base import PaginationExecutor

logger = structlog.get_logger(__name__)

router = APIRouter()


def _response_headers(settings: Settings) -> dict[str, str]:
    """Headers for every content list response.

    The wildcard origin is sent unconditionally only while
    ``allowed_origins`` admits every origin; a restricted list is answered
    per request by ``CORSMiddleware``.
    """
    headers = {"Content-Type": "application/json; charset=utf-8"}
    if "*" in settings.allowed_origins:
        headers["Access-Control-Allow-Origin"] = "*"
    return headers


@router.get("/list")
async def read_content_list(
    executor: Annotated[PaginationExecutor, Depends(get_executor)],
    settings: Annotated[Settings, Depends(get_app_settings)],
    last_evaluated_key: Annotated[
        Optional[str],
        Query(alias="lastEvaluatedKey", description="Cursor from the previous page."),
    ] = None,
    limit: Annotated[Optional[str], Query(description="Page size.")] = None,
    prefecture: Annotated[
        Optional[str], Query(description="Region code, 1-47.")
    ] = None,
    order: Annotated[
        Optional[str], Query(description='"true" for oldest first.')
    ] = None,
) -> JSONResponse:
    """Return ``{"contentList": [...], "lastEvaluatedKey"?: {...}}``.

    ``lastEvaluatedKey`` appears only when more results exist; pass it back
    unchanged, with the same filters and order, to fetch the next page.
    """
    raw_query = {
        "lastEvaluatedKey": last_evaluated_key,
        "limit": limit,
        "prefecture": prefecture,
        "order": order,
    }
    try:
        page = await list_content(raw_query, executor, settings)
    except StoreQueryError as exc:
        logger.error("content_list.failed", error=exc.message, table=exc.collection)
        return JSONResponse(
            {"message": exc.message},
            status_code=status.HTTP_400_BAD_REQUEST,
            headers=_response_headers(settings),
        )

    body: dict = {"contentList": page.items}
    if page.last_evaluated_key is not None:
        body["lastEvaluatedKey"] = page.last_evaluated_key
    logger.info(
        "content_list.served",
        returned=len(page.items),
        has_more=page.last_evaluated_key is not None,
    )
    return JSONResponse(
        jsonable_encoder(body),
        status_code=status.HTTP_200_OK,
        headers=_response_headers(settings),
    )
