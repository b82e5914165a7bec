"""Pagination executors for the supported store backends.

Use :func:`build_executor` to get the backend named by
``Settings.store_backend``::

    executor = build_executor(get_settings())
    page = await executor.execute(descriptor)
"""

from __future__ import annotations

from localing_feed.config.settings import Settings
from localing_feed.store.base import PaginationExecutor, QueryPage


def build_executor(settings: Settings) -> PaginationExecutor:
    """Construct the pagination executor selected by *settings*.

    Backends are imported lazily so a DynamoDB deployment never needs a
    database driver and vice versa.

    Raises:
        ValueError: If the SQL backend is selected without ``database_url``.
    """
    if settings.store_backend == "sql":
        from localing_feed.core.database import (  # noqa: PLC0415
            build_engine,
            build_session_factory,
        )
        from localing_feed.store.sql import SQLExecutor  # noqa: PLC0415

        if not settings.database_url:
            raise ValueError("DATABASE_URL is required when STORE_BACKEND=sql")
        engine = build_engine(settings.database_url)
        return SQLExecutor(build_session_factory(engine), engine=engine)

    from localing_feed.store.dynamodb import (  # noqa: PLC0415
        DynamoDBExecutor,
        build_dynamodb_client,
    )

    return DynamoDBExecutor(build_dynamodb_client(settings))


__all__ = [
    "PaginationExecutor",
    "QueryPage",
    "build_executor",
]
