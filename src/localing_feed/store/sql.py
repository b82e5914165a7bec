"""PostgreSQL pagination executor.

Runs the same :class:`QueryDescriptor` the DynamoDB executor runs, against
the ``media`` and ``content`` tables in :mod:`localing_feed.core.models`.

Translation:

- partition equality and sort-key range become ``WHERE`` predicates;
- ``Contains`` on an array column becomes ``column @> ARRAY[value]``; on a
  scalar column it is plain equality, since a single parent id contains
  only itself;
- ``AnyOf`` becomes an ``OR`` of its members;
- pagination is keyset on ``(sort_key, id)``: rows strictly after the
  cursor in the requested direction.  One extra row is fetched to detect
  truncation.

Cursors use the item attribute names (``id``, ``publicState`` and the sort
attribute), so both backends hand out the same cursor format.
"""

from __future__ import annotations

import operator
from typing import Any, Callable

import structlog
from sqlalchemy import and_, or_, select
from sqlalchemy import ARRAY as SA_ARRAY
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.sql import Select

from localing_feed.core.exceptions import StoreQueryError
from localing_feed.core.models import MODELS_BY_KIND, ItemMixin
from localing_feed.query.descriptor import (
    ID,
    PUBLIC_STATE,
    AnyOf,
    Contains,
    FilterPredicate,
    QueryDescriptor,
)
from localing_feed.store.base import QueryPage

logger = structlog.get_logger(__name__)

_RANGE_OPERATORS: dict[str, Callable[[Any, Any], Any]] = {
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


def _contains_clause(model: type[ItemMixin], predicate: Contains) -> Any:  # noqa: ANN401
    column = model.column_for(predicate.attribute)
    if isinstance(column.type, SA_ARRAY):
        return column.contains([predicate.value])
    return column == predicate.value


def _filter_clause(model: type[ItemMixin], predicate: FilterPredicate) -> Any:  # noqa: ANN401
    if isinstance(predicate, AnyOf):
        return or_(*(_contains_clause(model, member) for member in predicate.predicates))
    return _contains_clause(model, predicate)


def build_select(descriptor: QueryDescriptor) -> Select:
    """Build the keyset-paginated SELECT for *descriptor*.

    Args:
        descriptor: The synthesized query.

    Returns:
        A SQLAlchemy ``Select`` over the descriptor's model.  When the
        descriptor has a limit, the statement fetches ``limit + 1`` rows.

    Raises:
        StoreQueryError: If the cursor lacks the sort key or the id.
    """
    model = MODELS_BY_KIND[descriptor.kind]
    sort_column = model.column_for(descriptor.sort_key)
    id_column = model.column_for(ID)

    partition = descriptor.partition
    stmt = select(model).where(model.column_for(partition.attribute) == partition.value)

    if descriptor.sort_range is not None:
        sort_range = descriptor.sort_range
        compare = _RANGE_OPERATORS[sort_range.operator]
        stmt = stmt.where(compare(model.column_for(sort_range.attribute), sort_range.value))

    for predicate in descriptor.filters:
        stmt = stmt.where(_filter_clause(model, predicate))

    cursor = descriptor.exclusive_start_key
    if cursor is not None:
        if descriptor.sort_key not in cursor or ID not in cursor:
            raise StoreQueryError(
                "The provided starting key is invalid",
                collection=descriptor.table_name,
            )
        after = operator.gt if descriptor.scan_forward else operator.lt
        cursor_sort = cursor[descriptor.sort_key]
        stmt = stmt.where(
            or_(
                after(sort_column, cursor_sort),
                and_(sort_column == cursor_sort, after(id_column, cursor[ID])),
            )
        )

    if descriptor.scan_forward:
        stmt = stmt.order_by(sort_column.asc(), id_column.asc())
    else:
        stmt = stmt.order_by(sort_column.desc(), id_column.desc())

    if descriptor.limit is not None:
        stmt = stmt.limit(descriptor.limit + 1)
    return stmt


def _cursor_for(descriptor: QueryDescriptor, item: dict[str, Any]) -> dict[str, Any]:
    return {
        ID: item[ID],
        PUBLIC_STATE: item[PUBLIC_STATE],
        descriptor.sort_key: item[descriptor.sort_key],
    }


class SQLExecutor:
    """Pagination executor backed by PostgreSQL via async SQLAlchemy.

    Args:
        session_factory: Factory for short-lived read sessions.
        engine: Engine to dispose on :meth:`close`, if this executor owns it.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        engine: AsyncEngine | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._engine = engine

    async def execute(self, descriptor: QueryDescriptor) -> QueryPage:
        """Run *descriptor* and return one page.

        Raises:
            StoreQueryError: On an invalid limit or cursor, or any database
                error.
        """
        if descriptor.limit is not None and descriptor.limit < 1:
            raise StoreQueryError(
                "Limit must be greater than or equal to 1",
                collection=descriptor.table_name,
            )
        stmt = build_select(descriptor)
        logger.debug(
            "sql.query",
            table=descriptor.table_name,
            filters=len(descriptor.filters),
            limit=descriptor.limit,
            scan_forward=descriptor.scan_forward,
        )

        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                rows = list(result.scalars().all())
        except SQLAlchemyError as exc:
            raise StoreQueryError(str(exc), collection=descriptor.table_name) from exc

        items = [row.to_item() for row in rows]
        last_evaluated_key = None
        if descriptor.limit is not None and len(items) > descriptor.limit:
            items = items[: descriptor.limit]
            last_evaluated_key = _cursor_for(descriptor, items[-1])

        if descriptor.projection:
            items = [
                {attribute: item[attribute] for attribute in descriptor.projection if attribute in item}
                for item in items
            ]
        return QueryPage(items=items, last_evaluated_key=last_evaluated_key)

    async def close(self) -> None:
        """Dispose the engine's connection pool when this executor owns it."""
        if self._engine is not None:
            await self._engine.dispose()
