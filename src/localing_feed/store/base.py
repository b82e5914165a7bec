"""Pagination executor contract shared by every store backend.

An executor runs one :class:`~localing_feed.query.descriptor.QueryDescriptor`
and returns one :class:`QueryPage`.  Backends must:

- honour the partition equality, the optional sort-key range and every
  filter predicate;
- order results by the descriptor's sort key, reversed when
  ``scan_forward`` is ``False``;
- resume strictly after ``exclusive_start_key`` when one is given;
- return a ``last_evaluated_key`` whenever the page was truncated and
  ``None`` once the result set is exhausted;
- raise :class:`~localing_feed.core.exceptions.StoreQueryError` on any
  store failure, without retrying.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

from localing_feed.query.descriptor import QueryDescriptor


@dataclass
class QueryPage:
    """One page of query results."""

    items: list[dict[str, Any]] = field(default_factory=list)
    last_evaluated_key: Optional[dict[str, Any]] = None


class PaginationExecutor(Protocol):
    """Runs synthesized queries against a backing store."""

    async def execute(self, descriptor: QueryDescriptor) -> QueryPage:
        ...

    async def close(self) -> None:
        ...
