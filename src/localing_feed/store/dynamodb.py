"""DynamoDB pagination executor.

Renders a :class:`QueryDescriptor` into keyword arguments for the low-level
boto3 ``query`` call and runs it on a worker thread so the event loop is
not blocked.  Values are converted to and from DynamoDB attribute values
with ``TypeSerializer`` / ``TypeDeserializer``, so callers see plain Python
values (numbers as ``Decimal``).

Rendering rules:

- attribute names are always referenced through ``#`` placeholders;
- value placeholders are named after their attribute (``:publicState``,
  ``:mediaId_0`` ...), and only placeholders that appear in an expression
  are sent, because DynamoDB rejects unused ones;
- ``FilterExpression``, ``ExclusiveStartKey``, ``Limit`` and
  ``ProjectionExpression`` are omitted when they have no value.  An empty
  filter string is never sent.

The boto3 client is built once per process from :class:`Settings` and
handed to the executor; nothing here touches global SDK configuration.
Clients, unlike resources, are safe to share between worker threads.
"""

from __future__ import annotations

import asyncio
from typing import Any

import boto3
import structlog
from boto3.dynamodb.types import TypeDeserializer, TypeSerializer
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from localing_feed.config.settings import Settings
from localing_feed.core.exceptions import StoreQueryError
from localing_feed.query.descriptor import AnyOf, Contains, FilterPredicate, QueryDescriptor
from localing_feed.store.base import QueryPage

logger = structlog.get_logger(__name__)

_NAME_ALIASES: dict[str, str] = {
    "id": "#id",
    "publicState": "#ps",
    "publishedDate": "#pd",
    "createdDate": "#cd",
    "mediaId": "#mi",
    "prefectureList": "#pl",
}


def build_dynamodb_client(settings: Settings) -> Any:  # noqa: ANN401
    """Create the boto3 DynamoDB client described by *settings*.

    ``dynamodb_max_attempts`` is the total number of attempts botocore
    makes, so the default of ``1`` means no SDK-level retries.
    """
    return boto3.client(
        "dynamodb",
        region_name=settings.aws_region,
        endpoint_url=settings.dynamodb_endpoint_url,
        config=Config(
            retries={"max_attempts": settings.dynamodb_max_attempts, "mode": "standard"},
        ),
    )


class _ExpressionBuilder:
    """Accumulates placeholder bindings while expressions are rendered."""

    def __init__(self) -> None:
        self.names: dict[str, str] = {}
        self.values: dict[str, Any] = {}
        self._counters: dict[str, int] = {}

    def name(self, attribute: str) -> str:
        placeholder = _NAME_ALIASES.get(attribute, f"#{attribute}")
        self.names[placeholder] = attribute
        return placeholder

    def value(self, attribute: str, value: Any, *, indexed: bool = False) -> str:
        if indexed:
            index = self._counters.get(attribute, 0)
            self._counters[attribute] = index + 1
            placeholder = f":{attribute}_{index}"
        else:
            placeholder = f":{attribute}"
        self.values[placeholder] = value
        return placeholder

    def contains(self, predicate: Contains) -> str:
        name = self.name(predicate.attribute)
        value = self.value(predicate.attribute, predicate.value, indexed=True)
        return f"contains({name}, {value})"

    def filter_clause(self, predicate: FilterPredicate) -> str:
        if isinstance(predicate, AnyOf):
            members = [self.contains(member) for member in predicate.predicates]
            if len(members) == 1:
                return members[0]
            return "(" + " OR ".join(members) + ")"
        return self.contains(predicate)


def render_query(descriptor: QueryDescriptor) -> dict[str, Any]:
    """Render *descriptor* into ``query`` keyword arguments with plain values.

    Args:
        descriptor: The synthesized query.

    Returns:
        Keyword arguments without ``TableName``.  Values are still Python
        values; :class:`DynamoDBExecutor` serializes them.  Rendering is deterministic: equal descriptors
        give equal dicts.
    """
    builder = _ExpressionBuilder()

    partition = descriptor.partition
    key_condition = (
        f"{builder.name(partition.attribute)} = "
        f"{builder.value(partition.attribute, partition.value)}"
    )
    if descriptor.sort_range is not None:
        sort_range = descriptor.sort_range
        key_condition += (
            f" AND {builder.name(sort_range.attribute)} {sort_range.operator} "
            f"{builder.value(sort_range.attribute, sort_range.value)}"
        )

    clauses = [builder.filter_clause(predicate) for predicate in descriptor.filters]

    kwargs: dict[str, Any] = {
        "IndexName": descriptor.index_name,
        "KeyConditionExpression": key_condition,
        "ScanIndexForward": descriptor.scan_forward,
    }
    if clauses:
        kwargs["FilterExpression"] = " AND ".join(clauses)
    if descriptor.projection:
        kwargs["ProjectionExpression"] = ", ".join(
            builder.name(attribute) for attribute in descriptor.projection
        )
    kwargs["ExpressionAttributeNames"] = builder.names
    kwargs["ExpressionAttributeValues"] = builder.values
    if descriptor.exclusive_start_key is not None:
        kwargs["ExclusiveStartKey"] = descriptor.exclusive_start_key
    if descriptor.limit is not None:
        kwargs["Limit"] = descriptor.limit
    return kwargs


_serializer = TypeSerializer()
_deserializer = TypeDeserializer()


def _serialize(document: dict[str, Any]) -> dict[str, Any]:
    return {key: _serializer.serialize(value) for key, value in document.items()}


def _deserialize(document: dict[str, Any]) -> dict[str, Any]:
    return {key: _deserializer.deserialize(value) for key, value in document.items()}


def to_wire(table_name: str, kwargs: dict[str, Any]) -> dict[str, Any]:
    """Add ``TableName`` and serialize the value-bearing arguments of *kwargs*.

    Raises:
        TypeError: For values DynamoDB cannot store, e.g. ``float``.
        ArithmeticError: For numbers beyond DynamoDB's 38 digit precision.
    """
    request = {"TableName": table_name, **kwargs}
    request["ExpressionAttributeValues"] = _serialize(kwargs["ExpressionAttributeValues"])
    if "ExclusiveStartKey" in kwargs:
        request["ExclusiveStartKey"] = _serialize(kwargs["ExclusiveStartKey"])
    return request


class DynamoDBExecutor:
    """Pagination executor backed by DynamoDB ``Query``.

    Args:
        client: A boto3 DynamoDB client, usually from
            :func:`build_dynamodb_client`.
    """

    def __init__(self, client: Any) -> None:  # noqa: ANN401
        self._client = client

    async def execute(self, descriptor: QueryDescriptor) -> QueryPage:
        """Run one ``Query`` call and return its page.

        Raises:
            StoreQueryError: When a cursor or filter value cannot be
                serialized, or on any botocore client or transport error.
                The message is DynamoDB's own error message when there is one.
        """
        kwargs = render_query(descriptor)
        logger.debug(
            "dynamodb.query",
            table=descriptor.table_name,
            index=descriptor.index_name,
            key_condition=kwargs["KeyConditionExpression"],
            filter_expression=kwargs.get("FilterExpression"),
            limit=descriptor.limit,
            scan_forward=descriptor.scan_forward,
        )

        try:
            request = to_wire(descriptor.table_name, kwargs)
        except (TypeError, ArithmeticError) as exc:
            raise StoreQueryError(str(exc), collection=descriptor.table_name) from exc

        try:
            response = await asyncio.to_thread(self._client.query, **request)
        except ClientError as exc:
            message = exc.response.get("Error", {}).get("Message") or str(exc)
            raise StoreQueryError(message, collection=descriptor.table_name) from exc
        except BotoCoreError as exc:
            raise StoreQueryError(str(exc), collection=descriptor.table_name) from exc

        last_evaluated_key = response.get("LastEvaluatedKey")
        return QueryPage(
            items=[_deserialize(item) for item in response.get("Items", [])],
            last_evaluated_key=_deserialize(last_evaluated_key) if last_evaluated_key else None,
        )

    async def close(self) -> None:
        """Release the underlying HTTP connection pool."""
        self._client.close()
