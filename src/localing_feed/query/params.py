"""Request parameter normalisation for the list routes.

Every function in this module is pure and total: whatever the client sends,
the result is either a validated value or the documented default.  Nothing
here raises, so a malformed query string can never fail a request.

Defaults:

=====================  ==========================================
``lastEvaluatedKey``   ``None`` — start at the head of the index
``limit``              ``None`` — no page-size limit
``prefecture``         ``None`` — no region filter
``order``              ``False`` — newest first
=====================  ==========================================
"""

from __future__ import annotations

import json
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional
from urllib.parse import parse_qsl

PREFECTURE_MIN = 1
PREFECTURE_MAX = 47

# Key attributes that arrive as strings in the url-encoded cursor variant but
# are numbers in the index.
_NUMERIC_CURSOR_KEYS: tuple[str, ...] = ("publishedDate", "createdDate", "publicState")

_NUMBER_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


@dataclass(frozen=True)
class ContentListParams:
    """Normalised parameters for ``GET /content/list``."""

    last_evaluated_key: Optional[dict[str, Any]] = None
    limit: Optional[int] = None
    prefecture: Optional[int] = None
    ascending: bool = False


@dataclass(frozen=True)
class MediaListParams:
    """Normalised parameters for ``GET /media/list``."""

    last_evaluated_key: Optional[dict[str, Any]] = None
    limit: Optional[int] = None
    ascending: bool = False


# ---------------------------------------------------------------------------
# Scalar helpers
# ---------------------------------------------------------------------------


def _is_present(value: Any) -> bool:
    return value is not None and value != ""


def _to_finite_number(value: Any) -> Optional[float]:
    """Return *value* as a finite float, or ``None`` if it is not numeric."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not _NUMBER_RE.fullmatch(text):
            return None
        number = float(text)
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def _to_truncated_int(value: Any) -> Optional[int]:
    number = _to_finite_number(value)
    if number is None:
        return None
    return int(number)


# ---------------------------------------------------------------------------
# Per-field parsers
# ---------------------------------------------------------------------------


def parse_cursor(raw: Any) -> Optional[dict[str, Any]]:
    """Parse the ``lastEvaluatedKey`` query parameter.

    Two encodings are accepted:

    - a JSON object, e.g. ``{"id": "c1", "publicState": 1, "publishedDate": 1600000000}``,
      whose fractional numbers are decoded as ``Decimal`` (the only
      non-integer number type DynamoDB accepts);
    - a url-encoded key/value string, e.g.
      ``id=c1&publicState=1&publishedDate=1600000000``, where the numeric key
      attributes are converted to ``int``.

    Args:
        raw: The raw parameter value.  Already-structured non-empty dicts
            are passed through unchanged.

    Returns:
        The cursor dict, or ``None`` when the value is absent, unparsable,
        not an object, or carries a non-integer numeric key.
    """
    if isinstance(raw, dict):
        return raw or None
    if not isinstance(raw, str) or not raw.strip():
        return None
    text = raw.strip()

    try:
        decoded = json.loads(text, parse_float=Decimal)
    except (ValueError, RecursionError):
        decoded = None
    else:
        return decoded if isinstance(decoded, dict) and decoded else None

    if "=" not in text:
        return None
    try:
        pairs = parse_qsl(text, keep_blank_values=True, strict_parsing=True)
    except ValueError:
        return None

    cursor: dict[str, Any] = dict(pairs)
    for key in _NUMERIC_CURSOR_KEYS:
        if key in cursor:
            try:
                cursor[key] = int(cursor[key])
            except ValueError:
                return None
    return cursor or None


def parse_limit(raw: Any) -> Optional[int]:
    """Parse ``limit`` into a non-negative page size.

    Returns:
        The truncated integer when it is ``>= 0``; ``None`` (unbounded) for
        missing, non-numeric, non-finite or negative input.
    """
    limit = _to_truncated_int(raw)
    if limit is None or limit < 0:
        return None
    return limit


def parse_prefecture(raw: Any) -> Optional[int]:
    """Parse ``prefecture`` into a region code in ``[1, 47]``.

    Returns:
        The truncated integer when it lies in the inclusive range, otherwise
        ``None`` so that no region filter is applied.
    """
    prefecture = _to_truncated_int(raw)
    if prefecture is None or not PREFECTURE_MIN <= prefecture <= PREFECTURE_MAX:
        return None
    return prefecture


def parse_order(raw: Any) -> bool:
    """Parse ``order`` into a sort direction.

    Only the strings ``"true"`` and ``"false"`` are honoured, compared
    case-insensitively.  Everything else, including ``"1"`` and ``"yes"``,
    falls back to ``False``.

    Returns:
        ``True`` for ascending (oldest first), ``False`` for descending.
    """
    if not _is_present(raw) or not isinstance(raw, str):
        return False
    return raw.lower() == "true"


# ---------------------------------------------------------------------------
# Route-level bundles
# ---------------------------------------------------------------------------


def normalize_content_params(query: Mapping[str, Any]) -> ContentListParams:
    """Normalise the raw query parameters of ``GET /content/list``."""
    return ContentListParams(
        last_evaluated_key=parse_cursor(query.get("lastEvaluatedKey")),
        limit=parse_limit(query.get("limit")),
        prefecture=parse_prefecture(query.get("prefecture")),
        ascending=parse_order(query.get("order")),
    )


def normalize_media_params(query: Mapping[str, Any]) -> MediaListParams:
    """Normalise the raw query parameters of ``GET /media/list``."""
    return MediaListParams(
        last_evaluated_key=parse_cursor(query.get("lastEvaluatedKey")),
        limit=parse_limit(query.get("limit")),
        ascending=parse_order(query.get("order")),
    )
