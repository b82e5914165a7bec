"""Unit tests for request parameter normalisation (query/params.py).

Tests cover:
- parse_limit(): malformed, negative and fractional page sizes
- parse_prefecture(): range bounds and non-numeric input
- parse_order(): case-insensitive "true"/"false" and fallbacks
- parse_cursor(): JSON objects, the url-encoded variant, unparsable and
  deeply nested input
- normalize_content_params() / normalize_media_params(): defaults

None of these functions may raise, whatever the input.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

import pytest

from localing_feed.query.params import (
    ContentListParams,
    MediaListParams,
    normalize_content_params,
    normalize_media_params,
    parse_cursor,
    parse_limit,
    parse_order,
    parse_prefecture,
)


class TestParseLimit:
    @pytest.mark.parametrize(
        "raw",
        [None, "", "   ", "abc", "5abc", "-1", "-20", "NaN", "Infinity", "-Infinity", True, [], {}],
    )
    def test_malformed_or_negative_limit_is_unbounded(self, raw: Any) -> None:
        """Anything that is not a non-negative number yields None."""
        assert parse_limit(raw) is None

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("5", 5), ("0", 0), (" 7 ", 7), ("5.9", 5), (5, 5), (12.4, 12), ("-0.5", 0)],
    )
    def test_numeric_limit_is_truncated(self, raw: Any, expected: int) -> None:
        """Numeric input is truncated toward zero."""
        assert parse_limit(raw) == expected


class TestParsePrefecture:
    @pytest.mark.parametrize("raw", [None, "", "0", "48", "-3", "100", "kagoshima", "4 6", float("nan")])
    def test_out_of_range_or_non_numeric_is_none(self, raw: Any) -> None:
        """Values outside [1, 47] or non-numeric values disable region filtering."""
        assert parse_prefecture(raw) is None

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("1", 1), ("47", 47), ("46", 46), ("46.7", 46), (13, 13), (" 8 ", 8)],
    )
    def test_in_range_prefecture_is_kept(self, raw: Any, expected: int) -> None:
        assert parse_prefecture(raw) == expected


class TestParseOrder:
    @pytest.mark.parametrize("raw", ["true", "TRUE", "True", "tRuE"])
    def test_true_in_any_case_is_ascending(self, raw: str) -> None:
        assert parse_order(raw) is True

    @pytest.mark.parametrize(
        "raw", [None, "", "false", "FALSE", "1", "0", "yes", " true", "truthy", 1, True]
    )
    def test_everything_else_is_descending(self, raw: Any) -> None:
        """Only the literal strings are honoured; the default is newest first."""
        assert parse_order(raw) is False


class TestParseCursor:
    @pytest.mark.parametrize(
        "raw",
        [
            None, "", "   ", "not json", "{broken", "[1, 2]", "null", "42", '"id"', "{}", {}, 17,
            "[" * 5000, '{"a": ' * 5000,
        ],
    )
    def test_unusable_cursor_is_none(self, raw: Any) -> None:
        """Unparsable, non-object and empty cursors restart from the head."""
        assert parse_cursor(raw) is None

    def test_json_object_is_returned_as_is(self) -> None:
        raw = '{"id": "content-9", "publicState": 1, "publishedDate": 1699999460}'
        assert parse_cursor(raw) == {
            "id": "content-9",
            "publicState": 1,
            "publishedDate": 1699999460,
        }

    def test_fractional_numbers_decode_as_decimal(self) -> None:
        cursor = parse_cursor('{"id": "c", "publicState": 1, "publishedDate": 1.5}')
        assert cursor == {"id": "c", "publicState": 1, "publishedDate": Decimal("1.5")}
        assert isinstance(cursor["publishedDate"], Decimal)
        assert isinstance(cursor["publicState"], int)

    def test_dict_is_passed_through(self) -> None:
        cursor = {"id": "content-1", "publicState": 1, "publishedDate": 1}
        assert parse_cursor(cursor) is cursor

    def test_url_encoded_cursor_coerces_numeric_keys(self) -> None:
        """The url-encoded variant turns publishedDate and publicState into ints."""
        raw = "id=content-9&publicState=1&publishedDate=1699999460"
        assert parse_cursor(raw) == {
            "id": "content-9",
            "publicState": 1,
            "publishedDate": 1699999460,
        }

    def test_url_encoded_cursor_decodes_escapes(self) -> None:
        raw = "id=content%2F9&publishedDate=1699999460"
        assert parse_cursor(raw) == {"id": "content/9", "publishedDate": 1699999460}

    @pytest.mark.parametrize(
        "raw",
        [
            "id=content-9&publishedDate=yesterday",
            "id=content-9&publishedDate=1699999460.5",
            "id=content-9&broken",
        ],
    )
    def test_bad_url_encoded_cursor_is_none(self, raw: str) -> None:
        assert parse_cursor(raw) is None


class TestNormalizeParams:
    def test_empty_query_gives_defaults(self) -> None:
        """No parameters at all."""
        assert normalize_content_params({}) == ContentListParams(
            last_evaluated_key=None,
            limit=None,
            prefecture=None,
            ascending=False,
        )

    def test_full_query(self) -> None:
        params = normalize_content_params(
            {
                "lastEvaluatedKey": '{"id": "content-3", "publicState": 1, "publishedDate": 10}',
                "limit": "5",
                "prefecture": "46",
                "order": "True",
            }
        )
        assert params.last_evaluated_key == {"id": "content-3", "publicState": 1, "publishedDate": 10}
        assert params.limit == 5
        assert params.prefecture == 46
        assert params.ascending is True

    def test_malformed_query_never_raises(self) -> None:
        """Every field malformed still yields defaults."""
        params = normalize_content_params(
            {"lastEvaluatedKey": "%%%", "limit": "-3", "prefecture": "99", "order": "sideways"}
        )
        assert params == ContentListParams()

    def test_media_params(self) -> None:
        params = normalize_media_params(
            {
                "lastEvaluatedKey": "id=media-3&publicState=1&createdDate=1699913600",
                "limit": "2.9",
                "prefecture": "46",
                "order": "true",
            }
        )
        assert params == MediaListParams(
            last_evaluated_key={"id": "media-3", "publicState": 1, "createdDate": 1699913600},
            limit=2,
            ascending=True,
        )
        assert normalize_media_params({}) == MediaListParams()
