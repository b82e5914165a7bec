"""Unit tests for query synthesis (query/synthesizer.py).

Tests cover:
- base content condition: visible partition + publishedDate < now
- media OR-group from the visible media id set, omitted when the set is empty
- region containment appended after the media group
- cursor, limit and direction passed through unmodified
- deterministic output for identical inputs and frozen time
- media list and visible-media id queries
"""

from __future__ import annotations

from localing_feed.config.settings import Settings
from localing_feed.query.descriptor import (
    AnyOf,
    Contains,
    KeyCondition,
    QueryDescriptor,
    RangeCondition,
)
from localing_feed.query.params import ContentListParams, MediaListParams, normalize_content_params
from localing_feed.query.synthesizer import (
    build_content_query,
    build_media_query,
    build_visible_media_ids_query,
    current_timestamp,
)

NOW = 1_700_000_000


class TestBuildContentQuery:
    def test_no_parameters_gives_base_condition_only(self, settings: Settings) -> None:
        """No params and no visible media means no filters at all."""
        descriptor = build_content_query(ContentListParams(), [], NOW, settings)

        assert descriptor.kind == "content"
        assert descriptor.table_name == "localing-test-inoreader-content"
        assert descriptor.index_name == "public"
        assert descriptor.partition == KeyCondition("publicState", 1)
        assert descriptor.sort_key == "publishedDate"
        assert descriptor.sort_range == RangeCondition("publishedDate", "<", NOW)
        assert descriptor.filters == ()
        assert descriptor.exclusive_start_key is None
        assert descriptor.limit is None
        assert descriptor.scan_forward is False

    def test_visible_media_become_one_or_group(self, settings: Settings) -> None:
        descriptor = build_content_query(
            ContentListParams(), ["media-0", "media-1", "media-2"], NOW, settings
        )
        assert descriptor.filters == (
            AnyOf(
                (
                    Contains("mediaId", "media-0"),
                    Contains("mediaId", "media-1"),
                    Contains("mediaId", "media-2"),
                )
            ),
        )

    def test_prefecture_adds_region_clause(self, settings: Settings) -> None:
        """prefecture=46 gives exactly one region clause."""
        params = normalize_content_params({"prefecture": "46"})
        descriptor = build_content_query(params, [], NOW, settings)

        assert descriptor.filters == (Contains("prefectureList", 46),)

    def test_region_clause_follows_media_group(self, settings: Settings) -> None:
        params = normalize_content_params({"prefecture": "46"})
        descriptor = build_content_query(params, ["media-0"], NOW, settings)

        assert len(descriptor.filters) == 2
        assert isinstance(descriptor.filters[0], AnyOf)
        assert descriptor.filters[1] == Contains("prefectureList", 46)

    def test_invalid_prefecture_adds_no_clause(self, settings: Settings) -> None:
        params = normalize_content_params({"prefecture": "48"})
        descriptor = build_content_query(params, [], NOW, settings)
        assert descriptor.filters == ()

    def test_pagination_fields_pass_through(self, settings: Settings) -> None:
        """A cursor, limit and direction are carried over as given."""
        cursor = {"id": "content-4", "publicState": 1, "publishedDate": NOW - 240}
        descriptor = build_content_query(
            ContentListParams(last_evaluated_key=cursor, limit=5, ascending=True),
            [],
            NOW,
            settings,
        )
        assert descriptor.exclusive_start_key is cursor
        assert descriptor.limit == 5
        assert descriptor.scan_forward is True

    def test_identical_inputs_give_identical_descriptors(self, settings: Settings) -> None:
        params = normalize_content_params({"limit": "5", "prefecture": "46", "order": "true"})
        first = build_content_query(params, ["media-0", "media-1"], NOW, settings)
        second = build_content_query(params, ["media-0", "media-1"], NOW, settings)
        assert first == second

    def test_only_the_time_bound_differs_across_clock_ticks(self, settings: Settings) -> None:
        params = normalize_content_params({"prefecture": "46"})
        first = build_content_query(params, ["media-0"], NOW, settings)
        later = build_content_query(params, ["media-0"], NOW + 30, settings)

        assert first != later
        assert later.sort_range == RangeCondition("publishedDate", "<", NOW + 30)
        assert first.filters == later.filters


class TestBuildMediaQueries:
    def test_media_query_has_no_range_or_filters(self, settings: Settings) -> None:
        descriptor = build_media_query(MediaListParams(ascending=True), settings)

        assert descriptor == QueryDescriptor(
            kind="media",
            table_name="localing-test-inoreader-media",
            index_name="public",
            partition=KeyCondition("publicState", 1),
            sort_key="createdDate",
            scan_forward=True,
        )

    def test_media_query_carries_cursor_and_limit(self, settings: Settings) -> None:
        cursor = {"id": "media-3", "publicState": 1, "createdDate": 1699913600}
        descriptor = build_media_query(
            MediaListParams(last_evaluated_key=cursor, limit=20), settings
        )
        assert descriptor.exclusive_start_key is cursor
        assert descriptor.limit == 20
        assert descriptor.sort_range is None
        assert descriptor.filters == ()

    def test_visible_media_ids_query_projects_id(self, settings: Settings) -> None:
        descriptor = build_visible_media_ids_query(settings)
        assert descriptor.projection == ("id",)
        assert descriptor.filters == ()
        assert descriptor.limit is None
        assert descriptor.exclusive_start_key is None

    def test_visible_media_ids_query_resumes_from_cursor(self, settings: Settings) -> None:
        cursor = {"id": "media-9", "publicState": 1, "createdDate": 5}
        descriptor = build_visible_media_ids_query(settings, cursor)
        assert descriptor.exclusive_start_key == cursor


def test_current_timestamp_is_integer_seconds() -> None:
    value = current_timestamp()
    assert isinstance(value, int)
    assert value > NOW
