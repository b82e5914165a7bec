"""Test data factories and store doubles.

Available helpers
-----------------
MediaItemFactory    — visible media item dict
ContentItemFactory  — published content item dict
FakeExecutor        — scripted in-memory pagination executor
"""

from __future__ import annotations

from tests.factories.content import ContentItemFactory, MediaItemFactory
from tests.factories.store import FakeExecutor

__all__ = [
    "ContentItemFactory",
    "FakeExecutor",
    "MediaItemFactory",
]
