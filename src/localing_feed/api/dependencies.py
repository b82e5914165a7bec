"""FastAPI dependency providers.

The pagination executor and settings are built once in ``create_app()`` and
stored on ``app.state``.  Routes receive them through these dependencies,
which also lets tests swap in fakes via ``app.dependency_overrides``.
"""

from __future__ import annotations

from fastapi import Request

from localing_feed.config.settings import Settings
from localing_feed.store.base import PaginationExecutor


def get_executor(request: Request) -> PaginationExecutor:
    """Return the process-wide pagination executor."""
    return request.app.state.executor


def get_app_settings(request: Request) -> Settings:
    """Return the settings the application was built with."""
    return request.app.state.settings
