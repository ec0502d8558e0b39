# src/residence_ballot/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    projects_router,
    reports_router,
    results_router,
    supervisor_router,
    system_router,
    votes_router,
)

__all__ = [
    "projects_router",
    "reports_router",
    "results_router",
    "supervisor_router",
    "system_router",
    "votes_router",
]
