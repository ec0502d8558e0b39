"""API endpoint modules for version 1."""

from .projects import router as projects_router
from .reports import router as reports_router
from .results import router as results_router
from .supervisor import router as supervisor_router
from .system import router as system_router
from .votes import router as votes_router

__all__ = [
    "projects_router",
    "reports_router",
    "results_router",
    "supervisor_router",
    "system_router",
    "votes_router",
]
