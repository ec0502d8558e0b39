"""System and transparency endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from residence_ballot.core.settings import settings
from residence_ballot.models import VotingMethod

router = APIRouter(prefix="/system", tags=["system", "transparency"])


@router.get("/config")
async def get_public_config() -> dict[str, object]:
    """Return a sanitized snapshot of public runtime configuration.

    Excludes secrets and connection strings; suitable for transparency UIs.
    """
    return {
        "app": {
            "name": settings.app_name,
            "version": settings.app_version,
            "jwt_algorithm": settings.jwt_algorithm,
            "access_token_expire_minutes": settings.access_token_expire_minutes,
            "debug": settings.debug,
        },
        "results": {
            "quorum_ratio": settings.quorum_ratio,
            "percentage_precision": settings.percentage_precision,
            "voting_methods": [str(method) for method in VotingMethod],
        },
    }
