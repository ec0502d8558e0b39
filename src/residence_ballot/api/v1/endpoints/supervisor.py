# src/residence_ballot/api/v1/endpoints/supervisor.py
"""Supervisor review endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy import select

from residence_ballot.api.v1.dependencies import ClockDep, SessionDep, require_roles
from residence_ballot.models import User, UserRole, VotingProject
from residence_ballot.schemas.project import ProjectResponse, ReviewRequest
from residence_ballot.services import projects as project_service

router = APIRouter(prefix="/supervisor", tags=["supervisor"])
SupervisorDep = Annotated[
    User, Depends(require_roles(UserRole.SUPERVISOR, UserRole.SUPERADMIN))
]


@router.get("/projects", response_model=list[ProjectResponse])
async def list_review_queue(
    _supervisor: SupervisorDep,
    db: SessionDep,
    clock: ClockDep,
) -> list[ProjectResponse]:
    """List projects that require supervisor review."""
    projects = db.execute(
        select(VotingProject)
        .where(VotingProject.requires_supervisor_review.is_(True))
        .order_by(VotingProject.created_at)
    ).scalars()
    now = clock.now()
    return [project_service.to_response(db, project, now) for project in projects]


@router.post("/projects/{project_id}/review", response_model=ProjectResponse)
async def review_project(
    project_id: str,
    payload: ReviewRequest,
    supervisor: SupervisorDep,
    db: SessionDep,
    clock: ClockDep,
) -> ProjectResponse:
    """Approve or reject a project."""
    project = project_service.review_project(
        db,
        project_id,
        reviewer=supervisor,
        action=payload.action,
        comments=payload.comments,
        clock=clock,
    )
    return project_service.to_response(db, project, clock.now())
