# src/residence_ballot/api/v1/endpoints/projects.py
"""Voting project and candidate endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from residence_ballot.api.v1.dependencies import (
    ClockDep,
    OptionalUserDep,
    SessionDep,
    require_roles,
)
from residence_ballot.models import User, VotingMethod
from residence_ballot.models.user import STAFF_ROLES
from residence_ballot.schemas.project import (
    CandidateCreate,
    CandidateResponse,
    ProjectCreate,
    ProjectResponse,
    ProjectUpdate,
    VotingMethodInfo,
)
from residence_ballot.services import projects as project_service
from residence_ballot.services.results import voting_method_description

router = APIRouter(prefix="/projects", tags=["projects"])
StaffDep = Annotated[User, Depends(require_roles(*STAFF_ROLES))]


def _is_staff(user: User | None) -> bool:
    return user is not None and user.has_role(*STAFF_ROLES)


@router.get("/", response_model=list[ProjectResponse])
async def list_projects(
    db: SessionDep,
    clock: ClockDep,
    current_user: OptionalUserDep,
    include_unpublished: bool = False,
) -> list[ProjectResponse]:
    """List projects with their derived status; unpublished ones for staff only."""
    projects = project_service.list_projects(
        db, include_unpublished=include_unpublished and _is_staff(current_user)
    )
    now = clock.now()
    return [project_service.to_response(db, project, now) for project in projects]


@router.get("/voting-methods", response_model=list[VotingMethodInfo])
async def list_voting_methods() -> list[VotingMethodInfo]:
    """Describe the available voting methods."""
    return [
        VotingMethodInfo(method=method, description=voting_method_description(method))
        for method in VotingMethod
    ]


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: str,
    db: SessionDep,
    clock: ClockDep,
    current_user: OptionalUserDep,
) -> ProjectResponse:
    """Get a specific project by ID."""
    project = project_service.get_visible_project(db, project_id, current_user)
    return project_service.to_response(db, project, clock.now())


@router.post("/", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
    payload: ProjectCreate,
    _staff: StaffDep,
    db: SessionDep,
    clock: ClockDep,
) -> ProjectResponse:
    """Create a new voting project."""
    project = project_service.create_project(db, payload, clock)
    return project_service.to_response(db, project, clock.now())


@router.patch("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: str,
    payload: ProjectUpdate,
    _staff: StaffDep,
    db: SessionDep,
    clock: ClockDep,
) -> ProjectResponse:
    """Update, publish or activate a project."""
    project = project_service.update_project(db, project_id, payload)
    return project_service.to_response(db, project, clock.now())


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(project_id: str, _staff: StaffDep, db: SessionDep) -> Response:
    """Delete a project that has no votes."""
    project_service.delete_project(db, project_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{project_id}/candidates", response_model=list[CandidateResponse])
async def list_candidates(
    project_id: str,
    db: SessionDep,
    current_user: OptionalUserDep,
) -> list[CandidateResponse]:
    """List a project's candidates in registration order."""
    project_service.get_visible_project(db, project_id, current_user)
    return [
        CandidateResponse.model_validate(candidate)
        for candidate in project_service.list_candidates(db, project_id)
    ]


@router.post(
    "/{project_id}/candidates",
    response_model=CandidateResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_candidate(
    project_id: str,
    payload: CandidateCreate,
    _staff: StaffDep,
    db: SessionDep,
    clock: ClockDep,
) -> CandidateResponse:
    """Add a candidate to a project."""
    candidate = project_service.add_candidate(db, project_id, payload, clock)
    return CandidateResponse.model_validate(candidate)
