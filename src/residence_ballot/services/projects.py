"""Project and candidate management."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from residence_ballot.core.clock import Clock
from residence_ballot.core.errors import (
    ConfigurationError,
    ProjectNotFoundError,
    ProjectStateError,
    StorageError,
)
from residence_ballot.db.time import as_utc
from residence_ballot.models import (
    ApprovalStatus,
    Candidate,
    User,
    Vote,
    VotingMethod,
    VotingProject,
)
from residence_ballot.models.user import STAFF_ROLES
from residence_ballot.schemas.project import (
    CandidateCreate,
    ProjectCreate,
    ProjectResponse,
    ProjectUpdate,
)

logger = logging.getLogger(__name__)


def _commit(db: Session, what: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as err:
        db.rollback()
        logger.error("Failed to %s", what, exc_info=True)
        raise StorageError(f"Could not {what}") from err


def _validate_settings(
    *,
    voting_method: str,
    total_area: float | None,
    start_date: datetime,
    end_date: datetime,
) -> None:
    if voting_method == VotingMethod.WEIGHTED_BY_SIZE_MANUAL and not total_area:
        raise ConfigurationError(
            "total_area is required for the manual size-weighted voting method"
        )
    if as_utc(end_date) <= as_utc(start_date):
        raise ConfigurationError("end_date must be after start_date")


def _check_review_gate(
    *,
    requires_review: bool,
    approval_status: str,
    activating: bool,
) -> None:
    if activating and requires_review and approval_status != ApprovalStatus.APPROVED:
        raise ProjectStateError(
            "Project requires supervisor approval before it can be activated or published"
        )


def get_project(db: Session, project_id: str) -> VotingProject:
    """Return a project or raise ``ProjectNotFoundError``."""
    project = db.get(VotingProject, project_id)
    if project is None:
        raise ProjectNotFoundError(project_id)
    return project


def get_visible_project(db: Session, project_id: str, user: User | None) -> VotingProject:
    """Return a project the caller may see; unpublished projects are staff-only.

    Raises:
        ProjectNotFoundError: If the project does not exist or is hidden from ``user``.
    """
    project = get_project(db, project_id)
    if not project.is_published and not (user is not None and user.has_role(*STAFF_ROLES)):
        raise ProjectNotFoundError(project_id)
    return project


def count_votes(db: Session, project_id: str) -> int:
    return db.execute(
        select(func.count()).select_from(Vote).where(Vote.project_id == project_id)
    ).scalar_one()


def to_response(db: Session, project: VotingProject, now: datetime) -> ProjectResponse:
    """Convert a project ORM instance to an API schema with its derived status."""
    candidate_count = db.execute(
        select(func.count()).select_from(Candidate).where(Candidate.project_id == project.id)
    ).scalar_one()
    return ProjectResponse(
        id=project.id,
        title=project.title,
        description=project.description,
        voting_type=project.voting_type,
        voting_method=project.voting_method,
        total_area=project.total_area,
        start_date=as_utc(project.start_date),
        end_date=as_utc(project.end_date),
        is_active=project.is_active,
        is_published=project.is_published,
        requires_supervisor_review=project.requires_supervisor_review,
        supervisor_approval_status=ApprovalStatus(project.supervisor_approval_status),
        supervisor_comments=project.supervisor_comments,
        status=project.status_at(now),
        created_at=as_utc(project.created_at),
        candidate_count=candidate_count,
        vote_count=count_votes(db, project.id),
    )


def list_projects(db: Session, *, include_unpublished: bool = False) -> list[VotingProject]:
    """Return projects ordered by start date, newest first."""
    stmt = select(VotingProject)
    if not include_unpublished:
        stmt = stmt.where(VotingProject.is_published.is_(True))
    stmt = stmt.order_by(VotingProject.start_date.desc(), VotingProject.created_at.desc())
    return list(db.execute(stmt).scalars())


def create_project(db: Session, data: ProjectCreate, clock: Clock) -> VotingProject:
    """Create a voting project.

    Raises:
        ConfigurationError: If the method needs a total area that is missing,
            or the voting window is empty.
        ProjectStateError: If a project needing review is created active or published.
    """
    _validate_settings(
        voting_method=data.voting_method,
        total_area=data.total_area,
        start_date=data.start_date,
        end_date=data.end_date,
    )
    _check_review_gate(
        requires_review=data.requires_supervisor_review,
        approval_status=ApprovalStatus.PENDING,
        activating=data.is_active or data.is_published,
    )
    project = VotingProject(
        title=data.title,
        description=data.description,
        voting_type=data.voting_type,
        voting_method=data.voting_method,
        total_area=data.total_area,
        start_date=as_utc(data.start_date),
        end_date=as_utc(data.end_date),
        is_active=data.is_active,
        is_published=data.is_published,
        requires_supervisor_review=data.requires_supervisor_review,
        supervisor_approval_status=ApprovalStatus.PENDING,
        created_at=clock.now(),
    )
    db.add(project)
    _commit(db, "create project")
    logger.info("Project created: %s (%s)", project.id, project.title)
    return project


def update_project(db: Session, project_id: str, changes: ProjectUpdate) -> VotingProject:
    """Apply a partial update to a project.

    The merged result is validated before anything is written.

    Raises:
        ProjectNotFoundError: If the project does not exist.
        ConfigurationError: If the merged settings are invalid.
        ProjectStateError: If the voting method changes after votes were cast,
            or the project is activated or published without a required approval.
            Also raised when review is waived before approval, or required
            while the project is still active or published.
    """
    project = get_project(db, project_id)
    updates: dict[str, Any] = changes.model_dump(exclude_unset=True)

    merged = {
        "voting_method": updates.get("voting_method") or project.voting_method,
        "total_area": updates.get("total_area", project.total_area),
        "start_date": updates.get("start_date") or project.start_date,
        "end_date": updates.get("end_date") or project.end_date,
    }
    _validate_settings(**merged)

    if merged["voting_method"] != project.voting_method and count_votes(db, project_id):
        raise ProjectStateError("Voting method cannot change once votes have been cast")

    # Gate flags as they will stand after the update.
    flags = {
        field: getattr(project, field) if updates.get(field) is None else updates[field]
        for field in ("is_active", "is_published", "requires_supervisor_review")
    }
    approved = project.supervisor_approval_status == ApprovalStatus.APPROVED
    if (
        project.requires_supervisor_review
        and not flags["requires_supervisor_review"]
        and not approved
    ):
        raise ProjectStateError("Supervisor review cannot be waived before approval")
    if flags.keys() & updates.keys():
        _check_review_gate(
            requires_review=flags["requires_supervisor_review"],
            approval_status=project.supervisor_approval_status,
            activating=flags["is_active"] or flags["is_published"],
        )

    for field, value in updates.items():
        if value is None and field not in ("description", "total_area"):
            continue
        if field in ("start_date", "end_date"):
            value = as_utc(value)
        setattr(project, field, value)

    _commit(db, "update project")
    logger.info("Project updated: %s fields=%s", project_id, sorted(updates))
    return project


def delete_project(db: Session, project_id: str) -> None:
    """Delete a project and its candidates.

    Raises:
        ProjectStateError: If votes have already been cast.
    """
    project = get_project(db, project_id)
    if count_votes(db, project_id):
        raise ProjectStateError("Cannot delete project with existing votes")
    db.delete(project)
    _commit(db, "delete project")
    logger.info("Project deleted: %s", project_id)


def next_candidate_order(db: Session) -> int:
    """Return the next candidate creation sequence number."""
    current = db.execute(select(func.max(Candidate.order_index))).scalar_one()
    return (current or 0) + 1


def list_candidates(db: Session, project_id: str) -> list[Candidate]:
    """Return a project's candidates in creation order."""
    get_project(db, project_id)
    return list(
        db.execute(
            select(Candidate)
            .where(Candidate.project_id == project_id)
            .order_by(Candidate.order_index)
        ).scalars()
    )


def add_candidate(
    db: Session,
    project_id: str,
    data: CandidateCreate,
    clock: Clock,
) -> Candidate:
    """Add a candidate to a project.

    Raises:
        ProjectNotFoundError: If the project does not exist.
        ProjectStateError: If the user already stands in this project.
    """
    get_project(db, project_id)
    if data.user_id is not None:
        existing = db.execute(
            select(Candidate).where(
                Candidate.project_id == project_id,
                Candidate.user_id == data.user_id,
            )
        ).first()
        if existing is not None:
            raise ProjectStateError("User is already a candidate in this project")

    candidate = Candidate(
        project_id=project_id,
        user_id=data.user_id,
        name=data.name,
        vision=data.vision,
        mission=data.mission,
        is_active=data.is_active,
        created_at=clock.now(),
        order_index=next_candidate_order(db),
    )
    db.add(candidate)
    _commit(db, "add candidate")
    logger.info("Candidate added: project=%s candidate=%s", project_id, candidate.id)
    return candidate


def review_project(
    db: Session,
    project_id: str,
    *,
    reviewer: User,
    action: str,
    comments: str | None,
    clock: Clock,
) -> VotingProject:
    """Record a supervisor decision on a project.

    Raises:
        ProjectNotFoundError: If the project does not exist.
        ProjectStateError: If the project does not require review.
    """
    project = get_project(db, project_id)
    if not project.requires_supervisor_review:
        raise ProjectStateError("This project does not require supervisor review")

    project.supervisor_approval_status = (
        ApprovalStatus.APPROVED if action == "APPROVE" else ApprovalStatus.REJECTED
    )
    project.supervisor_comments = comments
    project.supervisor_reviewed_by = reviewer.id
    project.supervisor_reviewed_at = clock.now()
    _commit(db, "record review")
    logger.info(
        "Supervisor %s %s project %s",
        reviewer.id,
        "approved" if action == "APPROVE" else "rejected",
        project_id,
    )
    return project
