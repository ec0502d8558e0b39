"""Casting, revoking and checking votes."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from residence_ballot.core.clock import Clock
from residence_ballot.core.errors import (
    CandidateNotFoundError,
    ProjectNotFoundError,
    StorageError,
    VoteRejectedError,
)
from residence_ballot.db.time import as_utc
from residence_ballot.models import Candidate, User, Vote, VotingMethod, VotingProject
from residence_ballot.repositories.projects import parse_voting_method
from residence_ballot.services.lifecycle import voting_window_open

logger = logging.getLogger(__name__)


def vote_weight(method: str, apartment_size: float | None) -> float:
    """Return the weight a vote carries under ``method``.

    Raises:
        ConfigurationError: If ``method`` is not a known voting method.
    """
    voting_method = parse_voting_method(method)
    if voting_method is VotingMethod.ONE_PERSON_ONE_VOTE:
        return 1.0
    return float(apartment_size or 0.0)


def get_user_vote(db: Session, user: User, project_id: str) -> Vote | None:
    """Return the user's live vote in a project, if any."""
    return db.execute(
        select(Vote).where(Vote.user_id == user.id, Vote.project_id == project_id)
    ).scalar_one_or_none()


def check_eligibility(
    db: Session,
    user: User,
    project: VotingProject,
    clock: Clock,
) -> str | None:
    """Return why ``user`` may not vote in ``project``, or None if they may."""
    now = as_utc(clock.now())
    if not project.is_active:
        return "Voting is not active"
    if now < as_utc(project.start_date):
        return "Voting has not started yet"
    if now > as_utc(project.end_date):
        return "Voting has ended"
    if get_user_vote(db, user, project.id) is not None:
        return "You have already voted in this project"
    if not user.is_active:
        return "User account is not active"
    if parse_voting_method(project.voting_method) is not VotingMethod.ONE_PERSON_ONE_VOTE:
        if user.apartment_size is None or user.apartment_size <= 0:
            return "Apartment size is required for weighted voting"
    return None


def cast_vote(
    db: Session,
    *,
    user: User,
    project_id: str,
    candidate_id: str,
    clock: Clock,
    location: dict[str, Any] | None = None,
    ip_address: str | None = None,
    user_agent: str | None = None,
) -> Vote:
    """Record a vote after validating the candidate and the voter's eligibility.

    The weight is fixed here and never recomputed.

    Raises:
        ProjectNotFoundError: If the project does not exist.
        CandidateNotFoundError: If the candidate is not an active candidate of the project.
        VoteRejectedError: If the user may not vote.
        ConfigurationError: If the project's voting method is invalid.
    """
    project = db.get(VotingProject, project_id)
    if project is None:
        raise ProjectNotFoundError(project_id)
    voting_method = parse_voting_method(project.voting_method)

    candidate = db.get(Candidate, candidate_id)
    if candidate is None or candidate.project_id != project_id or not candidate.is_active:
        raise CandidateNotFoundError("Invalid candidate")

    reason = check_eligibility(db, user, project, clock)
    if reason is not None:
        raise VoteRejectedError(reason)

    vote = Vote(
        project_id=project_id,
        candidate_id=candidate_id,
        user_id=user.id,
        weight=vote_weight(voting_method, user.apartment_size),
        timestamp=clock.now(),
        location=location,
        ip_address=ip_address,
        user_agent=user_agent,
    )
    db.add(vote)
    try:
        db.commit()
    except IntegrityError as err:
        db.rollback()
        raise VoteRejectedError("You have already voted in this project") from err
    except SQLAlchemyError as err:
        db.rollback()
        logger.error("Failed to store vote for project %s", project_id, exc_info=True)
        raise StorageError("Could not store vote") from err

    logger.info(
        "Vote cast: project=%s candidate=%s user=%s weight=%s location=%s",
        project_id,
        candidate_id,
        user.id,
        vote.weight,
        "captured" if location else "not_captured",
    )
    return vote


def revoke_vote(db: Session, *, user: User, project_id: str, clock: Clock) -> Vote:
    """Delete the user's vote in a project while its voting window is open.

    Returns:
        The deleted vote row.

    Raises:
        VoteRejectedError: If there is no vote or the window is closed.
    """
    vote = get_user_vote(db, user, project_id)
    if vote is None:
        raise VoteRejectedError("No vote found to revoke")

    project = db.get(VotingProject, project_id)
    if project is None:
        raise ProjectNotFoundError(project_id)
    if not voting_window_open(clock.now(), project):
        raise VoteRejectedError("Votes can only be revoked during the voting period")

    # Loaded before the delete so the detached row stays readable.
    candidate_id, vote_id = vote.candidate_id, vote.id
    db.delete(vote)
    try:
        db.commit()
    except SQLAlchemyError as err:
        db.rollback()
        logger.error("Failed to revoke vote %s", vote_id, exc_info=True)
        raise StorageError("Could not revoke vote") from err

    logger.info(
        "Vote revoked: project=%s candidate=%s user=%s vote=%s",
        project_id,
        candidate_id,
        user.id,
        vote_id,
    )
    return vote


def voting_history(
    db: Session, user: User
) -> list[tuple[Vote, VotingProject, Candidate]]:
    """Return the user's live votes with their projects and candidates, newest first."""
    rows = db.execute(
        select(Vote, VotingProject, Candidate)
        .join(VotingProject, VotingProject.id == Vote.project_id)
        .join(Candidate, Candidate.id == Vote.candidate_id)
        .where(Vote.user_id == user.id)
        .order_by(Vote.timestamp.desc(), Vote.id)
    ).all()
    return [(vote, project, candidate) for vote, project, candidate in rows]
