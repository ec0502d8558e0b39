"""Project reports and candidate statistics built on the result snapshot."""

from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import timedelta

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from residence_ballot.core.clock import Clock
from residence_ballot.core.errors import CandidateNotFoundError, StorageError
from residence_ballot.db.time import as_utc
from residence_ballot.models import Candidate, Report, User, Vote
from residence_ballot.repositories import ProjectStore, VoteStore
from residence_ballot.schemas.report import (
    CandidateStats,
    ReportProject,
    ReportResponse,
    ReportVote,
)
from residence_ballot.schemas.results import CandidateResultOut
from residence_ballot.services.aggregator import ResultSnapshot, VoteAggregator
from residence_ballot.services.projects import get_project

logger = logging.getLogger(__name__)

# Window for the "recent votes" figure of candidate statistics.
RECENT_WINDOW = timedelta(hours=24)


def _snapshot(db: Session, project_id: str) -> ResultSnapshot:
    return VoteAggregator(ProjectStore(db), VoteStore(db)).compute_results(project_id)


def _leaderboard(snapshot: ResultSnapshot) -> list[CandidateResultOut]:
    return [CandidateResultOut.model_validate(asdict(c)) for c in snapshot.candidates]


def generate_report(
    db: Session,
    project_id: str,
    *,
    generated_by: User,
    clock: Clock,
    notes: str | None = None,
    include_voter_details: bool = False,
) -> ReportResponse:
    """Build a report of a project's current standing and record that it was made.

    Votes are listed oldest first. Voter identity is attached only when
    ``include_voter_details`` is set; the chosen candidate is never listed.

    Raises:
        ProjectNotFoundError: If the project does not exist.
        ConfigurationError: If the project's results cannot be computed.
        StorageError: If the report record cannot be written.
    """
    project = get_project(db, project_id)
    snapshot = _snapshot(db, project_id)
    now = clock.now()

    rows = db.execute(
        select(Vote, User)
        .join(User, User.id == Vote.user_id)
        .where(Vote.project_id == project_id)
        .order_by(Vote.timestamp, Vote.id)
    ).all()
    votes = []
    for vote, voter in rows:
        details = {}
        if include_voter_details:
            details = {
                "voter_name": voter.name,
                "apartment_unit": voter.apartment_unit,
                "apartment_size": voter.apartment_size,
            }
        votes.append(
            ReportVote(
                vote_time=as_utc(vote.timestamp),
                device_info=vote.user_agent,
                location=vote.location,
                **details,
            )
        )

    total_candidates = db.execute(
        select(func.count()).select_from(Candidate).where(Candidate.project_id == project_id)
    ).scalar_one()

    report = Report(
        project_id=project_id,
        generated_by=generated_by.id,
        notes=notes,
        include_voter_details=include_voter_details,
        created_at=now,
    )
    db.add(report)
    try:
        db.commit()
    except SQLAlchemyError as err:
        db.rollback()
        logger.error("Failed to record report for project %s", project_id, exc_info=True)
        raise StorageError("Could not record report") from err

    logger.info(
        "Report generated: project=%s report=%s by=%s votes=%d voter_details=%s",
        project_id,
        report.id,
        generated_by.id,
        len(votes),
        include_voter_details,
    )
    return ReportResponse(
        report_id=report.id,
        project=ReportProject(
            id=project.id,
            title=project.title,
            description=project.description,
            voting_type=project.voting_type,
            voting_method=project.voting_method,
            start_date=as_utc(project.start_date),
            end_date=as_utc(project.end_date),
            is_active=project.is_active,
            status=project.status_at(now),
            total_votes=snapshot.total_votes,
            total_candidates=total_candidates,
        ),
        candidates=_leaderboard(snapshot),
        winner_id=snapshot.winner_id,
        votes=votes,
        generated_at=now,
        generated_by=generated_by.id,
        notes=notes or "",
    )


def list_reports(db: Session, project_id: str) -> list[Report]:
    """Return a project's report records, newest first."""
    get_project(db, project_id)
    return list(
        db.execute(
            select(Report)
            .where(Report.project_id == project_id)
            .order_by(Report.created_at.desc(), Report.id)
        ).scalars()
    )


def candidate_stats(db: Session, user: User, project_id: str, clock: Clock) -> CandidateStats:
    """Return the standing of ``user``'s candidacy in a project.

    Raises:
        ProjectNotFoundError: If the project does not exist.
        CandidateNotFoundError: If ``user`` does not stand in the project.
    """
    get_project(db, project_id)
    candidate = db.execute(
        select(Candidate).where(
            Candidate.project_id == project_id,
            Candidate.user_id == user.id,
        )
    ).scalars().first()
    if candidate is None:
        raise CandidateNotFoundError("Candidate not found for this project")

    snapshot = _snapshot(db, project_id)
    position = None
    own = None
    for rank, result in enumerate(snapshot.candidates, start=1):
        if result.id == candidate.id:
            position, own = rank, result
            break

    recent_votes = db.execute(
        select(func.count())
        .select_from(Vote)
        .where(
            Vote.candidate_id == candidate.id,
            Vote.timestamp >= clock.now() - RECENT_WINDOW,
        )
    ).scalar_one()

    return CandidateStats(
        candidate_id=candidate.id,
        raw_votes=own.raw_votes if own else 0,
        weighted_votes=own.weighted_votes if own else 0.0,
        percentage=own.percentage if own else 0.0,
        position=position,
        total_candidates=len(snapshot.candidates),
        recent_votes=recent_votes,
        leaderboard=_leaderboard(snapshot),
    )
