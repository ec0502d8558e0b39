"""Read access to project configuration for result computation."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from residence_ballot.core.errors import ConfigurationError, StorageError
from residence_ballot.models import Candidate, User, Vote, VotingMethod, VotingProject
from residence_ballot.models.user import VOTING_ROLES

__all__ = ["CandidateEntry", "ProjectConfig", "ProjectStore"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CandidateEntry:
    """A candidate as seen by the aggregator."""

    id: str
    name: str
    order_index: int
    is_active: bool = True


@dataclass(frozen=True)
class ProjectConfig:
    """Voting configuration of one project."""

    project_id: str
    voting_method: VotingMethod
    total_area: float | None
    candidates: tuple[CandidateEntry, ...]


def parse_voting_method(value: str) -> VotingMethod:
    """Return the enum member for a stored method value.

    Raises:
        ConfigurationError: If ``value`` is not a known voting method.
    """
    try:
        return VotingMethod(value)
    except ValueError as err:
        raise ConfigurationError(f"Unknown voting method: {value!r}") from err


class ProjectStore:
    """Thin wrapper around database access for project configuration."""

    def __init__(self, session: Session) -> None:
        """Initialize the store with a SQLAlchemy session."""
        self.session = session

    def get_config(self, project_id: str) -> ProjectConfig | None:
        """Return the voting configuration for a project, or None if it does not exist.

        Candidates are the project's active candidates plus any inactive
        candidate still holding live votes, in creation order.
        """
        try:
            project = self.session.get(VotingProject, project_id)
            if project is None:
                return None
            with_votes = select(Vote.candidate_id).where(Vote.project_id == project_id)
            rows = self.session.execute(
                select(Candidate)
                .where(
                    Candidate.project_id == project_id,
                    or_(Candidate.is_active.is_(True), Candidate.id.in_(with_votes)),
                )
                .order_by(Candidate.order_index)
            ).scalars()
            candidates = tuple(
                CandidateEntry(
                    id=c.id,
                    name=c.name,
                    order_index=c.order_index,
                    is_active=c.is_active,
                )
                for c in rows
            )
        except SQLAlchemyError as err:
            logger.error("Failed to load project %s", project_id, exc_info=True)
            raise StorageError("Could not load project configuration") from err

        return ProjectConfig(
            project_id=project.id,
            voting_method=parse_voting_method(project.voting_method),
            total_area=project.total_area,
            candidates=candidates,
        )

    def count_eligible_voters(self) -> int:
        """Return the number of active users allowed to vote."""
        try:
            return self.session.execute(
                select(func.count())
                .select_from(User)
                .where(
                    User.is_active.is_(True),
                    User.role.in_([str(role) for role in VOTING_ROLES]),
                )
            ).scalar_one()
        except SQLAlchemyError as err:
            logger.error("Failed to count eligible voters", exc_info=True)
            raise StorageError("Could not count eligible voters") from err
