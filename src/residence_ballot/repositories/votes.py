"""Read access to cast votes for result computation."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from residence_ballot.core.errors import StorageError
from residence_ballot.models import Vote

__all__ = ["VoteRow", "VoteStore"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VoteRow:
    """The part of a vote the tally needs."""

    candidate_id: str
    weight: float


class VoteStore:
    """Thin wrapper around database access for vote rows."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def tallies_for(self, project_id: str) -> list[VoteRow]:
        """Return every live vote row for a project, in no particular order."""
        try:
            rows = self.session.execute(
                select(Vote.candidate_id, Vote.weight).where(Vote.project_id == project_id)
            ).all()
        except SQLAlchemyError as err:
            logger.error("Failed to load votes for project %s", project_id, exc_info=True)
            raise StorageError("Could not load votes") from err
        return [VoteRow(candidate_id=row.candidate_id, weight=float(row.weight)) for row in rows]
