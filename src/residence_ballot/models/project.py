# src/residence_ballot/models/project.py
"""SQLAlchemy models for voting projects."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Float, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from residence_ballot.db.session import Base
from residence_ballot.db.time import utcnow
from residence_ballot.models.base import new_id

if TYPE_CHECKING:
    from residence_ballot.models.candidate import Candidate
    from residence_ballot.services.lifecycle import ProjectStatus


class VotingMethod(StrEnum):
    """Rule determining vote weight and the percentage denominator."""

    ONE_PERSON_ONE_VOTE = "ONE_PERSON_ONE_VOTE"
    WEIGHTED_BY_SIZE_AUTO = "WEIGHTED_BY_SIZE_AUTO"
    WEIGHTED_BY_SIZE_MANUAL = "WEIGHTED_BY_SIZE_MANUAL"


class VotingType(StrEnum):
    """What a project is deciding."""

    HEAD_OF_APARTMENT = "HEAD_OF_APARTMENT"
    POLICY = "POLICY"
    ACTION_PLAN = "ACTION_PLAN"
    SURVEY = "SURVEY"


class ApprovalStatus(StrEnum):
    """Supervisor review outcome."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class VotingProject(Base):
    """A single ballot: candidates, a voting window and a voting method.

    The lifecycle status is never stored; see ``status_at``.
    """

    __tablename__ = "voting_project"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    voting_type: Mapped[str] = mapped_column(
        String(32), nullable=False, default=VotingType.HEAD_OF_APARTMENT
    )
    # Kept as a plain string; values are validated when results are computed.
    voting_method: Mapped[str] = mapped_column(
        String(32), nullable=False, default=VotingMethod.ONE_PERSON_ONE_VOTE
    )
    # Declared community area; only used by WEIGHTED_BY_SIZE_MANUAL.
    total_area: Mapped[float | None] = mapped_column(Float, nullable=True)
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    requires_supervisor_review: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    supervisor_approval_status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=ApprovalStatus.PENDING
    )
    supervisor_comments: Mapped[str | None] = mapped_column(Text, nullable=True)
    supervisor_reviewed_by: Mapped[str | None] = mapped_column(String(32), nullable=True)
    supervisor_reviewed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    candidates: Mapped[list[Candidate]] = relationship(
        "Candidate",
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="Candidate.order_index",
    )

    def status_at(self, now: datetime) -> ProjectStatus:
        """Return the lifecycle status of this project at ``now``."""
        from residence_ballot.services.lifecycle import project_status

        return project_status(now, self.start_date, self.end_date, self.is_active)
