# src/residence_ballot/models/candidate.py
"""SQLAlchemy models for project candidates."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, Boolean, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from residence_ballot.db.session import Base
from residence_ballot.db.time import utcnow
from residence_ballot.models.base import new_id

if TYPE_CHECKING:
    from residence_ballot.models.project import VotingProject


class Candidate(Base):
    """A choice on a project's ballot. Belongs to exactly one project."""

    __tablename__ = "candidate"
    __table_args__ = (Index("ix_candidate_project_id", "project_id"),)

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    project_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("voting_project.id", ondelete="CASCADE"),
        nullable=False,
    )
    # Resident standing as the candidate; empty for policy options.
    user_id: Mapped[str | None] = mapped_column(
        String(32),
        ForeignKey("app_user.id"),
        nullable=True,
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    vision: Mapped[str | None] = mapped_column(Text, nullable=True)
    mission: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    # Strictly increasing creation sequence; breaks ties between equal tallies.
    order_index: Mapped[int] = mapped_column(BigInteger, nullable=False, unique=True)

    project: Mapped[VotingProject] = relationship("VotingProject", back_populates="candidates")
