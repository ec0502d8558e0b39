# src/residence_ballot/models/vote.py
"""Models capturing cast votes."""

from datetime import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    DateTime,
    Float,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from residence_ballot.db.session import Base
from residence_ballot.db.time import utcnow
from residence_ballot.models.base import new_id


class Vote(Base):
    """A live vote by one user for one candidate of one project.

    Rows are inserted on cast and deleted on revoke; never updated.
    """

    __tablename__ = "vote"
    __table_args__ = (
        # At most one live vote per user and project.
        UniqueConstraint("user_id", "project_id", name="uq_vote_user_project"),
        Index("ix_vote_project_id", "project_id"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    project_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("voting_project.id", ondelete="CASCADE"),
        nullable=False,
    )
    candidate_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("candidate.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("app_user.id"),
        nullable=False,
    )

    # Captured at cast time: 1.0 or the voter's apartment size.
    weight: Mapped[float] = mapped_column(Float, nullable=False, default=1.0)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    location: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(Text, nullable=True)
