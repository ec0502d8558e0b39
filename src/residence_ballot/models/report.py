# src/residence_ballot/models/report.py
"""SQLAlchemy model recording generated project reports."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from residence_ballot.db.session import Base
from residence_ballot.db.time import utcnow
from residence_ballot.models.base import new_id


class Report(Base):
    """Record that a report was generated for a project.

    Report contents are rebuilt from live votes on request and are not stored.
    """

    __tablename__ = "report"
    __table_args__ = (Index("ix_report_project_id", "project_id"),)

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    project_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("voting_project.id", ondelete="CASCADE"),
        nullable=False,
    )
    generated_by: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("app_user.id"),
        nullable=False,
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    include_voter_details: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
