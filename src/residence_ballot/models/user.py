# src/residence_ballot/models/user.py
"""SQLAlchemy models for residents and staff accounts."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from sqlalchemy import Boolean, DateTime, Float, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from residence_ballot.db.session import Base
from residence_ballot.db.time import utcnow
from residence_ballot.models.base import new_id


class UserRole(StrEnum):
    """Roles recognised by the voting service."""

    SUPERADMIN = "SUPERADMIN"
    COMMITTEE = "COMMITTEE"
    SUPERVISOR = "SUPERVISOR"
    AUDITOR = "AUDITOR"
    CANDIDATE = "CANDIDATE"
    VOTER = "VOTER"


# Roles counted as eligible voters when computing quorum.
VOTING_ROLES = (UserRole.VOTER, UserRole.CANDIDATE, UserRole.COMMITTEE)

# Roles allowed to manage projects and candidates.
STAFF_ROLES = (UserRole.SUPERADMIN, UserRole.COMMITTEE)

# Roles allowed to generate and read project reports.
REPORT_ROLES = (*STAFF_ROLES, UserRole.SUPERVISOR, UserRole.AUDITOR)


class User(Base):
    """A resident or staff member of the community."""

    __tablename__ = "app_user"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    name: Mapped[str | None] = mapped_column(Text, nullable=True)
    role: Mapped[str] = mapped_column(String(16), nullable=False, default=UserRole.VOTER)
    apartment_unit: Mapped[str | None] = mapped_column(String(32), nullable=True)
    # Square metres; the vote weight for size-weighted projects.
    apartment_size: Mapped[float | None] = mapped_column(Float, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    def has_role(self, *roles: str) -> bool:
        """Return True if the user holds one of ``roles``."""
        return self.role in roles
