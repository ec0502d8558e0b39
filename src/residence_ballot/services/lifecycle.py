"""Project lifecycle status derived from dates and the active flag."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import TYPE_CHECKING

from residence_ballot.db.time import as_utc

if TYPE_CHECKING:
    from residence_ballot.models import VotingProject


class ProjectStatus(StrEnum):
    UPCOMING = "UPCOMING"
    ACTIVE = "ACTIVE"
    ENDED = "ENDED"


def project_status(
    now: datetime,
    start_date: datetime,
    end_date: datetime,
    is_active: bool,
) -> ProjectStatus:
    """Return the status of a project at ``now``.

    A project past its end date is ENDED whether or not it was ever
    activated. An inactive project inside its window is still UPCOMING.
    """
    now, start, end = as_utc(now), as_utc(start_date), as_utc(end_date)
    if is_active and start <= now <= end:
        return ProjectStatus.ACTIVE
    if now > end:
        return ProjectStatus.ENDED
    return ProjectStatus.UPCOMING


def voting_window_open(now: datetime, project: VotingProject) -> bool:
    """Return True if ``now`` falls inside the project's voting window."""
    now = as_utc(now)
    return as_utc(project.start_date) <= now <= as_utc(project.end_date)
