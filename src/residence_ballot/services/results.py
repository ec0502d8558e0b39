"""Reporting helpers layered on top of a result snapshot."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from residence_ballot.db.time import as_utc
from residence_ballot.models import VotingMethod, VotingProject, VotingType
from residence_ballot.services.aggregator import ResultSnapshot
from residence_ballot.services.lifecycle import ProjectStatus

_METHOD_DESCRIPTIONS = {
    VotingMethod.ONE_PERSON_ONE_VOTE: (
        "One Person, One Vote - Each voter has equal voting power"
    ),
    VotingMethod.WEIGHTED_BY_SIZE_MANUAL: (
        "Weighted by Apartment Size (Manual Total) - Vote weight based on apartment size, "
        "total area manually set"
    ),
    VotingMethod.WEIGHTED_BY_SIZE_AUTO: (
        "Weighted by Apartment Size (Voters Total) - Vote weight based on apartment size, "
        "total area from participating voters"
    ),
}

_TYPE_DESCRIPTIONS = {
    VotingType.HEAD_OF_APARTMENT: "Head of Apartment Election",
    VotingType.POLICY: "Policy Voting",
    VotingType.ACTION_PLAN: "Action Plan Voting",
    VotingType.SURVEY: "Survey Voting",
}


def voting_method_description(method: str) -> str:
    try:
        return _METHOD_DESCRIPTIONS[VotingMethod(method)]
    except ValueError:
        return "Unknown voting method"


def voting_type_description(voting_type: str) -> str:
    try:
        return _TYPE_DESCRIPTIONS[VotingType(voting_type)]
    except ValueError:
        return "Unknown voting type"


@dataclass(frozen=True)
class ResultsSummary:
    """Participation metadata reported next to the tally."""

    total_eligible_voters: int
    quorum_required: int
    has_quorum: bool
    is_completed: bool
    status: ProjectStatus
    voting_end_time: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_eligible_voters": self.total_eligible_voters,
            "quorum_required": self.quorum_required,
            "has_quorum": self.has_quorum,
            "is_completed": self.is_completed,
            "status": str(self.status),
            "voting_end_time": self.voting_end_time.isoformat(),
        }


def summarize_results(
    snapshot: ResultSnapshot,
    project: VotingProject,
    *,
    eligible_voters: int,
    now: datetime,
    quorum_ratio: float,
) -> ResultsSummary:
    """Return quorum and completion metadata for a snapshot.

    Quorum is reached when the number of cast votes is at least
    ``ceil(eligible_voters * quorum_ratio)``.
    """
    quorum_required = math.ceil(eligible_voters * quorum_ratio)
    end = as_utc(project.end_date)
    return ResultsSummary(
        total_eligible_voters=eligible_voters,
        quorum_required=quorum_required,
        has_quorum=snapshot.total_votes >= quorum_required,
        is_completed=as_utc(now) > end,
        status=project.status_at(now),
        voting_end_time=end,
    )
