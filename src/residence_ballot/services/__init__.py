# src/residence_ballot/services/__init__.py
"""Business logic services for the Residence Ballot application."""

from .aggregator import CandidateResult, ResultSnapshot, VoteAggregator
from .lifecycle import ProjectStatus, project_status

__all__ = [
    "CandidateResult",
    "ResultSnapshot",
    "VoteAggregator",
    "ProjectStatus",
    "project_status",
]
