"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .project import (
    CandidateCreate,
    CandidateResponse,
    ProjectCreate,
    ProjectResponse,
    ProjectUpdate,
    ReviewRequest,
    VotingMethodInfo,
)
from .report import (
    CandidateStats,
    ReportProject,
    ReportRecord,
    ReportRequest,
    ReportResponse,
    ReportVote,
)
from .results import CandidateResultOut, ResultsResponse, ResultsSummaryOut
from .vote import (
    RevokeReceipt,
    VoteCheck,
    VoteCreate,
    VoteHistoryEntry,
    VoteReceipt,
    VoteRevoke,
)

__all__ = [
    "CandidateCreate", "CandidateResponse",
    "ProjectCreate", "ProjectResponse", "ProjectUpdate",
    "ReviewRequest", "VotingMethodInfo",
    "CandidateResultOut", "ResultsResponse", "ResultsSummaryOut",
    "CandidateStats", "ReportProject", "ReportRecord", "ReportRequest",
    "ReportResponse", "ReportVote",
    "RevokeReceipt", "VoteCheck", "VoteCreate", "VoteHistoryEntry",
    "VoteReceipt", "VoteRevoke",
]
