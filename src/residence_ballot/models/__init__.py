"""SQLAlchemy models for the Residence Ballot application."""

from .candidate import Candidate
from .project import ApprovalStatus, VotingMethod, VotingProject, VotingType
from .report import Report
from .user import User, UserRole
from .vote import Vote

__all__ = [
    "Candidate",
    "ApprovalStatus", "VotingMethod", "VotingProject", "VotingType",
    "Report",
    "User", "UserRole",
    "Vote",
]
