"""Data access collaborators used by the service layer."""

from .projects import CandidateEntry, ProjectConfig, ProjectStore
from .votes import VoteRow, VoteStore

__all__ = ["CandidateEntry", "ProjectConfig", "ProjectStore", "VoteRow", "VoteStore"]
