"""Domain exceptions raised by the ballot services.

Every exception carries the HTTP status code the API layer should answer
with, so request handlers never need to translate them one by one.
"""

from __future__ import annotations


class BallotError(RuntimeError):
    """Base exception for all ballot-related failures."""

    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ProjectNotFoundError(BallotError):
    """Raised when a voting project does not exist."""

    status_code = 404

    def __init__(self, project_id: str) -> None:
        super().__init__(f"Project not found: {project_id}")
        self.project_id = project_id


class CandidateNotFoundError(BallotError):
    """Raised when a candidate does not exist or is not part of the project."""

    status_code = 404


class ConfigurationError(BallotError):
    """Raised when a project is configured in a way results cannot be computed for."""

    status_code = 400


class StorageError(BallotError):
    """Raised when the database cannot be read or written.

    Transient: callers may retry.
    """

    status_code = 503


class VoteRejectedError(BallotError):
    """Raised when a user is not allowed to cast or revoke a vote."""

    status_code = 400


class ProjectStateError(BallotError):
    """Raised when a change conflicts with the project's lifecycle or review state."""

    status_code = 409


class PermissionDeniedError(BallotError):
    """Raised when the acting user lacks the required role."""

    status_code = 403
