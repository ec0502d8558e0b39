"""Vote-related Pydantic schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class VoteCreate(BaseModel):
    """Schema for casting a vote."""

    project_id: str
    candidate_id: str
    location: dict[str, Any] | None = Field(
        None,
        description="Optional geolocation captured by the client",
    )


class VoteRevoke(BaseModel):
    """Schema for revoking the caller's vote in a project."""

    project_id: str


class VoteReceipt(BaseModel):
    message: str
    vote_id: str


class RevokeReceipt(BaseModel):
    message: str
    revoked_vote_id: str


class VotedCandidate(BaseModel):
    id: str
    name: str


class VoteCheck(BaseModel):
    """Whether the caller holds a live vote in a project."""

    has_voted: bool
    vote_timestamp: datetime | None = None
    candidate: VotedCandidate | None = None
    vote_id: str | None = None


class VoteHistoryEntry(BaseModel):
    """One of the caller's live votes."""

    vote_id: str
    project_id: str
    project_title: str
    project_status: str
    candidate_id: str
    candidate_name: str
    weight: float
    timestamp: datetime
