"""Report and candidate statistics Pydantic schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from residence_ballot.schemas.results import CandidateResultOut


class ReportRequest(BaseModel):
    """Options for generating a project report."""

    notes: str | None = Field(None, max_length=2000)
    include_voter_details: bool = Field(
        False,
        description="Attach voter names and apartment details to each vote",
    )


class ReportProject(BaseModel):
    id: str
    title: str
    description: str | None
    voting_type: str
    voting_method: str
    start_date: datetime
    end_date: datetime
    is_active: bool
    status: str
    total_votes: int
    total_candidates: int


class ReportVote(BaseModel):
    """A vote as it appears in a report; never names the chosen candidate."""

    vote_time: datetime
    device_info: str | None = None
    location: dict[str, Any] | None = None
    voter_name: str | None = None
    apartment_unit: str | None = None
    apartment_size: float | None = None


class ReportResponse(BaseModel):
    report_id: str
    project: ReportProject
    candidates: list[CandidateResultOut]
    winner_id: str | None
    votes: list[ReportVote]
    generated_at: datetime
    generated_by: str
    notes: str


class ReportRecord(BaseModel):
    """A stored report record."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    project_id: str
    generated_by: str
    notes: str | None
    include_voter_details: bool
    created_at: datetime


class CandidateStats(BaseModel):
    """Standing of the caller's own candidacy in a project."""

    candidate_id: str
    raw_votes: int
    weighted_votes: float
    percentage: float
    position: int | None
    total_candidates: int
    recent_votes: int
    leaderboard: list[CandidateResultOut]
