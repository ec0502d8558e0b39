"""Result snapshot Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel


class CandidateResultOut(BaseModel):
    id: str
    name: str
    raw_votes: int
    weighted_votes: float
    percentage: float


class ResultsSummaryOut(BaseModel):
    total_eligible_voters: int
    quorum_required: int
    has_quorum: bool
    is_completed: bool
    status: str
    voting_end_time: datetime


class ResultsResponse(BaseModel):
    """Tally of a project as returned by the results endpoint."""

    project_id: str
    voting_method: str
    voting_method_description: str
    voting_type: str
    voting_type_description: str
    candidates: list[CandidateResultOut]
    winner_id: str | None
    total_votes: int
    total_weighted_votes: float
    percentage_base: float
    summary: ResultsSummaryOut
