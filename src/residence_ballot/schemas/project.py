"""Project and candidate Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from residence_ballot.models import ApprovalStatus, VotingMethod, VotingType
from residence_ballot.services.lifecycle import ProjectStatus


class ProjectCreate(BaseModel):
    """Schema for creating a new voting project."""

    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    voting_type: VotingType = VotingType.HEAD_OF_APARTMENT
    voting_method: VotingMethod = VotingMethod.ONE_PERSON_ONE_VOTE
    total_area: float | None = Field(
        None,
        gt=0,
        description="Declared community area; required for WEIGHTED_BY_SIZE_MANUAL",
    )
    start_date: datetime
    end_date: datetime
    is_active: bool = False
    is_published: bool = False
    requires_supervisor_review: bool = False


class ProjectUpdate(BaseModel):
    """Schema for partially updating a voting project."""

    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    voting_type: VotingType | None = None
    voting_method: VotingMethod | None = None
    total_area: float | None = Field(None, gt=0)
    start_date: datetime | None = None
    end_date: datetime | None = None
    is_active: bool | None = None
    is_published: bool | None = None
    requires_supervisor_review: bool | None = None


class ProjectResponse(BaseModel):
    """Schema for project information returned by the API."""

    id: str
    title: str
    description: str | None
    voting_type: str
    voting_method: str
    total_area: float | None
    start_date: datetime
    end_date: datetime
    is_active: bool
    is_published: bool
    requires_supervisor_review: bool
    supervisor_approval_status: ApprovalStatus
    supervisor_comments: str | None = None
    status: ProjectStatus
    created_at: datetime
    candidate_count: int = 0
    vote_count: int = 0


class CandidateCreate(BaseModel):
    """Schema for adding a candidate to a project."""

    name: str = Field(..., min_length=1, max_length=200)
    user_id: str | None = None
    vision: str | None = None
    mission: str | None = None
    is_active: bool = True


class CandidateResponse(BaseModel):
    """Schema for candidate information returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    project_id: str
    user_id: str | None
    name: str
    vision: str | None
    mission: str | None
    is_active: bool
    order_index: int
    created_at: datetime


class ReviewRequest(BaseModel):
    """Supervisor decision on a project."""

    action: Literal["APPROVE", "REJECT"]
    comments: str | None = Field(None, max_length=2000)


class VotingMethodInfo(BaseModel):
    method: VotingMethod
    description: str
