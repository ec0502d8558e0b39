# src/residence_ballot/api/v1/endpoints/votes.py
"""Vote-related endpoints."""

from fastapi import APIRouter, Request, status

from residence_ballot.api.v1.dependencies import ClockDep, CurrentUserDep, SessionDep
from residence_ballot.db.time import as_utc
from residence_ballot.models import Candidate
from residence_ballot.schemas.vote import (
    RevokeReceipt,
    VoteCheck,
    VoteCreate,
    VoteHistoryEntry,
    VoteReceipt,
    VoteRevoke,
    VotedCandidate,
)
from residence_ballot.services import ballot

router = APIRouter(prefix="/votes", tags=["votes"])


def _client_ip(request: Request) -> str | None:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


@router.post("/", response_model=VoteReceipt, status_code=status.HTTP_201_CREATED)
async def cast_vote(
    payload: VoteCreate,
    request: Request,
    current_user: CurrentUserDep,
    db: SessionDep,
    clock: ClockDep,
) -> VoteReceipt:
    """Cast the caller's vote in a project."""
    vote = ballot.cast_vote(
        db,
        user=current_user,
        project_id=payload.project_id,
        candidate_id=payload.candidate_id,
        clock=clock,
        location=payload.location,
        ip_address=_client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )
    return VoteReceipt(message="Vote cast successfully", vote_id=vote.id)


@router.post("/revoke", response_model=RevokeReceipt)
async def revoke_vote(
    payload: VoteRevoke,
    current_user: CurrentUserDep,
    db: SessionDep,
    clock: ClockDep,
) -> RevokeReceipt:
    """Revoke the caller's vote while the voting window is open."""
    vote = ballot.revoke_vote(db, user=current_user, project_id=payload.project_id, clock=clock)
    return RevokeReceipt(message="Vote revoked successfully", revoked_vote_id=vote.id)


@router.get("/check", response_model=VoteCheck)
async def check_vote(
    project_id: str,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> VoteCheck:
    """Report whether the caller holds a vote in a project."""
    vote = ballot.get_user_vote(db, current_user, project_id)
    if vote is None:
        return VoteCheck(has_voted=False)
    candidate = db.get(Candidate, vote.candidate_id)
    return VoteCheck(
        has_voted=True,
        vote_timestamp=vote.timestamp,
        candidate=VotedCandidate(id=candidate.id, name=candidate.name) if candidate else None,
        vote_id=vote.id,
    )


@router.get("/history", response_model=list[VoteHistoryEntry])
async def get_voting_history(
    current_user: CurrentUserDep,
    db: SessionDep,
    clock: ClockDep,
) -> list[VoteHistoryEntry]:
    """List the caller's live votes across projects, newest first."""
    now = clock.now()
    return [
        VoteHistoryEntry(
            vote_id=vote.id,
            project_id=project.id,
            project_title=project.title,
            project_status=project.status_at(now),
            candidate_id=candidate.id,
            candidate_name=candidate.name,
            weight=vote.weight,
            timestamp=as_utc(vote.timestamp),
        )
        for vote, project, candidate in ballot.voting_history(db, current_user)
    ]
