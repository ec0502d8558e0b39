# src/residence_ballot/api/v1/endpoints/results.py
"""Result snapshot endpoint."""

from fastapi import APIRouter

from residence_ballot.api.v1.dependencies import ClockDep, CurrentUserDep, SessionDep
from residence_ballot.core.settings import settings
from residence_ballot.repositories import ProjectStore, VoteStore
from residence_ballot.schemas.results import ResultsResponse
from residence_ballot.services.aggregator import VoteAggregator
from residence_ballot.services.projects import get_visible_project
from residence_ballot.services.results import (
    summarize_results,
    voting_method_description,
    voting_type_description,
)

router = APIRouter(prefix="/projects", tags=["results"])


@router.get("/{project_id}/results", response_model=ResultsResponse)
async def get_results(
    project_id: str,
    current_user: CurrentUserDep,
    db: SessionDep,
    clock: ClockDep,
) -> ResultsResponse:
    """Compute the current tally of a project."""
    project = get_visible_project(db, project_id, current_user)
    project_store = ProjectStore(db)
    snapshot = VoteAggregator(project_store, VoteStore(db)).compute_results(project_id)
    summary = summarize_results(
        snapshot,
        project,
        eligible_voters=project_store.count_eligible_voters(),
        now=clock.now(),
        quorum_ratio=settings.quorum_ratio,
    )
    return ResultsResponse.model_validate(
        {
            **snapshot.to_dict(),
            "voting_method_description": voting_method_description(snapshot.voting_method),
            "voting_type": project.voting_type,
            "voting_type_description": voting_type_description(project.voting_type),
            "summary": summary.to_dict(),
        }
    )
