# src/residence_ballot/api/v1/endpoints/reports.py
"""Project report and candidate statistics endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from residence_ballot.api.v1.dependencies import (
    ClockDep,
    CurrentUserDep,
    SessionDep,
    require_roles,
)
from residence_ballot.models import User
from residence_ballot.models.user import REPORT_ROLES
from residence_ballot.schemas.report import (
    CandidateStats,
    ReportRecord,
    ReportRequest,
    ReportResponse,
)
from residence_ballot.services import reports as report_service

router = APIRouter(prefix="/projects", tags=["reports"])
ReporterDep = Annotated[User, Depends(require_roles(*REPORT_ROLES))]


@router.post(
    "/{project_id}/reports",
    response_model=ReportResponse,
    status_code=status.HTTP_201_CREATED,
)
async def generate_report(
    project_id: str,
    payload: ReportRequest,
    reporter: ReporterDep,
    db: SessionDep,
    clock: ClockDep,
) -> ReportResponse:
    """Generate a report of the project's current tally and votes."""
    return report_service.generate_report(
        db,
        project_id,
        generated_by=reporter,
        clock=clock,
        notes=payload.notes,
        include_voter_details=payload.include_voter_details,
    )


@router.get("/{project_id}/reports", response_model=list[ReportRecord])
async def list_reports(
    project_id: str,
    _reporter: ReporterDep,
    db: SessionDep,
) -> list[ReportRecord]:
    """List the reports generated for a project."""
    return [
        ReportRecord.model_validate(report)
        for report in report_service.list_reports(db, project_id)
    ]


@router.get("/{project_id}/candidates/me/stats", response_model=CandidateStats)
async def get_candidate_stats(
    project_id: str,
    current_user: CurrentUserDep,
    db: SessionDep,
    clock: ClockDep,
) -> CandidateStats:
    """Report the caller's standing as a candidate in a project."""
    return report_service.candidate_stats(db, current_user, project_id, clock)
