# tests/test_project_service.py
"""Tests for project and candidate management."""

from datetime import timedelta

import pytest

from residence_ballot.core.errors import (
    ConfigurationError,
    ProjectNotFoundError,
    ProjectStateError,
)
from residence_ballot.models import ApprovalStatus, VotingMethod, VotingProject
from residence_ballot.schemas.project import CandidateCreate, ProjectCreate, ProjectUpdate
from residence_ballot.services import projects as project_service
from residence_ballot.services.lifecycle import ProjectStatus


def _payload(clock, **overrides) -> ProjectCreate:
    data = {
        "title": "Committee election",
        "start_date": clock.now() - timedelta(hours=1),
        "end_date": clock.now() + timedelta(days=7),
    }
    data.update(overrides)
    return ProjectCreate(**data)


def test_create_project(db_session, clock) -> None:
    project = project_service.create_project(
        db_session, _payload(clock, is_active=True, is_published=True), clock
    )

    assert db_session.get(VotingProject, project.id) is not None
    assert project.supervisor_approval_status == ApprovalStatus.PENDING
    assert project.status_at(clock.now()) is ProjectStatus.ACTIVE


def test_manual_method_requires_total_area(db_session, clock) -> None:
    with pytest.raises(ConfigurationError, match="total_area"):
        project_service.create_project(
            db_session,
            _payload(clock, voting_method=VotingMethod.WEIGHTED_BY_SIZE_MANUAL),
            clock,
        )


def test_end_must_follow_start(db_session, clock) -> None:
    with pytest.raises(ConfigurationError, match="end_date"):
        project_service.create_project(
            db_session,
            _payload(clock, end_date=clock.now() - timedelta(days=1)),
            clock,
        )


def test_review_gate_on_create(db_session, clock) -> None:
    with pytest.raises(ProjectStateError, match="supervisor approval"):
        project_service.create_project(
            db_session,
            _payload(clock, requires_supervisor_review=True, is_published=True),
            clock,
        )


def test_review_then_activate(db_session, clock, supervisor) -> None:
    project = project_service.create_project(
        db_session, _payload(clock, requires_supervisor_review=True), clock
    )

    with pytest.raises(ProjectStateError):
        project_service.update_project(db_session, project.id, ProjectUpdate(is_active=True))

    project_service.review_project(
        db_session,
        project.id,
        reviewer=supervisor,
        action="APPROVE",
        comments="Candidate list verified",
        clock=clock,
    )
    updated = project_service.update_project(
        db_session, project.id, ProjectUpdate(is_active=True, is_published=True)
    )

    assert updated.is_active and updated.is_published
    assert updated.supervisor_reviewed_by == supervisor.id
    assert updated.supervisor_comments == "Candidate list verified"


def test_reject_review(db_session, clock, supervisor, make_project) -> None:
    project = make_project(requires_supervisor_review=True, is_active=False, is_published=False)

    reviewed = project_service.review_project(
        db_session, project.id, reviewer=supervisor, action="REJECT", comments=None, clock=clock
    )

    assert reviewed.supervisor_approval_status == ApprovalStatus.REJECTED


def test_review_requires_flag(db_session, clock, supervisor, make_project) -> None:
    project = make_project()
    with pytest.raises(ProjectStateError, match="does not require"):
        project_service.review_project(
            db_session, project.id, reviewer=supervisor, action="APPROVE", comments=None, clock=clock
        )


def test_update_partial_fields(db_session, make_project) -> None:
    project = make_project()

    updated = project_service.update_project(
        db_session, project.id, ProjectUpdate(title="Renamed", description="Now with notes")
    )

    assert updated.title == "Renamed"
    assert updated.description == "Now with notes"
    assert updated.voting_method == VotingMethod.ONE_PERSON_ONE_VOTE


def test_switching_to_manual_needs_area(db_session, make_project) -> None:
    project = make_project()
    with pytest.raises(ConfigurationError):
        project_service.update_project(
            db_session,
            project.id,
            ProjectUpdate(voting_method=VotingMethod.WEIGHTED_BY_SIZE_MANUAL),
        )

    updated = project_service.update_project(
        db_session,
        project.id,
        ProjectUpdate(voting_method=VotingMethod.WEIGHTED_BY_SIZE_MANUAL, total_area=2400.0),
    )
    assert updated.total_area == 2400.0


def test_method_frozen_once_votes_exist(db_session, project_with_candidates, add_votes) -> None:
    project = project_with_candidates["project"]
    add_votes(project_with_candidates["candidates"][0], [1.0])

    with pytest.raises(ProjectStateError, match="Voting method"):
        project_service.update_project(
            db_session,
            project.id,
            ProjectUpdate(voting_method=VotingMethod.WEIGHTED_BY_SIZE_AUTO),
        )


def test_delete_project(db_session, project_with_candidates, add_votes, make_project) -> None:
    empty = make_project(title="Empty")
    project_service.delete_project(db_session, empty.id)
    assert db_session.get(VotingProject, empty.id) is None

    project = project_with_candidates["project"]
    add_votes(project_with_candidates["candidates"][0], [1.0])
    with pytest.raises(ProjectStateError, match="existing votes"):
        project_service.delete_project(db_session, project.id)


def test_list_projects_hides_unpublished(db_session, make_project, clock) -> None:
    older = make_project(title="Older", start_date=clock.now() - timedelta(days=10))
    newer = make_project(title="Newer")
    draft = make_project(title="Draft", is_published=False)

    published = project_service.list_projects(db_session)
    everything = project_service.list_projects(db_session, include_unpublished=True)

    assert [p.id for p in published] == [newer.id, older.id]
    assert {p.id for p in everything} == {older.id, newer.id, draft.id}


def test_add_candidate_assigns_creation_order(db_session, make_project, make_user, clock) -> None:
    project = make_project()
    resident = make_user()

    first = project_service.add_candidate(
        db_session, project.id, CandidateCreate(name="First", user_id=resident.id), clock
    )
    second = project_service.add_candidate(
        db_session, project.id, CandidateCreate(name="Second"), clock
    )

    assert second.order_index > first.order_index
    assert [c.id for c in project_service.list_candidates(db_session, project.id)] == [
        first.id,
        second.id,
    ]
    with pytest.raises(ProjectStateError, match="already a candidate"):
        project_service.add_candidate(
            db_session, project.id, CandidateCreate(name="Again", user_id=resident.id), clock
        )


def test_add_candidate_unknown_project(db_session, clock) -> None:
    with pytest.raises(ProjectNotFoundError):
        project_service.add_candidate(db_session, "missing", CandidateCreate(name="X"), clock)


def test_to_response_counts(db_session, project_with_candidates, add_votes, clock) -> None:
    project = project_with_candidates["project"]
    add_votes(project_with_candidates["candidates"][2], [1.0, 1.0])

    response = project_service.to_response(db_session, project, clock.now())

    assert response.candidate_count == 3
    assert response.vote_count == 2
    assert response.status is ProjectStatus.ACTIVE


def test_review_cannot_be_waived_before_approval(db_session, clock) -> None:
    project = project_service.create_project(
        db_session, _payload(clock, requires_supervisor_review=True), clock
    )

    with pytest.raises(ProjectStateError, match="waived"):
        project_service.update_project(
            db_session,
            project.id,
            ProjectUpdate(requires_supervisor_review=False, is_active=True, is_published=True),
        )

    db_session.refresh(project)
    assert not project.is_active
    assert not project.is_published
    assert project.requires_supervisor_review


def test_requiring_review_on_live_project_is_refused(db_session, clock) -> None:
    project = project_service.create_project(
        db_session, _payload(clock, is_active=True, is_published=True), clock
    )

    with pytest.raises(ProjectStateError, match="supervisor approval"):
        project_service.update_project(
            db_session, project.id, ProjectUpdate(requires_supervisor_review=True)
        )

    # Taking the project offline in the same update is allowed.
    updated = project_service.update_project(
        db_session,
        project.id,
        ProjectUpdate(requires_supervisor_review=True, is_active=False, is_published=False),
    )
    assert updated.requires_supervisor_review
    assert not updated.is_active and not updated.is_published


def test_review_can_be_dropped_after_approval(db_session, clock, supervisor) -> None:
    project = project_service.create_project(
        db_session, _payload(clock, requires_supervisor_review=True), clock
    )
    project_service.review_project(
        db_session, project.id, reviewer=supervisor, action="APPROVE", comments=None, clock=clock
    )

    updated = project_service.update_project(
        db_session,
        project.id,
        ProjectUpdate(requires_supervisor_review=False, is_active=True),
    )

    assert updated.is_active
    assert not updated.requires_supervisor_review


def test_visible_project_hides_unpublished(db_session, make_project, voter, admin) -> None:
    draft = make_project(is_published=False)

    with pytest.raises(ProjectNotFoundError):
        project_service.get_visible_project(db_session, draft.id, voter)
    with pytest.raises(ProjectNotFoundError):
        project_service.get_visible_project(db_session, draft.id, None)
    assert project_service.get_visible_project(db_session, draft.id, admin).id == draft.id
