# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import UTC, datetime, timedelta
from itertools import count
from typing import Any

import pytest

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")

from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from residence_ballot.core.clock import FixedClock, get_clock
from residence_ballot.core.security import create_access_token
from residence_ballot.db.session import Base
from residence_ballot.db.session import get_db as app_get_session
from residence_ballot.main import app as fastapi_app
from residence_ballot.models import (
    Candidate,
    User,
    UserRole,
    Vote,
    VotingMethod,
    VotingProject,
)
from residence_ballot.services.projects import next_candidate_order

TEST_DB_URL = "sqlite://"
NOW = datetime(2026, 5, 1, 12, 0, tzinfo=UTC)

_EMAIL_COUNTER = count(1)


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def clock() -> FixedClock:
    """Clock pinned to a fixed instant inside the default voting window."""
    return FixedClock(NOW)


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI,
    db_session: Session,
    clock: FixedClock,
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[get_clock] = lambda: clock
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)
        app.dependency_overrides.pop(get_clock, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


def auth_headers(user: User) -> dict[str, str]:
    """Return authorization headers for ``user``."""
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Factory persisting users with a given role and apartment size."""

    def _make(
        role: str = UserRole.VOTER,
        apartment_size: float | None = None,
        *,
        is_active: bool = True,
        name: str | None = None,
    ) -> User:
        n = next(_EMAIL_COUNTER)
        user = User(
            email=f"resident{n}@example.test",
            name=name or f"Resident {n}",
            role=role,
            apartment_unit=f"A-{n}",
            apartment_size=apartment_size,
            is_active=is_active,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make


@pytest.fixture()
def voter(make_user: Callable[..., User]) -> User:
    return make_user(UserRole.VOTER, apartment_size=80.0, name="Test Voter")


@pytest.fixture()
def admin(make_user: Callable[..., User]) -> User:
    return make_user(UserRole.SUPERADMIN, name="Test Admin")


@pytest.fixture()
def supervisor(make_user: Callable[..., User]) -> User:
    return make_user(UserRole.SUPERVISOR, name="Test Supervisor")


@pytest.fixture()
def make_project(db_session: Session, clock: FixedClock) -> Callable[..., VotingProject]:
    """Factory persisting projects whose window contains the test clock."""

    def _make(
        voting_method: str = VotingMethod.ONE_PERSON_ONE_VOTE,
        *,
        total_area: float | None = None,
        is_active: bool = True,
        is_published: bool = True,
        requires_supervisor_review: bool = False,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        title: str = "Head of apartment 2026",
    ) -> VotingProject:
        project = VotingProject(
            title=title,
            voting_method=voting_method,
            total_area=total_area,
            start_date=start_date or clock.now() - timedelta(days=1),
            end_date=end_date or clock.now() + timedelta(days=1),
            is_active=is_active,
            is_published=is_published,
            requires_supervisor_review=requires_supervisor_review,
        )
        db_session.add(project)
        db_session.commit()
        return project

    return _make


@pytest.fixture()
def make_candidate(db_session: Session) -> Callable[..., Candidate]:
    """Factory persisting candidates in creation order."""

    def _make(project: VotingProject, name: str, *, is_active: bool = True) -> Candidate:
        candidate = Candidate(
            project_id=project.id,
            name=name,
            is_active=is_active,
            order_index=next_candidate_order(db_session),
        )
        db_session.add(candidate)
        db_session.commit()
        return candidate

    return _make


@pytest.fixture()
def add_votes(
    db_session: Session,
    make_user: Callable[..., User],
) -> Callable[..., list[Vote]]:
    """Insert vote rows with explicit weights, one fresh voter per row."""

    def _add(candidate: Candidate, weights: list[float]) -> list[Vote]:
        votes = []
        for weight in weights:
            user = make_user(UserRole.VOTER, apartment_size=weight)
            vote = Vote(
                project_id=candidate.project_id,
                candidate_id=candidate.id,
                user_id=user.id,
                weight=weight,
            )
            db_session.add(vote)
            votes.append(vote)
        db_session.commit()
        return votes

    return _add


@pytest.fixture()
def project_with_candidates(
    make_project: Callable[..., VotingProject],
    make_candidate: Callable[..., Candidate],
) -> dict[str, Any]:
    """An open one-person-one-vote project with three candidates."""
    project = make_project()
    return {
        "project": project,
        "candidates": [
            make_candidate(project, "Alice"),
            make_candidate(project, "Bob"),
            make_candidate(project, "Carol"),
        ],
    }
