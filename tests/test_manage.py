# tests/test_manage.py
"""Tests for the operator CLI."""

import json

from residence_ballot.core.security import decode_access_token
from residence_ballot.scripts import manage


def test_token_command(capsys) -> None:
    assert manage.main(["token", "user-123"]) == 0

    token = capsys.readouterr().out.strip()
    assert decode_access_token(token)["sub"] == "user-123"


def test_create_user(db_session) -> None:
    user = manage.create_user(
        db_session,
        email="owner@example.test",
        name="Owner",
        role="COMMITTEE",
        apartment_unit="B-12",
        apartment_size=96.5,
    )

    assert user.id
    assert user.role == "COMMITTEE"
    assert user.apartment_size == 96.5


def test_results_json(db_session, project_with_candidates, add_votes) -> None:
    alice = project_with_candidates["candidates"][0]
    add_votes(alice, [1.0])

    data = json.loads(manage.results_json(db_session, project_with_candidates["project"].id))

    assert data["winner_id"] == alice.id
    assert data["candidates"][0]["percentage"] == 100.0


def test_parser_requires_command() -> None:
    parser = manage.build_parser()
    args = parser.parse_args(["results", "p1"])
    assert args.command == "results"
    assert args.project_id == "p1"
