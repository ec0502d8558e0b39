# src/residence_ballot/scripts/manage.py
"""Operator commands for the configured database.

Usage:
    python -m residence_ballot.scripts.manage init-db
    python -m residence_ballot.scripts.manage create-user --email a@b.c --role VOTER --size 72
    python -m residence_ballot.scripts.manage token <user_id>
    python -m residence_ballot.scripts.manage results <project_id>
"""
from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Sequence

from sqlalchemy.orm import Session

from residence_ballot.core.errors import BallotError
from residence_ballot.core.logging import configure_logging
from residence_ballot.core.security import create_access_token
from residence_ballot.db.session import SessionLocal, create_tables
from residence_ballot.models import User, UserRole
from residence_ballot.repositories import ProjectStore, VoteStore
from residence_ballot.services.aggregator import VoteAggregator


def create_user(
    db: Session,
    *,
    email: str,
    name: str | None,
    role: str,
    apartment_unit: str | None,
    apartment_size: float | None,
) -> User:
    """Insert a user and return it."""
    user = User(
        email=email,
        name=name,
        role=UserRole(role),
        apartment_unit=apartment_unit,
        apartment_size=apartment_size,
    )
    db.add(user)
    db.commit()
    return user


def results_json(db: Session, project_id: str) -> str:
    """Return the result snapshot of a project as indented JSON."""
    snapshot = VoteAggregator(ProjectStore(db), VoteStore(db)).compute_results(project_id)
    return json.dumps(snapshot.to_dict(), indent=2)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage the Residence Ballot database")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="Create all tables.")

    user = sub.add_parser("create-user", help="Create a user account.")
    user.add_argument("--email", required=True)
    user.add_argument("--name", default=None)
    user.add_argument("--role", default=UserRole.VOTER, choices=[r.value for r in UserRole])
    user.add_argument("--unit", default=None, help="Apartment unit label")
    user.add_argument("--size", type=float, default=None, help="Apartment size in m2")

    token = sub.add_parser("token", help="Mint an access token for a user id.")
    token.add_argument("user_id")

    results = sub.add_parser("results", help="Print the current tally of a project.")
    results.add_argument("project_id")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()

    if args.command == "init-db":
        create_tables()
        print("[manage] tables created")
        return 0
    if args.command == "token":
        print(create_access_token(args.user_id))
        return 0

    db = SessionLocal()
    try:
        if args.command == "create-user":
            user = create_user(
                db,
                email=args.email,
                name=args.name,
                role=args.role,
                apartment_unit=args.unit,
                apartment_size=args.size,
            )
            print(user.id)
        else:
            print(results_json(db, args.project_id))
    except BallotError as exc:
        print(f"[manage] ERROR: {exc.message}", file=sys.stderr)
        return 1
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
