"""Column helpers shared by the ORM models."""

from uuid import uuid4


def new_id() -> str:
    """Return a fresh opaque identifier."""
    return uuid4().hex
