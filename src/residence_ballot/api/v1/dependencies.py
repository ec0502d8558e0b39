"""Shared API dependencies for authentication and common functionality."""

from collections.abc import Callable
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from residence_ballot.core.clock import Clock, get_clock
from residence_ballot.core.errors import PermissionDeniedError
from residence_ballot.core.security import decode_access_token
from residence_ballot.db.session import get_db
from residence_ballot.models import User

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer()

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]
ClockDep = Annotated[Clock, Depends(get_clock)]


def _credentials_error(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
    db: SessionDep,
) -> User:
    """Get the current authenticated user from JWT token.

    Args:
        credentials: HTTP Bearer token credentials
        db: Database session

    Returns:
        User object for the authenticated user

    Raises:
        HTTPException: If the token is invalid or the user is unknown or inactive
    """
    try:
        payload = decode_access_token(credentials.credentials)
    except JWTError as err:
        raise _credentials_error() from err

    subject = payload.get("sub")
    if not isinstance(subject, str):
        raise _credentials_error()

    user = db.get(User, subject)
    if user is None:
        raise _credentials_error("User not found")
    if not user.is_active:
        raise _credentials_error("User account is not active")
    return user


# Type alias for current user dependency
CurrentUserDep = Annotated[User, Depends(get_current_user)]


def require_roles(*roles: str) -> Callable[[User], User]:
    """Build a dependency that admits only users holding one of ``roles``."""

    def _dependency(current_user: CurrentUserDep) -> User:
        if not current_user.has_role(*roles):
            raise PermissionDeniedError("Insufficient role for this operation")
        return current_user

    return _dependency


optional_bearer_scheme = HTTPBearer(auto_error=False)


def get_optional_user(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(optional_bearer_scheme)
    ],
    db: SessionDep,
) -> User | None:
    """Return the authenticated user, or None for anonymous requests."""
    if credentials is None:
        return None
    return get_current_user(credentials, db)


OptionalUserDep = Annotated[User | None, Depends(get_optional_user)]
