"""
deps.py — Request-Scoped Dependencies for API Routes

Purpose:
- Hand routes a UserRepository wired to the app's Database and CredentialStore.
- Guard per-user routes: only the user named in the path may act on it.

Authorization Rule:
- Self-match only. There is no admin role on User, so nobody may act on
  another user's account, whatever their token says.
"""

from typing import Optional

from fastapi import Depends, Request

from app.core.errors import unauthorized
from app.core.result import Err, Ok, Result
from app.core.security import Identity, get_current_identity
from app.services.users import UserRepository


# -----------------------------------------------------------------------------
# Repository
# -----------------------------------------------------------------------------

def get_user_repository(request: Request) -> UserRepository:
    """
    FastAPI dependency: a repository over the collaborators on `app.state`
    (set up by app.main.create_app).
    """
    state = request.app.state
    return UserRepository(state.db, state.credentials)


# -----------------------------------------------------------------------------
# Authorization Guard
# -----------------------------------------------------------------------------

def ensure_correct_user(identity: Optional[Identity], username: str) -> Result[Identity]:
    """
    Permit the request only if the authenticated identity is `username`.

    Anonymous callers (identity None) and any other user get Err(UNAUTHORIZED).
    """
    if identity is None or identity.username != username:
        return Err(unauthorized())
    return Ok(identity)


def require_correct_user(
    username: str,
    identity: Optional[Identity] = Depends(get_current_identity),
) -> Identity:
    """
    Route dependency form of ensure_correct_user.

    `username` is taken from the path, so this only fits routes with a
    `{username}` segment. Raises the UNAUTHORIZED ServiceError on mismatch.
    """
    return ensure_correct_user(identity, username).unwrap()
