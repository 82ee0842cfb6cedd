"""
auth.py — Authentication Endpoints (API Layer)

Purpose:
- POST /auth/token     { username, password }                             → { token }
- POST /auth/register  { username, password, firstName, lastName, email } → { token }

Delegates password hashing/verification and storage to services/users.py,
and token encoding to core/security.py. This file should be thin.

Notes:
- Stateless JWT means logout is client-side only (delete the token).
- Bad credentials are always "Invalid username/password", whether or not
  the username exists.
"""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, status

from app.api.deps import get_user_repository
from app.api.v1.schemas import validate_user_auth, validate_user_register
from app.core.security import create_access_token
from app.services.users import UserRepository

router = APIRouter(
    prefix="/auth",
    tags=["auth"]
)


@router.post("/token")
def get_token(
    payload: Dict[str, Any] = Body(...),
    repo: UserRepository = Depends(get_user_repository),
):
    """
    POST /auth/token

    1. Validate the body.
    2. Authenticate username/password.
    3. Issue a token for the username.
    """
    credentials = validate_user_auth(payload).unwrap()
    user = repo.authenticate(credentials.username, credentials.password).unwrap()
    return {"token": create_access_token({"username": user["username"]})}


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(
    payload: Dict[str, Any] = Body(...),
    repo: UserRepository = Depends(get_user_repository),
):
    """
    POST /auth/register

    Registers the user and returns a token, so the client is logged in at once.
    """
    data = validate_user_register(payload).unwrap()
    user = repo.register(
        username=data.username,
        password=data.password,
        first_name=data.firstName,
        last_name=data.lastName,
        email=data.email,
    ).unwrap()
    return {"token": create_access_token({"username": user["username"]})}
