"""
security.py — Authentication Utilities (Password Hashing & Identity Tokens)

Purpose:
- Hash & verify passwords (never store raw passwords).
- Issue and verify JWT identity tokens.
- Resolve the identity of the current request from its Authorization header.

Key Constraints:
- The bcrypt work factor is a constructor argument of CredentialStore, never
  hardcoded; the app passes settings.BCRYPT_WORK_FACTOR (minimal in tests).
- A missing or invalid token means "anonymous" (None), not an error.
  Rejecting anonymous callers is the authorization guard's job (app/api/deps.py).

This module does NOT:
- Define API routes → app/api/v1/auth.py
- Query the database → app/services/users.py
"""

import datetime
from dataclasses import dataclass
from typing import Any, Dict, Optional

from fastapi import Request
from jose import JWTError, jwt  # `python-jose` library
from passlib.context import CryptContext  # password hashing

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)


# -----------------------------------------------------------------------------
# Password Hashing
# -----------------------------------------------------------------------------

class CredentialStore:
    """
    Salted bcrypt hashing with a configurable work factor.

    Example:
        credentials = CredentialStore(work_factor=12)
        hashed = credentials.hash("s3cret")
        credentials.verify("s3cret", hashed)  # True
    """

    def __init__(self, work_factor: int):
        self.work_factor = work_factor
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=work_factor,
        )

    def hash(self, raw_password: str) -> str:
        """
        Hash a plaintext password using bcrypt.
        """
        return self._context.hash(raw_password)

    def verify(self, raw_password: str, hashed_password: Optional[str]) -> bool:
        """
        Verify that a raw password matches its hashed stored version.

        Malformed or missing hashes verify as False.
        """
        if not hashed_password:
            return False
        try:
            return self._context.verify(raw_password, hashed_password)
        except ValueError:
            logger.warning("Stored password hash could not be parsed")
            return False


# -----------------------------------------------------------------------------
# JWT Token Handling
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Identity:
    """The authenticated caller, as decoded from an identity token."""
    username: str


def create_access_token(data: Dict[str, Any], expires_minutes: Optional[int] = None) -> str:
    """
    Create a JWT identity token with expiration.

    Expected payload format:
        data = {"username": "testuser"}

    Returns:
        Encoded JWT string.
    """
    to_encode = data.copy()
    now = datetime.datetime.now(datetime.timezone.utc)
    minutes = settings.JWT_EXPIRE_MINUTES if expires_minutes is None else expires_minutes
    to_encode.update({"iat": now, "exp": now + datetime.timedelta(minutes=minutes)})

    return jwt.encode(
        to_encode,
        settings.SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Decode and validate a JWT token.
    Returns the payload dict if valid, None if invalid or expired.
    """
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None


def identity_from_token(token: str) -> Optional[Identity]:
    payload = decode_token(token)
    if not payload:
        return None
    username = payload.get("username")
    if not isinstance(username, str) or not username:
        return None
    return Identity(username=username)


# -----------------------------------------------------------------------------
# Current Identity Dependency
# -----------------------------------------------------------------------------

def get_current_identity(request: Request) -> Optional[Identity]:
    """
    FastAPI dependency: the identity carried by `Authorization: Bearer <token>`.

    Flow:
    - Read the Authorization header (missing → anonymous).
    - Strip the "Bearer" scheme.
    - Verify the token signature/expiry and pull out `username`.
    """
    identity = None
    header = request.headers.get("authorization")
    if header:
        scheme, _, token = header.strip().partition(" ")
        if scheme.lower() == "bearer" and token:
            identity = identity_from_token(token.strip())
            if identity is None:
                logger.debug("Rejected identity token on %s %s", request.method, request.url.path)

    return identity
