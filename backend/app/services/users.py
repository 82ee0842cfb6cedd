"""
users.py — User Data Access & Authentication

Purpose:
- Authenticate users by username/password.
- Register users (usernames are unique; storage's unique constraint is the real guard).
- Read a user together with their favorited property ids.
- Apply partial profile updates (passwords are re-hashed, never stored raw).
- Remove users, favorite and unfavorite properties.

Every public method returns a Result (Ok / Err) instead of raising:
- UNAUTHORIZED        bad username/password (same error either way)
- NOT_FOUND           no such user
- DUPLICATE_RESOURCE  username already taken
- BAD_REQUEST         empty or unknown update fields, out-of-range property ids
- STORAGE_UNAVAILABLE any other database fault (not retried)

Returned user dicts use the API's camelCase keys and never contain the hash.

This module does NOT:
- Check who is calling (see app/api/deps.py).
- Validate request bodies (see app/api/v1/*).
"""

from __future__ import annotations

import functools
from typing import Any, Callable, Dict, Mapping, Optional

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.database import Database, DatabaseNotOpenError
from app.core.errors import (
    bad_request,
    duplicate_resource,
    not_found,
    storage_unavailable,
    unauthorized,
)
from app.core.logging import get_logger
from app.core.result import Err, Ok, Result
from app.core.security import CredentialStore
from app.utils.sql import sql_for_partial_update

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid username/password"

# logical field → storage column, for fields whose names differ
USER_COLUMNS: Dict[str, str] = {
    "firstName": "first_name",
    "lastName": "last_name",
    "password": "password_hash",
}

UPDATABLE_FIELDS = ("firstName", "lastName", "password", "email")

# favorited_properties.property_zpid is a signed 64-bit column
MAX_ZPID = 2**63 - 1

PUBLIC_USER_COLUMNS = """username,
                         first_name AS "firstName",
                         last_name AS "lastName",
                         email"""


def _guard_storage(operation: Callable[..., Result]) -> Callable[..., Result]:
    """Turn database faults raised by `operation` into STORAGE_UNAVAILABLE errors."""

    @functools.wraps(operation)
    def wrapper(self, *args, **kwargs) -> Result:
        try:
            return operation(self, *args, **kwargs)
        except (SQLAlchemyError, DatabaseNotOpenError):
            logger.exception("Storage failure during %s", operation.__name__)
            return Err(storage_unavailable())

    return wrapper


def _check_zpid(property_zpid: int) -> Optional[Err]:
    if not 0 <= property_zpid <= MAX_ZPID:
        return Err(bad_request(f"Property id out of range: {property_zpid}"))
    return None


class UserRepository:
    def __init__(self, db: Database, credentials: CredentialStore) -> None:
        self._db = db
        self._credentials = credentials

    # ------------------------------------------------------------------ #
    # Internal lookups (run inside the caller's session)
    @staticmethod
    def _find_user_id(session: Session, username: str) -> Optional[int]:
        return session.execute(
            text("SELECT id FROM users WHERE username = :username"),
            {"username": username},
        ).scalar()

    @staticmethod
    def _fetch_public_user(session: Session, username: str) -> Optional[Dict[str, Any]]:
        row = session.execute(
            text(f"SELECT {PUBLIC_USER_COLUMNS} FROM users WHERE username = :username"),
            {"username": username},
        ).mappings().first()
        return dict(row) if row else None

    # ------------------------------------------------------------------ #
    @_guard_storage
    def authenticate(self, username: str, password: str) -> Result[Dict[str, Any]]:
        """
        Authenticate user with username, password.

        Returns Ok({username, firstName, lastName, email}), or
        Err(UNAUTHORIZED) if the user is not found or the password is wrong.
        """
        with self._db.session() as session:
            row = session.execute(
                text(
                    f"""SELECT {PUBLIC_USER_COLUMNS},
                               password_hash
                        FROM users
                        WHERE username = :username"""
                ),
                {"username": username},
            ).mappings().first()

        if row:
            user = dict(row)
            password_hash = user.pop("password_hash")
            if self._credentials.verify(password, password_hash):
                return Ok(user)

        logger.info("Failed authentication attempt for %r", username)
        return Err(unauthorized(INVALID_CREDENTIALS))

    @_guard_storage
    def register(
        self,
        username: str,
        password: str,
        first_name: str,
        last_name: str,
        email: str,
    ) -> Result[Dict[str, Any]]:
        """
        Register a user.

        Returns Ok({username, firstName, lastName, email}), or
        Err(DUPLICATE_RESOURCE) if the username is taken.
        """
        with self._db.session() as session:
            if self._find_user_id(session, username) is not None:
                return Err(duplicate_resource(f"Duplicate username: {username}"))

        hashed_password = self._credentials.hash(password)

        # the pre-check above can race; the unique index on username decides
        try:
            with self._db.session() as session:
                session.execute(
                    text(
                        """INSERT INTO users
                           (username, password_hash, first_name, last_name, email)
                           VALUES (:username, :password_hash, :first_name, :last_name, :email)"""
                    ),
                    {
                        "username": username,
                        "password_hash": hashed_password,
                        "first_name": first_name,
                        "last_name": last_name,
                        "email": email,
                    },
                )
                user = self._fetch_public_user(session, username)
        except IntegrityError:
            logger.info("Username %r taken concurrently", username)
            return Err(duplicate_resource(f"Duplicate username: {username}"))

        logger.info("Registered user %r", username)
        return Ok(user)

    @_guard_storage
    def get(self, username: str) -> Result[Dict[str, Any]]:
        """
        Given a username, return data about the user.

        Returns Ok({id, username, firstName, lastName, email, favoritedProperties})
        where favoritedProperties is [property_zpid, ...] in storage order.
        """
        with self._db.session() as session:
            row = session.execute(
                text(
                    f"""SELECT id,
                               {PUBLIC_USER_COLUMNS}
                        FROM users
                        WHERE username = :username"""
                ),
                {"username": username},
            ).mappings().first()

            if not row:
                return Err(not_found(f"No user: {username}"))

            user = dict(row)
            zpids = session.execute(
                text(
                    """SELECT props.property_zpid
                       FROM favorited_properties AS props
                       WHERE props.user_id = :user_id"""
                ),
                {"user_id": user["id"]},
            ).scalars().all()

        user["favoritedProperties"] = list(zpids)
        logger.debug("Loaded user %r with %d favorites", username, len(zpids))
        return Ok(user)

    @_guard_storage
    def update(self, username: str, data: Mapping[str, Any]) -> Result[Dict[str, Any]]:
        """
        Partial update: only fields present in `data` change.

        `data` can include: {firstName, lastName, password, email}.
        Returns Ok({username, firstName, lastName, email}).
        """
        unknown = [key for key in data if key not in UPDATABLE_FIELDS]
        if unknown:
            return Err(bad_request([f"Field cannot be updated: {key}" for key in unknown]))
        nulls = [key for key, value in data.items() if value is None]
        if nulls:
            return Err(bad_request([f"Field cannot be null: {key}" for key in nulls]))

        changes = dict(data)
        if "password" in changes:
            changes["password"] = self._credentials.hash(changes["password"])

        compiled = sql_for_partial_update(changes, USER_COLUMNS)
        if not compiled.ok:
            return compiled
        update = compiled.value

        params = update.params
        params["username"] = username
        with self._db.session() as session:
            result = session.execute(
                text(f"UPDATE users SET {update.set_cols} WHERE username = :username"),
                params,
            )
            if result.rowcount == 0:
                return Err(not_found(f"No user: {username}"))
            user = self._fetch_public_user(session, username)

        logger.info("Updated user %r (%s)", username, ", ".join(sorted(data)))
        return Ok(user)

    @_guard_storage
    def remove(self, username: str) -> Result[None]:
        """Delete the user (and, by cascade, their favorites)."""
        with self._db.session() as session:
            result = session.execute(
                text("DELETE FROM users WHERE username = :username"),
                {"username": username},
            )
            if result.rowcount == 0:
                return Err(not_found(f"No user: {username}"))

        logger.info("Removed user %r", username)
        return Ok(None)

    @_guard_storage
    def favorite_property(self, username: str, property_zpid: int) -> Result[None]:
        """Favorite a property. Favoriting the same property twice stores it twice."""
        invalid = _check_zpid(property_zpid)
        if invalid is not None:
            return invalid
        with self._db.session() as session:
            user_id = self._find_user_id(session, username)
            if user_id is None:
                return Err(not_found(f"No username: {username}"))

            session.execute(
                text(
                    """INSERT INTO favorited_properties (user_id, property_zpid)
                       VALUES (:user_id, :property_zpid)"""
                ),
                {"user_id": user_id, "property_zpid": property_zpid},
            )

        logger.info("User %r favorited property %s", username, property_zpid)
        return Ok(None)

    @_guard_storage
    def unfavorite_property(self, username: str, property_zpid: int) -> Result[None]:
        """Unfavorite a property. Unfavoriting something never favorited is a no-op."""
        invalid = _check_zpid(property_zpid)
        if invalid is not None:
            return invalid
        with self._db.session() as session:
            user_id = self._find_user_id(session, username)
            if user_id is None:
                return Err(not_found(f"No username: {username}"))

            result = session.execute(
                text(
                    """DELETE FROM favorited_properties
                       WHERE user_id = :user_id
                       AND property_zpid = :property_zpid"""
                ),
                {"user_id": user_id, "property_zpid": property_zpid},
            )

        logger.info(
            "User %r unfavorited property %s (%d rows)", username, property_zpid, result.rowcount
        )
        return Ok(None)

