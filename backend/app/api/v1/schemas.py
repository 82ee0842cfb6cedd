"""
schemas.py — Request Body Schemas & Validators

Purpose:
- Describe the JSON bodies the users/auth routes accept (pydantic models).
- Validate raw bodies with plain functions that return Ok(model) or
  Err(BAD_REQUEST, [field messages]), so routes never see unchecked input.

Rules shared by all bodies:
- Unknown fields are rejected (extra="forbid").
- Strings must be JSON strings; numbers are not coerced (firstName: 42 fails).
"""

from typing import Annotated, Any, List, Optional, Type, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    StrictStr,
    StringConstraints,
    ValidationError,
    field_validator,
)

from app.core.errors import bad_request
from app.core.result import Err, Ok, Result

Username = Annotated[StrictStr, StringConstraints(min_length=1, max_length=30)]
Name = Annotated[StrictStr, StringConstraints(min_length=1, max_length=30)]
Password = Annotated[StrictStr, StringConstraints(min_length=5, max_length=20)]
Email = Annotated[
    StrictStr,
    StringConstraints(min_length=6, max_length=60, pattern=r"^[^@\s]+@[^@\s]+$"),
]

ModelT = TypeVar("ModelT", bound=BaseModel)


# -----------------------------------------------------------------------------
# Schemas
# -----------------------------------------------------------------------------

class UserAuth(BaseModel):
    """Body of POST /auth/token."""
    model_config = ConfigDict(extra="forbid")

    username: Username
    password: Annotated[StrictStr, StringConstraints(min_length=1)]


class UserRegister(BaseModel):
    """Body of POST /auth/register."""
    model_config = ConfigDict(extra="forbid")

    username: Username
    password: Password
    firstName: Name
    lastName: Name
    email: Email


class UserUpdate(BaseModel):
    """
    Body of PATCH /users/{username}. Every field is optional; at least one
    must be present for the update to do anything (the repository enforces that).
    A field that is sent must carry a string; null is rejected, not ignored.
    """
    model_config = ConfigDict(extra="forbid")

    firstName: Optional[Name] = None
    lastName: Optional[Name] = None
    password: Optional[Password] = None
    email: Optional[Email] = None

    @field_validator("firstName", "lastName", "password", "email", mode="before")
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("must not be null")
        return value

    def changes(self) -> dict:
        """Only the fields the client actually sent."""
        return self.model_dump(exclude_unset=True)


# -----------------------------------------------------------------------------
# Validators
# -----------------------------------------------------------------------------

def _error_messages(exc: ValidationError) -> List[str]:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        messages.append(f"{location}: {error['msg']}" if location else error["msg"])
    return messages


def _validate(schema: Type[ModelT], payload: Any) -> Result[ModelT]:
    try:
        return Ok(schema.model_validate(payload))
    except ValidationError as exc:
        return Err(bad_request(_error_messages(exc)))


def validate_user_auth(payload: Any) -> Result[UserAuth]:
    return _validate(UserAuth, payload)


def validate_user_register(payload: Any) -> Result[UserRegister]:
    return _validate(UserRegister, payload)


def validate_user_update(payload: Any) -> Result[UserUpdate]:
    return _validate(UserUpdate, payload)
