"""
result.py — Success / Failure Variants for Core Operations

Purpose:
- Repository operations, validators and the authorization guard return a
  Result instead of raising: either Ok(value) or Err(ServiceError).
- Callers inspect `.ok`, or call `.unwrap()` to get the value or raise the
  carried ServiceError (routes do this and let the exception handlers
  render the response).

Example:
    result = repo.get("testuser")
    if result.ok:
        user = result.value
    else:
        log(result.error.kind)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, NoReturn, TypeVar, Union

from app.core.errors import ServiceError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    error: ServiceError

    @property
    def ok(self) -> bool:
        return False

    @property
    def kind(self):
        return self.error.kind

    def unwrap(self) -> NoReturn:
        raise self.error


Result = Union[Ok[T], Err]
