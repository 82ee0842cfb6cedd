"""
errors.py — Error Taxonomy for the Users Backend

Purpose:
- Name every failure the core can produce (ErrorKind).
- Carry the kind, a client-facing message and the HTTP status together (ServiceError).
- Render errors in the JSON envelope clients receive:
      {"error": {"message": ..., "status": 404}}

The kind → status table lives here so routes never pick status codes themselves.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Union


class ErrorKind(str, Enum):
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    DUPLICATE_RESOURCE = "duplicate_resource"
    BAD_REQUEST = "bad_request"
    STORAGE_UNAVAILABLE = "storage_unavailable"


STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.DUPLICATE_RESOURCE: 400,
    ErrorKind.BAD_REQUEST: 400,
    ErrorKind.STORAGE_UNAVAILABLE: 500,
}

DEFAULT_MESSAGES: Dict[ErrorKind, str] = {
    ErrorKind.UNAUTHORIZED: "Unauthorized",
    ErrorKind.NOT_FOUND: "Not Found",
    ErrorKind.DUPLICATE_RESOURCE: "Duplicate resource",
    ErrorKind.BAD_REQUEST: "Bad Request",
    ErrorKind.STORAGE_UNAVAILABLE: "Internal Server Error",
}

Message = Union[str, List[str]]


class ServiceError(Exception):
    """
    A failure with a known kind.

    `message` is usually a string; schema validation failures carry a list of
    field-level messages instead.
    """

    def __init__(self, kind: ErrorKind, message: Optional[Message] = None):
        self.kind = kind
        self.message = message if message is not None else DEFAULT_MESSAGES[kind]
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]

    def to_dict(self) -> Dict[str, Any]:
        return {"error": {"message": self.message, "status": self.status_code}}

    def __repr__(self) -> str:
        return f"<ServiceError {self.kind.value}: {self.message!r}>"


# -----------------------------------------------------------------------------
# Shorthand constructors
# -----------------------------------------------------------------------------

def unauthorized(message: Optional[Message] = None) -> ServiceError:
    return ServiceError(ErrorKind.UNAUTHORIZED, message)


def not_found(message: Optional[Message] = None) -> ServiceError:
    return ServiceError(ErrorKind.NOT_FOUND, message)


def duplicate_resource(message: Optional[Message] = None) -> ServiceError:
    return ServiceError(ErrorKind.DUPLICATE_RESOURCE, message)


def bad_request(message: Optional[Message] = None) -> ServiceError:
    return ServiceError(ErrorKind.BAD_REQUEST, message)


def storage_unavailable(message: Optional[Message] = None) -> ServiceError:
    return ServiceError(ErrorKind.STORAGE_UNAVAILABLE, message)
