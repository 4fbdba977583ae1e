"""Domain error taxonomy shared by the services and the HTTP layer."""

from collections.abc import Iterable
from enum import Enum
from typing import Any

# Leading location segments FastAPI adds to request validation errors.
_REQUEST_LOCATIONS = ("body", "query", "path", "header")


class ServiceError(Exception):
    """Base for errors that map to a client-facing status code and message."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


def field_errors(errors: Iterable[dict[str, Any]]) -> list[dict[str, str]]:
    """
    Flatten pydantic error dicts into ordered {field, message} pairs.

    The request location prefix (body, query, path) is dropped, so a body field
    reads as "confirmPassword" and a query parameter as "type". An error on the
    body as a whole, including a body that is not valid JSON, keeps "body".
    """
    out: list[dict[str, str]] = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ())]
        if err.get("type") == "json_invalid":
            # FastAPI locates JSON decode errors at ("body", <character offset>).
            field = "body"
        elif loc and loc[0] in _REQUEST_LOCATIONS:
            field = ".".join(loc[1:]) or loc[0]
        else:
            field = ".".join(loc) or "body"
        out.append({"field": field, "message": err.get("msg", "Invalid value")})
    return out


class ValidationFailed(ServiceError):
    """User-correctable input error reported against specific fields."""

    status_code = 400

    def __init__(
        self,
        message: str = "Invalid user input",
        errors: list[dict[str, str]] | None = None,
    ) -> None:
        self.errors = errors or []
        super().__init__(message)

    @classmethod
    def from_pydantic(cls, errors: Iterable[dict[str, Any]]) -> "ValidationFailed":
        return cls(errors=field_errors(errors))


class AuthFailure(str, Enum):
    """Why a request failed authentication."""

    MISSING_HEADER = "missing_header"
    MALFORMED_HEADER = "malformed_header"
    EXPIRED = "expired"
    INVALID = "invalid"


AUTH_FAILURE_MESSAGES: dict[AuthFailure, str] = {
    AuthFailure.MISSING_HEADER: "Authorization header must be provided",
    AuthFailure.MALFORMED_HEADER: "Format must be 'Bearer [token]'",
    AuthFailure.EXPIRED: "Auth token expired",
    AuthFailure.INVALID: "Error verifying auth token",
}


class AuthError(ServiceError):
    """Raised when a bearer credential is absent, malformed, expired or invalid."""

    status_code = 401

    def __init__(self, reason: AuthFailure) -> None:
        self.reason = reason
        super().__init__(AUTH_FAILURE_MESSAGES[reason])


class InvalidCredentialsError(ServiceError):
    """Login failed; the message never says whether the username exists."""

    status_code = 400

    def __init__(self, message: str = "Invalid username or password") -> None:
        super().__init__(message)


class NotFoundError(ServiceError):
    """Resource is absent or owned by someone else; callers cannot tell which."""

    status_code = 404


class ConflictError(ServiceError):
    """A uniqueness constraint rejected the write (duplicate username)."""

    status_code = 400


class InternalError(ServiceError):
    """Operator-facing failure; the client only sees a generic message."""

    status_code = 500

    def __init__(self, message: str = "Internal error", cause: Exception | None = None) -> None:
        self.cause = cause
        super().__init__(message)


class HashingFailure(InternalError):
    """bcrypt could not hash or verify (bad cost factor or malformed stored hash)."""
