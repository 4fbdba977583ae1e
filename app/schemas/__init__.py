"""Pydantic request/response schemas."""

from app.schemas.account import (
    AccountCreate,
    AccountResponse,
    AccountType,
    AccountUpdate,
)
from app.schemas.auth import (
    CurrentUser,
    LoginRequest,
    RegisterRequest,
    TokenData,
)
from app.schemas.common import ApiResponse, FieldError
from app.schemas.health import HealthResponse

__all__ = [
    "AccountCreate",
    "AccountResponse",
    "AccountType",
    "AccountUpdate",
    "ApiResponse",
    "CurrentUser",
    "FieldError",
    "HealthResponse",
    "LoginRequest",
    "RegisterRequest",
    "TokenData",
]
