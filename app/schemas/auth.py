"""Request/response schemas for auth endpoints."""

import re

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

USERNAME_MIN_LEN = 4
USERNAME_MAX_LEN = 32
PASSWORD_MIN_LEN = 4
PASSWORD_MAX_LEN = 128

# At least one alphanumeric somewhere; other characters are allowed.
_ALPHANUMERIC = re.compile(r"[a-zA-Z0-9]")


def _check_username(value: str) -> str:
    if not _ALPHANUMERIC.search(value):
        raise PydanticCustomError(
            "username_alphanumeric",
            "Username must contain at least one alphanumeric character",
        )
    return value


class LoginRequest(BaseModel):
    """Credentials for login."""

    username: str = Field(
        ..., min_length=USERNAME_MIN_LEN, max_length=USERNAME_MAX_LEN, description="Username"
    )
    password: str = Field(
        ..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN, description="Password"
    )

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        return _check_username(v)


class RegisterRequest(LoginRequest):
    """New-user registration. confirmPassword must repeat password exactly."""

    model_config = ConfigDict(populate_by_name=True)

    confirm_password: str = Field(..., alias="confirmPassword", description="Repeat of password")

    @field_validator("confirm_password")
    @classmethod
    def validate_confirm_password(cls, v: str, info: ValidationInfo) -> str:
        # password is absent from info.data when it already failed its own checks
        password = info.data.get("password")
        if password is not None and v != password:
            raise PydanticCustomError("password_mismatch", "Confirm password must match")
        return v


class TokenData(BaseModel):
    """Signed bearer token returned by register and login."""

    model_config = ConfigDict(populate_by_name=True)

    auth_token: str = Field(..., alias="authToken", description="JWT bearer token")


class CurrentUser(BaseModel):
    """Authenticated identity resolved from a bearer token."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str
    username: str
