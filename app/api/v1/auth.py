"""Registration, login and the bearer-token dependency (get_current_user)."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Header, Request
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.dependencies import get_password_hasher, get_token_service
from app.core.errors import ConflictError, InternalError, InvalidCredentialsError
from app.core.security import PasswordHasher, TokenService, resolve_identity
from app.schemas.auth import CurrentUser, LoginRequest, RegisterRequest, TokenData
from app.schemas.common import ApiResponse
from app.services.results import ResultStatus
from app.services.users import authenticate_user, register_user

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/register",
    response_model=ApiResponse[TokenData],
    response_model_exclude_none=True,
)
def register(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> ApiResponse[TokenData]:
    """
    Create a user and return a bearer token for it.
    A taken username is rejected with 400 and no second row is written.
    """
    result = register_user(db, hasher, body.username, body.password)
    if result.status is ResultStatus.CONFLICT:
        raise ConflictError("Username already taken")
    if not result.ok:
        raise InternalError("[ERR_AUTH_REGISTER] registration failed")

    user = result.value
    token = tokens.issue(subject_id=user.id, username=user.username)
    return ApiResponse[TokenData](
        message="Success register new user",
        data=TokenData(auth_token=token),
    )


@router.post(
    "/login",
    response_model=ApiResponse[TokenData],
    response_model_exclude_none=True,
)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> ApiResponse[TokenData]:
    """
    Authenticate with username and password; returns a JWT bearer token.
    Include the token in the Authorization header as: Bearer <authToken>
    """
    user = authenticate_user(db, hasher, body.username, body.password)
    if user is None:
        logger.info("Login failed (username=%s)", body.username)
        raise InvalidCredentialsError()

    token = tokens.issue(subject_id=user.id, username=user.username)
    return ApiResponse[TokenData](
        message="Success login",
        data=TokenData(auth_token=token),
    )


def get_current_user(
    request: Request,
    tokens: Annotated[TokenService, Depends(get_token_service)],
    authorization: Annotated[str | None, Header()] = None,
) -> CurrentUser:
    """
    Dependency: require a valid Bearer token and return its identity.

    The identity is also stored on request.state for the rest of this request only.
    Raises AuthError (401) when the header is missing, malformed, expired or invalid.
    """
    identity = resolve_identity(authorization, tokens)
    request.state.identity = identity
    return identity
