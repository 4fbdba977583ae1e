"""Account CRUD. Every route is scoped to the account owner taken from the bearer token."""

from typing import Annotated, TypeVar

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user
from app.core.database import get_db
from app.core.errors import InternalError, NotFoundError
from app.schemas.account import AccountCreate, AccountResponse, AccountType, AccountUpdate
from app.schemas.auth import CurrentUser
from app.schemas.common import ApiResponse
from app.services.accounts import AccountRepository
from app.services.results import RepositoryResult, ResultStatus

T = TypeVar("T")

NOT_FOUND_MESSAGE = "No account found"

router = APIRouter()


def get_account_repository(db: Annotated[Session, Depends(get_db)]) -> AccountRepository:
    return AccountRepository(db)


def _unwrap(result: RepositoryResult[T]) -> T:
    if result.status is ResultStatus.NOT_FOUND:
        raise NotFoundError(NOT_FOUND_MESSAGE)
    if not result.ok:
        raise InternalError("account repository returned " + result.status.value)
    return result.value


@router.post("", response_model=ApiResponse[AccountResponse], response_model_exclude_none=True)
def create_account(
    body: AccountCreate,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    repo: Annotated[AccountRepository, Depends(get_account_repository)],
) -> ApiResponse[AccountResponse]:
    """Open a new account owned by the caller."""
    account = _unwrap(repo.create_account(user.id, body.name, body.type))
    return ApiResponse[AccountResponse](
        message="Success create new account",
        data=AccountResponse.model_validate(account),
    )


@router.get("", response_model=ApiResponse[list[AccountResponse]], response_model_exclude_none=True)
def list_accounts(
    user: Annotated[CurrentUser, Depends(get_current_user)],
    repo: Annotated[AccountRepository, Depends(get_account_repository)],
    account_type: Annotated[AccountType | None, Query(alias="type")] = None,
) -> ApiResponse[list[AccountResponse]]:
    """List the caller's accounts, optionally filtered by type. 404 when there are none."""
    accounts = _unwrap(repo.list_accounts(user.id, account_type))
    return ApiResponse[list[AccountResponse]](
        message="Success get accounts",
        data=[AccountResponse.model_validate(a) for a in accounts],
    )


@router.patch(
    "/{account_id}",
    response_model=ApiResponse[AccountResponse],
    response_model_exclude_none=True,
)
def update_account(
    account_id: str,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    repo: Annotated[AccountRepository, Depends(get_account_repository)],
    body: AccountUpdate | None = None,
) -> ApiResponse[AccountResponse]:
    """Rename an owned account. A missing or empty body returns the account unchanged."""
    name = body.name if body is not None else None
    account = _unwrap(repo.update_account(user.id, account_id, name=name))
    return ApiResponse[AccountResponse](
        message="Success update account",
        data=AccountResponse.model_validate(account),
    )


@router.delete(
    "/{account_id}",
    response_model=ApiResponse[AccountResponse],
    response_model_exclude_none=True,
)
def delete_account(
    account_id: str,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    repo: Annotated[AccountRepository, Depends(get_account_repository)],
) -> ApiResponse[AccountResponse]:
    account = _unwrap(repo.delete_account(user.id, account_id))
    return ApiResponse[AccountResponse](
        message="Success delete account",
        data=AccountResponse.model_validate(account),
    )
