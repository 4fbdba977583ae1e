"""Pydantic schemas for ownership-scoped account CRUD."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

ACCOUNT_NAME_MIN_LEN = 1
ACCOUNT_NAME_MAX_LEN = 100


class AccountType(str, Enum):
    """Kinds of account a user can open."""

    CREDIT = "CREDIT"
    DEBIT = "DEBIT"
    LOAN = "LOAN"


class AccountCreate(BaseModel):
    """Body for POST /accounts. The owner always comes from the bearer token."""

    name: str = Field(
        ..., min_length=ACCOUNT_NAME_MIN_LEN, max_length=ACCOUNT_NAME_MAX_LEN, description="Account name"
    )
    type: AccountType = Field(..., description="CREDIT, DEBIT or LOAN")


class AccountUpdate(BaseModel):
    """Body for PATCH /accounts/{id}; omitted fields are left unchanged."""

    name: str | None = Field(
        default=None,
        min_length=ACCOUNT_NAME_MIN_LEN,
        max_length=ACCOUNT_NAME_MAX_LEN,
        description="New account name",
    )


class AccountResponse(BaseModel):
    """Account as returned to its owner."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    name: str
    type: AccountType
    owner_id: str = Field(..., alias="ownerId")
