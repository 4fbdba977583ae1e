"""Response envelope shared by every endpoint: {message, data?, errors?}."""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

DataT = TypeVar("DataT")


class FieldError(BaseModel):
    """One validation problem, located by dotted field path."""

    field: str = Field(description="Field path, e.g. confirmPassword or type")
    message: str


class ApiResponse(BaseModel, Generic[DataT]):
    """Envelope for success and error bodies. Unset data/errors are omitted."""

    message: str = "Success"
    data: DataT | None = None
    errors: list[FieldError] | None = None
