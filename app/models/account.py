"""ORM model for user-owned accounts."""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, Enum, ForeignKey, String

from app.models.base import Base, new_id
from app.schemas.account import AccountType


class Account(Base):
    """
    Account owned by exactly one user. owner_id is set at creation and never
    reassigned; every query against this table filters on it.
    """

    __tablename__ = "accounts"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(100), nullable=False)
    type = Column(Enum(AccountType, name="account_type"), nullable=False, index=True)
    owner_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
    )
