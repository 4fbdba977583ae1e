"""ORM model for application users (registration and login)."""

from sqlalchemy import Column, String

from app.models.base import Base, new_id


class User(Base):
    """
    Registered user. username is unique (case-sensitive); password_hash is a
    bcrypt string and is never serialized in responses.
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    username = Column(String(32), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
