"""Helpers shared by the storage and API tests."""

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.security import PasswordHasher, TokenService
from app.models import Base

TEST_SECRET = "test-secret-key-for-unit-tests-0123456789"

# Lowest cost bcrypt accepts; keeps the suite fast.
TEST_ROUNDS = 4


def make_session_factory() -> tuple[Engine, sessionmaker]:
    """Fresh in-memory SQLite database with all tables, shared across threads."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine, sessionmaker(bind=engine, autocommit=False, autoflush=False)


def make_hasher() -> PasswordHasher:
    return PasswordHasher(rounds=TEST_ROUNDS)


def make_tokens() -> TokenService:
    return TokenService(secret=TEST_SECRET)
