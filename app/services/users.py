"""User registration and credential checks."""

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import InternalError
from app.core.security import PasswordHasher
from app.models import User
from app.services.results import RepositoryResult

logger = logging.getLogger(__name__)


def register_user(
    session: Session,
    hasher: PasswordHasher,
    username: str,
    password: str,
) -> RepositoryResult[User]:
    """
    Hash the password and insert a new user.

    Uniqueness is left to the users.username unique index: a concurrent or repeated
    registration surfaces as IntegrityError on commit and becomes CONFLICT, so at
    most one row ever exists per username. HashingFailure propagates unchanged.
    """
    user = User(username=username, password_hash=hasher.hash(password))
    session.add(user)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        logger.info("Registration rejected: username already taken (username=%s)", username)
        return RepositoryResult.conflict()
    except SQLAlchemyError:
        session.rollback()
        logger.exception("[ERR_AUTH_REGISTER] failed to persist new user")
        return RepositoryResult.internal_error()

    session.refresh(user)
    logger.info("User registered (user_id=%s)", user.id)
    return RepositoryResult.success(user)


def authenticate_user(
    session: Session,
    hasher: PasswordHasher,
    username: str,
    password: str,
) -> User | None:
    """Return the user when username and password match, else None.

    An unknown username still costs one bcrypt verification, so response time
    does not reveal which usernames exist.
    """
    try:
        user = session.query(User).filter(User.username == username).first()
    except SQLAlchemyError as e:
        logger.exception("[ERR_AUTH_LOGIN] failed to load user")
        raise InternalError(cause=e) from e

    if user is None:
        hasher.verify_dummy(password)
        return None
    if not hasher.verify(password, user.password_hash):
        return None
    return user
