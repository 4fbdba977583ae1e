"""FastAPI dependencies that build the credential and token services from settings."""

from functools import lru_cache

from app.core.config import get_settings
from app.core.security import PasswordHasher, TokenService


@lru_cache
def get_password_hasher() -> PasswordHasher:
    """Shared hasher; the cost factor is fixed at startup."""
    return PasswordHasher(rounds=get_settings().BCRYPT_ROUNDS)


@lru_cache
def get_token_service() -> TokenService:
    """Shared token service; the signing secret is fixed at startup."""
    settings = get_settings()
    return TokenService(
        secret=settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
    )
