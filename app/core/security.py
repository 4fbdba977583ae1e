"""Password hashing, JWT issuance/verification and bearer-header resolution.

Nothing in this module reads settings: the bcrypt cost factor and the signing
secret are passed in by the caller (see app.core.dependencies).
"""

import binascii
from datetime import UTC, datetime, timedelta
from functools import cached_property
from typing import Any

import bcrypt
import jwt
from jwt.utils import base64url_decode, base64url_encode

from app.core.errors import AuthError, AuthFailure, HashingFailure
from app.schemas.auth import CurrentUser

# Tokens carry a fixed lifetime; there is no refresh or revocation.
TOKEN_LIFETIME = timedelta(hours=24)

# bcrypt only looks at the first 72 bytes of the password.
BCRYPT_MAX_BYTES = 72

_DUMMY_PASSWORD = "account-service-timing-dummy"


def _encode_password(plain_password: str) -> bytes:
    return plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]


class PasswordHasher:
    """Salted bcrypt hashing with a caller-supplied cost factor."""

    def __init__(self, rounds: int) -> None:
        self.rounds = rounds

    def hash(self, plain_password: str) -> str:
        """Hash a plain-text password for storage. Raises HashingFailure if bcrypt cannot run."""
        try:
            salt = bcrypt.gensalt(rounds=self.rounds)
            return bcrypt.hashpw(_encode_password(plain_password), salt).decode("utf-8")
        except (ValueError, TypeError) as e:
            raise HashingFailure("[ERR_HASH_PWD] password hashing failed", cause=e) from e

    def verify(self, plain_password: str, hashed: str) -> bool:
        """
        Check a password against a stored hash with bcrypt's constant-time compare.
        A mismatch is False; only a malformed stored hash raises HashingFailure.
        """
        try:
            return bcrypt.checkpw(_encode_password(plain_password), hashed.encode("utf-8"))
        except (ValueError, TypeError) as e:
            raise HashingFailure("[ERR_HASH_PWD] stored password hash is malformed", cause=e) from e

    @cached_property
    def _dummy_hash(self) -> str:
        return self.hash(_DUMMY_PASSWORD)

    def verify_dummy(self, plain_password: str) -> bool:
        """Spend the same bcrypt work as a real check when there is no stored hash to compare."""
        self.verify(plain_password, self._dummy_hash)
        return False


def _has_canonical_signature(token: str) -> bool:
    # base64url leaves spare bits in the final character; re-encoding the
    # decoded signature must reproduce the segment byte for byte.
    segments = token.split(".")
    if len(segments) != 3:
        return False
    signature = segments[2]
    try:
        decoded = base64url_decode(signature)
    except (binascii.Error, ValueError):
        return False
    return base64url_encode(decoded) == signature.encode("utf-8")


class TokenService:
    """Issues and verifies HMAC-signed JWT identity assertions."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        lifetime: timedelta = TOKEN_LIFETIME,
    ) -> None:
        if not secret:
            raise ValueError("Token signing secret must be non-empty")
        self._secret = secret
        self.algorithm = algorithm
        self.lifetime = lifetime

    def issue(self, subject_id: str, username: str, now: datetime | None = None) -> str:
        """Create a signed token with sub, username, iat and exp = iat + lifetime."""
        issued_at = now or datetime.now(UTC)
        payload: dict[str, Any] = {
            "sub": str(subject_id),
            "username": username,
            "iat": issued_at,
            "exp": issued_at + self.lifetime,
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str, now: datetime | None = None) -> CurrentUser:
        """
        Check signature and structure, then expiry; return the embedded identity.
        Raises AuthError(EXPIRED) once now is past exp and AuthError(INVALID) for anything else.
        """
        if not _has_canonical_signature(token):
            raise AuthError(AuthFailure.INVALID)
        try:
            # PyJWT expires a token at exp itself; the check below allows it until now > exp.
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": ["sub", "iat", "exp"], "verify_exp": False},
            )
        except jwt.PyJWTError:
            raise AuthError(AuthFailure.INVALID) from None

        expires_at = payload["exp"]
        if isinstance(expires_at, bool) or not isinstance(expires_at, (int, float)):
            raise AuthError(AuthFailure.INVALID)
        if (now or datetime.now(UTC)).timestamp() > expires_at:
            raise AuthError(AuthFailure.EXPIRED)

        subject_id = payload.get("sub")
        username = payload.get("username")
        if not isinstance(subject_id, str) or not subject_id:
            raise AuthError(AuthFailure.INVALID)
        if not isinstance(username, str) or not username:
            raise AuthError(AuthFailure.INVALID)
        return CurrentUser(id=subject_id, username=username)


def resolve_identity(authorization: str | None, tokens: TokenService) -> CurrentUser:
    """
    Turn an Authorization header value into an identity.

    Missing header -> MISSING_HEADER; anything but "Bearer <token>" -> MALFORMED_HEADER;
    verifier failures (EXPIRED / INVALID) propagate unchanged.
    """
    if not authorization:
        raise AuthError(AuthFailure.MISSING_HEADER)
    scheme, separator, token = authorization.partition(" ")
    if (
        not separator
        or scheme.lower() != "bearer"
        or not token
        or any(ch.isspace() for ch in token)
    ):
        raise AuthError(AuthFailure.MALFORMED_HEADER)
    return tokens.verify(token)
