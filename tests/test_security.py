"""Unit tests for app.core.security: bcrypt hashing, JWT issue/verify and bearer-header resolution."""

import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import patch

import jwt

from app.core.errors import AuthError, AuthFailure, HashingFailure
from app.core.security import PasswordHasher, TokenService, resolve_identity
from app.schemas.auth import CurrentUser
from tests.support import TEST_SECRET, make_hasher, make_tokens


class TestPasswordHasher(unittest.TestCase):
    """hash/verify round trip, mismatch handling and failure modes."""

    def setUp(self) -> None:
        self.hasher = make_hasher()

    def test_verify_accepts_original_password(self) -> None:
        for password in ("secret1", "abcd", "pässwörd-ünïcode", "x" * 128):
            hashed = self.hasher.hash(password)
            self.assertTrue(self.hasher.verify(password, hashed), password)

    def test_verify_rejects_other_password(self) -> None:
        hashed = self.hasher.hash("secret1")
        self.assertFalse(self.hasher.verify("secret2", hashed))
        self.assertFalse(self.hasher.verify("Secret1", hashed))
        self.assertFalse(self.hasher.verify("", hashed))

    def test_hash_is_salted(self) -> None:
        first = self.hasher.hash("secret1")
        second = self.hasher.hash("secret1")
        self.assertNotEqual(first, second)
        self.assertNotEqual(first, "secret1")

    def test_cost_factor_comes_from_constructor(self) -> None:
        hashed = PasswordHasher(rounds=5).hash("secret1")
        self.assertTrue(hashed.startswith("$2b$05$"))

    def test_invalid_cost_factor_raises_hashing_failure(self) -> None:
        with self.assertRaises(HashingFailure):
            PasswordHasher(rounds=3).hash("secret1")
        with self.assertRaises(HashingFailure):
            PasswordHasher(rounds=32).hash("secret1")

    def test_malformed_stored_hash_raises_hashing_failure(self) -> None:
        with self.assertRaises(HashingFailure):
            self.hasher.verify("secret1", "not-a-bcrypt-hash")

    def test_verify_dummy_always_false(self) -> None:
        self.assertFalse(self.hasher.verify_dummy("account-service-timing-dummy"))
        self.assertFalse(self.hasher.verify_dummy("anything"))


class TestTokenService(unittest.TestCase):
    """Issue then verify, tamper detection, expiry and malformed tokens."""

    def setUp(self) -> None:
        self.tokens = make_tokens()

    def test_issue_then_verify_returns_identity(self) -> None:
        token = self.tokens.issue("user-123", "alice1")
        self.assertEqual(self.tokens.verify(token), CurrentUser(id="user-123", username="alice1"))

    def test_claims_include_fixed_24h_expiry(self) -> None:
        now = datetime.now(UTC).replace(microsecond=0)
        token = self.tokens.issue("user-123", "alice1", now=now)
        payload = jwt.decode(token, TEST_SECRET, algorithms=["HS256"])
        self.assertEqual(payload["sub"], "user-123")
        self.assertEqual(payload["username"], "alice1")
        self.assertEqual(payload["exp"] - payload["iat"], 24 * 3600)

    def test_any_altered_character_is_invalid(self) -> None:
        token = self.tokens.issue("user-123", "alice1")
        for i, ch in enumerate(token):
            replacement = "A" if ch != "A" else "B"
            tampered = token[:i] + replacement + token[i + 1 :]
            with self.assertRaises(AuthError, msg=f"position {i}") as ctx:
                self.tokens.verify(tampered)
            self.assertEqual(ctx.exception.reason, AuthFailure.INVALID, f"position {i}")

    def test_truncated_token_is_invalid(self) -> None:
        token = self.tokens.issue("user-123", "alice1")
        for cut in (1, 10, len(token) // 2):
            with self.assertRaises(AuthError) as ctx:
                self.tokens.verify(token[:-cut])
            self.assertEqual(ctx.exception.reason, AuthFailure.INVALID)

    def test_expired_token(self) -> None:
        issued = datetime.now(UTC) - timedelta(hours=25)
        token = self.tokens.issue("user-123", "alice1", now=issued)
        with self.assertRaises(AuthError) as ctx:
            self.tokens.verify(token)
        self.assertEqual(ctx.exception.reason, AuthFailure.EXPIRED)
        self.assertEqual(ctx.exception.message, "Auth token expired")

    def test_token_just_inside_window_is_valid(self) -> None:
        issued = datetime.now(UTC) - timedelta(hours=23, minutes=59)
        token = self.tokens.issue("user-123", "alice1", now=issued)
        self.assertEqual(self.tokens.verify(token).username, "alice1")

    def test_token_valid_at_exact_expiry_and_expired_after(self) -> None:
        issued = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)
        token = self.tokens.issue("user-123", "alice1", now=issued)
        expires = issued + timedelta(hours=24)
        self.assertEqual(self.tokens.verify(token, now=expires).id, "user-123")
        with self.assertRaises(AuthError) as ctx:
            self.tokens.verify(token, now=expires + timedelta(seconds=1))
        self.assertEqual(ctx.exception.reason, AuthFailure.EXPIRED)

    def test_non_numeric_exp_is_invalid(self) -> None:
        now = datetime.now(UTC)
        token = jwt.encode(
            {"sub": "u1", "username": "alice1", "iat": now, "exp": "tomorrow"},
            TEST_SECRET,
            algorithm="HS256",
        )
        with self.assertRaises(AuthError) as ctx:
            self.tokens.verify(token)
        self.assertEqual(ctx.exception.reason, AuthFailure.INVALID)

    def test_expired_token_with_bad_signature_is_invalid(self) -> None:
        issued = datetime.now(UTC) - timedelta(hours=25)
        token = TokenService(secret="another-secret-key-0123456789abcdef").issue(
            "user-123", "alice1", now=issued
        )
        with self.assertRaises(AuthError) as ctx:
            self.tokens.verify(token)
        self.assertEqual(ctx.exception.reason, AuthFailure.INVALID)

    def test_token_signed_with_other_secret_is_invalid(self) -> None:
        token = TokenService(secret="another-secret-key-0123456789abcdef").issue("u1", "alice1")
        with self.assertRaises(AuthError) as ctx:
            self.tokens.verify(token)
        self.assertEqual(ctx.exception.reason, AuthFailure.INVALID)

    def test_unsigned_token_is_invalid(self) -> None:
        now = datetime.now(UTC)
        token = jwt.encode(
            {"sub": "u1", "username": "alice1", "iat": now, "exp": now + timedelta(hours=1)},
            None,
            algorithm="none",
        )
        with self.assertRaises(AuthError) as ctx:
            self.tokens.verify(token)
        self.assertEqual(ctx.exception.reason, AuthFailure.INVALID)

    def test_missing_username_claim_is_invalid(self) -> None:
        now = datetime.now(UTC)
        token = jwt.encode(
            {"sub": "u1", "iat": now, "exp": now + timedelta(hours=1)},
            TEST_SECRET,
            algorithm="HS256",
        )
        with self.assertRaises(AuthError) as ctx:
            self.tokens.verify(token)
        self.assertEqual(ctx.exception.reason, AuthFailure.INVALID)

    def test_garbage_is_invalid(self) -> None:
        for garbage in ("", "abc", "a.b.c", "....", "not a token at all"):
            with self.assertRaises(AuthError) as ctx:
                self.tokens.verify(garbage)
            self.assertEqual(ctx.exception.reason, AuthFailure.INVALID, garbage)

    def test_empty_secret_rejected(self) -> None:
        with self.assertRaises(ValueError):
            TokenService(secret="")


class TestResolveIdentity(unittest.TestCase):
    """Bearer header parsing in front of token verification."""

    def setUp(self) -> None:
        self.tokens = make_tokens()
        self.token = self.tokens.issue("user-123", "alice1")

    def _reason(self, header: str | None) -> AuthFailure:
        with self.assertRaises(AuthError) as ctx:
            resolve_identity(header, self.tokens)
        return ctx.exception.reason

    def test_valid_bearer_header(self) -> None:
        identity = resolve_identity(f"Bearer {self.token}", self.tokens)
        self.assertEqual(identity.id, "user-123")
        self.assertEqual(identity.username, "alice1")

    def test_scheme_is_case_insensitive(self) -> None:
        self.assertEqual(resolve_identity(f"bearer {self.token}", self.tokens).id, "user-123")

    def test_missing_header(self) -> None:
        self.assertEqual(self._reason(None), AuthFailure.MISSING_HEADER)
        self.assertEqual(self._reason(""), AuthFailure.MISSING_HEADER)

    def test_malformed_header(self) -> None:
        for header in (
            self.token,
            "Bearer",
            "Bearer ",
            "   ",
            " Bearer token",
            f"Token {self.token}",
            f"Basic {self.token}",
            f"Bearer {self.token} extra",
            f"Bearer  {self.token}",
        ):
            self.assertEqual(self._reason(header), AuthFailure.MALFORMED_HEADER, header)

    def test_verifier_failures_pass_through(self) -> None:
        expired = self.tokens.issue("u1", "alice1", now=datetime.now(UTC) - timedelta(days=2))
        self.assertEqual(self._reason(f"Bearer {expired}"), AuthFailure.EXPIRED)
        self.assertEqual(self._reason(f"Bearer {self.token[:-2]}"), AuthFailure.INVALID)

    def test_verifier_not_called_for_bad_header(self) -> None:
        with patch.object(self.tokens, "verify") as verify:
            self._reason("Token abc")
            self._reason(None)
        verify.assert_not_called()


if __name__ == "__main__":
    unittest.main()
