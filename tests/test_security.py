"""Unit tests for catalog.core.security: bcrypt hashing and JWT issue/verify."""

import unittest
from datetime import UTC, datetime, timedelta

import jwt

from catalog.core.authorization import Role
from catalog.core.config import settings
from catalog.core.security import (
    TokenError,
    TokenErrorKind,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from catalog.schemas.auth import CurrentUser

OTHER_SECRET = "another-secret-that-is-long-enough-for-hs256"


def _user(role: Role = Role.USER) -> CurrentUser:
    return CurrentUser(id=7, username="reader", role=role)


def _claims(**overrides: object) -> dict:
    now = datetime.now(UTC)
    claims = {
        "sub": "7",
        "username": "reader",
        "role": "USER",
        "iat": now,
        "exp": now + timedelta(minutes=5),
    }
    claims.update(overrides)
    return {k: v for k, v in claims.items() if v is not None}


class TestPasswordHashing(unittest.TestCase):
    def test_hashes_are_salted_and_both_verify(self) -> None:
        first = hash_password("correct horse")
        second = hash_password("correct horse")
        self.assertNotEqual(first, second)
        self.assertNotIn("correct horse", first)
        self.assertTrue(verify_password("correct horse", first))
        self.assertTrue(verify_password("correct horse", second))

    def test_wrong_password_does_not_verify(self) -> None:
        self.assertFalse(verify_password("wrong", hash_password("correct horse")))

    def test_malformed_digest_returns_false(self) -> None:
        for digest in ("", "not-a-bcrypt-hash", "$2b$04$short", None):
            with self.subTest(digest=digest):
                self.assertFalse(verify_password("anything", digest))


class TestAccessToken(unittest.TestCase):
    def test_round_trip_returns_subject_and_role(self) -> None:
        token = create_access_token(_user(Role.ADMIN))
        self.assertEqual(decode_access_token(token), CurrentUser(id=7, username="reader", role=Role.ADMIN))

    def test_default_lifetime_comes_from_settings(self) -> None:
        token = create_access_token(_user())
        payload = jwt.decode(token, options={"verify_signature": False})
        self.assertEqual(payload["exp"] - payload["iat"], settings.JWT_EXPIRE_MINUTES * 60)
        self.assertEqual(payload["sub"], "7")
        self.assertEqual(payload["role"], "USER")

    def test_past_expiry_is_expired(self) -> None:
        token = create_access_token(_user(), expires_delta=timedelta(seconds=-1))
        with self.assertRaises(TokenError) as ctx:
            decode_access_token(token)
        self.assertEqual(ctx.exception.kind, TokenErrorKind.EXPIRED)

    def test_foreign_signature_is_signature_invalid(self) -> None:
        token = jwt.encode(_claims(), OTHER_SECRET, algorithm="HS256")
        with self.assertRaises(TokenError) as ctx:
            decode_access_token(token)
        self.assertEqual(ctx.exception.kind, TokenErrorKind.SIGNATURE_INVALID)

    def test_garbage_is_malformed(self) -> None:
        for token in ("", "not.a.token", "abc"):
            with self.subTest(token=token):
                with self.assertRaises(TokenError) as ctx:
                    decode_access_token(token)
                self.assertEqual(ctx.exception.kind, TokenErrorKind.MALFORMED)

    def test_missing_claim_is_malformed(self) -> None:
        secret = settings.JWT_SECRET.get_secret_value()
        token = jwt.encode(_claims(username=None), secret, algorithm=settings.JWT_ALGORITHM)
        with self.assertRaises(TokenError) as ctx:
            decode_access_token(token)
        self.assertEqual(ctx.exception.kind, TokenErrorKind.MALFORMED)

    def test_unknown_role_is_malformed(self) -> None:
        secret = settings.JWT_SECRET.get_secret_value()
        token = jwt.encode(_claims(role="SUPERUSER"), secret, algorithm=settings.JWT_ALGORITHM)
        with self.assertRaises(TokenError) as ctx:
            decode_access_token(token)
        self.assertEqual(ctx.exception.kind, TokenErrorKind.MALFORMED)
