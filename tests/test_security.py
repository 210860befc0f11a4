"""Unit tests for app.core.security: password digests, Basic header parsing, JWT issue/validate."""

import base64
import unittest
from datetime import UTC, datetime, timedelta

import jwt
from pydantic import SecretStr

from app.core.config import AuthConfig
from app.core.security import (
    MalformedCredentials,
    NoCredentials,
    Unauthenticated,
    create_access_token,
    decode_access_token,
    hash_password,
    parse_basic_authorization,
    verify_password,
)
from app.models.user import UserRole

NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=UTC)


def _config(**overrides: object) -> AuthConfig:
    """Build an AuthConfig for tests; overrides replace individual fields."""
    values: dict[str, object] = {
        "signing_key": SecretStr("unit-test-signing-key-0123456789abcdef"),
        "issuer": "users-api-test",
        "audience": "users-api-test-clients",
        "expires_in_minutes": 30,
        "basic_realm": "Test Realm",
    }
    values.update(overrides)
    return AuthConfig(**values)


def _basic(raw: bytes) -> str:
    return "Basic " + base64.b64encode(raw).decode("ascii")


class TestHashPassword(unittest.TestCase):
    """hash_password is unsalted SHA-256 as lowercase hex."""

    def test_known_digest(self) -> None:
        self.assertEqual(
            hash_password("password"),
            "5e884898da28047151d0e56f8dc6292773603d0d6aabbdd62a11ef721d1542d8",
        )

    def test_empty_string_digest(self) -> None:
        self.assertEqual(
            hash_password(""),
            "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855",
        )

    def test_deterministic(self) -> None:
        self.assertEqual(hash_password("s3cret!"), hash_password("s3cret!"))

    def test_different_inputs_differ(self) -> None:
        self.assertNotEqual(hash_password("secret"), hash_password("Secret"))

    def test_lowercase_hex_64_chars(self) -> None:
        digest = hash_password("pässwörd")
        self.assertEqual(len(digest), 64)
        self.assertEqual(digest, digest.lower())
        int(digest, 16)


class TestVerifyPassword(unittest.TestCase):
    """verify_password requires an exact digest match."""

    def test_match(self) -> None:
        self.assertTrue(verify_password("secret", hash_password("secret")))

    def test_mismatch(self) -> None:
        self.assertFalse(verify_password("secret", hash_password("other")))

    def test_uppercase_stored_digest_does_not_match(self) -> None:
        self.assertFalse(verify_password("secret", hash_password("secret").upper()))

    def test_prefix_does_not_match(self) -> None:
        self.assertFalse(verify_password("secret", hash_password("secret")[:32]))


class TestParseBasicAuthorization(unittest.TestCase):
    """parse_basic_authorization splits on the first colon and rejects malformed input."""

    def test_username_and_password(self) -> None:
        creds = parse_basic_authorization(_basic(b"alice:secret"))
        self.assertEqual(creds.username, "alice")
        self.assertEqual(creds.password, "secret")

    def test_scheme_is_case_insensitive(self) -> None:
        header = "bAsIc " + base64.b64encode(b"alice:secret").decode("ascii")
        self.assertEqual(parse_basic_authorization(header).username, "alice")

    def test_password_may_contain_colons(self) -> None:
        creds = parse_basic_authorization(_basic(b"alice:se:cret"))
        self.assertEqual(creds.username, "alice")
        self.assertEqual(creds.password, "se:cret")

    def test_utf8_credentials(self) -> None:
        creds = parse_basic_authorization(_basic("zoë:pässword".encode("utf-8")))
        self.assertEqual(creds.username, "zoë")
        self.assertEqual(creds.password, "pässword")

    def test_missing_header_is_no_credentials(self) -> None:
        with self.assertRaises(NoCredentials):
            parse_basic_authorization(None)
        with self.assertRaises(NoCredentials):
            parse_basic_authorization("")

    def test_other_scheme_is_no_credentials(self) -> None:
        with self.assertRaises(NoCredentials):
            parse_basic_authorization("Bearer abc.def.ghi")

    def test_empty_payload_is_malformed(self) -> None:
        with self.assertRaises(MalformedCredentials):
            parse_basic_authorization("Basic    ")

    def test_invalid_base64_is_malformed(self) -> None:
        with self.assertRaises(MalformedCredentials):
            parse_basic_authorization("Basic !!!not-base64!!!")

    def test_invalid_utf8_is_malformed(self) -> None:
        with self.assertRaises(MalformedCredentials):
            parse_basic_authorization(_basic(b"\xff\xfe:secret"))

    def test_no_colon_is_malformed(self) -> None:
        with self.assertRaises(MalformedCredentials):
            parse_basic_authorization(_basic(b"alice"))

    def test_empty_username_is_malformed(self) -> None:
        with self.assertRaises(MalformedCredentials):
            parse_basic_authorization(_basic(b":secret"))

    def test_blank_username_is_malformed(self) -> None:
        with self.assertRaises(MalformedCredentials):
            parse_basic_authorization(_basic(b"   :secret"))

    def test_empty_password_is_malformed(self) -> None:
        with self.assertRaises(MalformedCredentials):
            parse_basic_authorization(_basic(b"alice:"))

    def test_whitespace_password_is_malformed(self) -> None:
        with self.assertRaises(MalformedCredentials):
            parse_basic_authorization(_basic(b"alice:   "))


class TestAccessTokenRoundTrip(unittest.TestCase):
    """create_access_token output validates with decode_access_token under the same config."""

    def test_round_trip_yields_matching_principal(self) -> None:
        config = _config()
        token = create_access_token(42, "alice", UserRole.ADMIN, config, now=NOW)
        principal = decode_access_token(token, config, now=NOW + timedelta(seconds=5))
        self.assertEqual(principal.user_id, 42)
        self.assertEqual(principal.username, "alice")
        self.assertEqual(principal.role, UserRole.ADMIN)

    def test_round_trip_with_current_time(self) -> None:
        config = _config()
        token = create_access_token(7, "bob", UserRole.READ_ONLY, config)
        principal = decode_access_token(token, config)
        self.assertEqual(principal.user_id, 7)
        self.assertEqual(principal.role, UserRole.READ_ONLY)

    def test_token_is_three_part_compact_jws(self) -> None:
        token = create_access_token(1, "alice", UserRole.ADMIN, _config(), now=NOW)
        self.assertEqual(len(token.split(".")), 3)

    def test_claims(self) -> None:
        config = _config()
        token = create_access_token(42, "alice", "Admin", config, now=NOW)
        claims = jwt.decode(token, options={"verify_signature": False})
        self.assertEqual(claims["sub"], "42")
        self.assertEqual(claims["unique_name"], "alice")
        self.assertEqual(claims["role"], "Admin")
        self.assertEqual(claims["iss"], config.issuer)
        self.assertEqual(claims["aud"], config.audience)
        self.assertEqual(claims["nbf"], int(NOW.timestamp()))
        self.assertEqual(claims["exp"], int((NOW + timedelta(minutes=30)).timestamp()))

    def test_header_declares_hs256(self) -> None:
        token = create_access_token(42, "alice", UserRole.ADMIN, _config(), now=NOW)
        self.assertEqual(jwt.get_unverified_header(token)["alg"], "HS256")

    def test_different_now_gives_different_token(self) -> None:
        config = _config()
        first = create_access_token(42, "alice", UserRole.ADMIN, config, now=NOW)
        second = create_access_token(
            42, "alice", UserRole.ADMIN, config, now=NOW + timedelta(seconds=1)
        )
        self.assertNotEqual(first, second)


class TestAccessTokenWindow(unittest.TestCase):
    """Validity window is nbf <= now < exp."""

    def test_valid_at_not_before(self) -> None:
        config = _config()
        token = create_access_token(42, "alice", UserRole.ADMIN, config, now=NOW)
        self.assertEqual(decode_access_token(token, config, now=NOW).user_id, 42)

    def test_invalid_before_not_before(self) -> None:
        config = _config()
        token = create_access_token(42, "alice", UserRole.ADMIN, config, now=NOW)
        with self.assertRaises(Unauthenticated):
            decode_access_token(token, config, now=NOW - timedelta(seconds=1))

    def test_invalid_at_expiry(self) -> None:
        config = _config(expires_in_minutes=30)
        token = create_access_token(42, "alice", UserRole.ADMIN, config, now=NOW)
        with self.assertRaises(Unauthenticated):
            decode_access_token(token, config, now=NOW + timedelta(minutes=30))

    def test_valid_just_before_expiry(self) -> None:
        config = _config(expires_in_minutes=30)
        token = create_access_token(42, "alice", UserRole.ADMIN, config, now=NOW)
        principal = decode_access_token(
            token, config, now=NOW + timedelta(minutes=30) - timedelta(seconds=1)
        )
        self.assertEqual(principal.username, "alice")

    def test_zero_lifetime_fails_after_issuance(self) -> None:
        config = _config(expires_in_minutes=0)
        token = create_access_token(42, "alice", UserRole.ADMIN, config, now=NOW)
        with self.assertRaises(Unauthenticated):
            decode_access_token(token, config, now=NOW + timedelta(seconds=1))

    def test_naive_now_is_treated_as_utc(self) -> None:
        config = _config()
        naive = NOW.replace(tzinfo=None)
        token = create_access_token(42, "alice", UserRole.ADMIN, config, now=naive)
        self.assertEqual(decode_access_token(token, config, now=naive).user_id, 42)


class TestAccessTokenRejection(unittest.TestCase):
    """Any verification failure raises Unauthenticated."""

    def setUp(self) -> None:
        self.config = _config()
        self.token = create_access_token(42, "alice", UserRole.ADMIN, self.config, now=NOW)

    def test_tampered_signature(self) -> None:
        header, payload, signature = self.token.split(".")
        i = len(signature) // 2
        flipped = "A" if signature[i] != "A" else "B"
        tampered = ".".join([header, payload, signature[:i] + flipped + signature[i + 1:]])
        with self.assertRaises(Unauthenticated):
            decode_access_token(tampered, self.config, now=NOW)

    def test_tampered_payload(self) -> None:
        header, _, signature = self.token.split(".")
        forged_claims = {
            "sub": "42",
            "unique_name": "alice",
            "role": "Admin",
            "nbf": int(NOW.timestamp()),
            "exp": int(NOW.timestamp()) + 999999,
            "iss": self.config.issuer,
            "aud": self.config.audience,
        }
        forged = jwt.encode(forged_claims, "another-key-0123456789abcdef-0123456789", algorithm="HS256")
        forged_payload = forged.split(".")[1]
        with self.assertRaises(Unauthenticated):
            decode_access_token(
                ".".join([header, forged_payload, signature]), self.config, now=NOW
            )

    def test_wrong_signing_key(self) -> None:
        other = _config(signing_key=SecretStr("different-signing-key-0123456789abcdef"))
        with self.assertRaises(Unauthenticated):
            decode_access_token(self.token, other, now=NOW)

    def test_wrong_issuer(self) -> None:
        with self.assertRaises(Unauthenticated):
            decode_access_token(self.token, _config(issuer="someone-else"), now=NOW)

    def test_wrong_audience(self) -> None:
        with self.assertRaises(Unauthenticated):
            decode_access_token(self.token, _config(audience="someone-else"), now=NOW)

    def test_garbage(self) -> None:
        for token in ("", "abc", "a.b.c", "not a token at all"):
            with self.subTest(token=token):
                with self.assertRaises(Unauthenticated):
                    decode_access_token(token, self.config, now=NOW)

    def test_unsigned_token_rejected(self) -> None:
        unsigned = jwt.encode(
            {
                "sub": "42",
                "unique_name": "alice",
                "role": "Admin",
                "nbf": int(NOW.timestamp()),
                "exp": int(NOW.timestamp()) + 600,
                "iss": self.config.issuer,
                "aud": self.config.audience,
            },
            None,
            algorithm="none",
        )
        with self.assertRaises(Unauthenticated):
            decode_access_token(unsigned, self.config, now=NOW)

    def _signed(self, claims: dict[str, object]) -> str:
        return jwt.encode(
            claims, self.config.signing_key.get_secret_value(), algorithm="HS256"
        )

    def _claims(self) -> dict[str, object]:
        return {
            "sub": "42",
            "unique_name": "alice",
            "role": "Admin",
            "nbf": int(NOW.timestamp()),
            "exp": int(NOW.timestamp()) + 600,
            "iss": self.config.issuer,
            "aud": self.config.audience,
        }

    def test_missing_required_claim(self) -> None:
        for claim in ("sub", "unique_name", "role", "nbf", "exp", "iss", "aud"):
            with self.subTest(claim=claim):
                claims = self._claims()
                del claims[claim]
                with self.assertRaises(Unauthenticated):
                    decode_access_token(self._signed(claims), self.config, now=NOW)

    def test_unknown_role(self) -> None:
        claims = self._claims()
        claims["role"] = "SuperUser"
        with self.assertRaises(Unauthenticated):
            decode_access_token(self._signed(claims), self.config, now=NOW)

    def test_non_numeric_subject(self) -> None:
        claims = self._claims()
        claims["sub"] = "alice"
        with self.assertRaises(Unauthenticated):
            decode_access_token(self._signed(claims), self.config, now=NOW)


if __name__ == "__main__":
    unittest.main()
