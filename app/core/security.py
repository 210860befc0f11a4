"""Password hashing, Basic header parsing, and JWT creation/verification."""

import base64
import hashlib
import hmac
from datetime import UTC, datetime, timedelta
from typing import Any, NamedTuple

import jwt

from app.core.config import AuthConfig
from app.models.user import UserRole, parse_role
from app.schemas.auth import Principal

BASIC_PREFIX = "basic "

# Claims every access token must carry; PyJWT rejects tokens missing any of them.
REQUIRED_CLAIMS = ["sub", "unique_name", "role", "nbf", "exp", "iss", "aud"]


class AuthError(Exception):
    """Base for authentication/authorization failures. message is internal only."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NoCredentials(AuthError):
    """No Authorization header, or a scheme other than the one being parsed."""


class MalformedCredentials(AuthError):
    """Authorization header present but unparsable."""


class InvalidCredentials(AuthError):
    """Well-formed credentials that do not match a stored user."""


class Unauthenticated(AuthError):
    """Missing principal, or an invalid/expired bearer token."""


class Forbidden(AuthError):
    """Valid principal whose role does not satisfy the operation."""


class BasicCredentials(NamedTuple):
    username: str
    password: str


def hash_password(plain_password: str) -> str:
    """
    Unsalted SHA-256 of the UTF-8 password, as lowercase hex.

    Kept bit-for-bit compatible with digests already stored for existing users.
    """
    return hashlib.sha256(plain_password.encode("utf-8")).hexdigest()


def verify_password(plain_password: str, stored_hash: str) -> bool:
    """Exact, constant-time comparison of hash(plain_password) with the stored digest."""
    return hmac.compare_digest(
        hash_password(plain_password).encode("utf-8"),
        stored_hash.encode("utf-8"),
    )


def parse_basic_authorization(header: str | None) -> BasicCredentials:
    """
    Parse 'Authorization: Basic base64(username:password)'.

    Raises NoCredentials when there is nothing to parse (no header, other scheme),
    MalformedCredentials when the header is Basic but unusable. The password is
    everything after the first colon and may itself contain colons.
    """
    if header is None or not header.strip():
        raise NoCredentials("No Authorization header.")
    if not header.lower().startswith(BASIC_PREFIX):
        raise NoCredentials("Authorization scheme is not Basic.")

    encoded = header[len(BASIC_PREFIX):].strip()
    if not encoded:
        raise MalformedCredentials("Missing Basic credentials.")

    try:
        decoded = base64.b64decode(encoded, validate=True).decode("utf-8")
    except ValueError as e:
        # binascii.Error and UnicodeDecodeError are both ValueError subclasses.
        raise MalformedCredentials("Invalid Base64 in Basic credentials.") from e

    username, sep, password = decoded.partition(":")
    if not sep or not username:
        raise MalformedCredentials(
            "Invalid Basic credential format. Expected username:password."
        )
    if not username.strip() or not password.strip():
        raise MalformedCredentials("Username/password missing.")
    return BasicCredentials(username=username, password=password)


def _as_utc(now: datetime | None) -> datetime:
    if now is None:
        return datetime.now(UTC)
    if now.tzinfo is None:
        return now.replace(tzinfo=UTC)
    return now


def create_access_token(
    user_id: int,
    username: str,
    role: UserRole | str,
    config: AuthConfig,
    now: datetime | None = None,
) -> str:
    """
    Create a signed JWT carrying sub (user id), unique_name, role, iss, aud,
    and the validity window nbf = now, exp = now + expires_in_minutes.
    """
    issued_at = _as_utc(now)
    expire = issued_at + timedelta(minutes=config.expires_in_minutes)
    payload: dict[str, Any] = {
        "sub": str(user_id),
        "unique_name": username,
        "role": UserRole(role).value,
        "nbf": issued_at,
        "exp": expire,
        "iat": issued_at,
        "iss": config.issuer,
        "aud": config.audience,
    }
    return jwt.encode(
        payload,
        config.signing_key.get_secret_value(),
        algorithm=config.algorithm,
    )


def decode_access_token(
    token: str,
    config: AuthConfig,
    now: datetime | None = None,
) -> Principal:
    """
    Verify signature, issuer, audience and nbf <= now < exp; return the Principal.

    No store lookup: trust is the signature plus the claims. Raises Unauthenticated
    on any failure.
    """
    try:
        payload = jwt.decode(
            token,
            config.signing_key.get_secret_value(),
            algorithms=[config.algorithm],
            audience=config.audience,
            issuer=config.issuer,
            # Time window is checked below against the caller's clock.
            options={
                "require": REQUIRED_CLAIMS,
                "verify_exp": False,
                "verify_nbf": False,
                "verify_iat": False,
            },
        )
    except jwt.PyJWTError as e:
        raise Unauthenticated(f"Invalid token: {e}") from e

    not_before = payload["nbf"]
    expires_at = payload["exp"]
    if not isinstance(not_before, int | float) or not isinstance(expires_at, int | float):
        raise Unauthenticated("Invalid token payload: nbf/exp must be numeric")
    at = _as_utc(now).timestamp()
    if at < not_before:
        raise Unauthenticated("Token is not yet valid")
    if at >= expires_at:
        raise Unauthenticated("Token has expired")

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError) as e:
        raise Unauthenticated("Invalid token payload: sub") from e
    username = payload["unique_name"]
    if not isinstance(username, str) or not username:
        raise Unauthenticated("Invalid token payload: unique_name")
    role_claim = payload["role"]
    role = parse_role(role_claim) if isinstance(role_claim, str) else None
    if role is None:
        raise Unauthenticated("Invalid token payload: role")
    return Principal(user_id=user_id, username=username, role=role)
