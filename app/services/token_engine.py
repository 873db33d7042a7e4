"""JWT issuance and verification for authenticated accounts.

Tokens are HMAC-signed JWTs carrying the account snapshot as claims. They are
stateless: validity is decided only by signature and expiry at verification
time, so there is no revocation list.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import jwt

from app.core.exceptions import (
    SignatureInvalidError,
    TokenError,
    TokenExpiredError,
    TokenMalformedError,
    WeakSecretError,
)
from app.models import AccountStatus
from app.schemas.auth import TokenClaims

if TYPE_CHECKING:
    from app.core.config import Settings
    from app.models import Account

logger = logging.getLogger(__name__)

# HMAC keys shorter than this materially weaken the signature.
MIN_SECRET_BYTES = 32

REQUIRED_CLAIMS = ["sub", "iss", "iat", "exp"]

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class TokenConfig:
    """Signing configuration; built once at startup and never mutated."""

    secret: str
    issuer: str
    expiration_millis: int
    algorithm: str = "HS256"

    @classmethod
    def from_settings(cls, settings: Settings) -> TokenConfig:
        return cls(
            secret=settings.JWT_SECRET.get_secret_value(),
            issuer=settings.JWT_ISSUER,
            expiration_millis=settings.JWT_EXPIRATION_MS,
            algorithm=settings.JWT_ALGORITHM,
        )

    @property
    def ttl(self) -> timedelta:
        return timedelta(milliseconds=self.expiration_millis)


def derive_signing_key(secret: str | None) -> bytes:
    """Derive the HMAC key from the configured secret (its UTF-8 bytes)."""
    key = (secret or "").encode("utf-8")
    if len(key) < MIN_SECRET_BYTES:
        raise WeakSecretError(
            f"JWT secret must be at least {MIN_SECRET_BYTES} bytes long (got {len(key)})."
        )
    return key


class TokenEngine:
    """Signs, verifies and decodes account access tokens."""

    def __init__(self, config: TokenConfig, clock: Clock = utc_now) -> None:
        self.config = config
        self.clock = clock
        self._key = derive_signing_key(config.secret)

    @classmethod
    def from_settings(cls, settings: Settings, clock: Clock = utc_now) -> TokenEngine:
        return cls(TokenConfig.from_settings(settings), clock=clock)

    def issue(self, account: Account) -> str:
        """
        Create a signed token for the account snapshot.

        sub is the username; custom claims carry id, email, names, status and
        role names. iat is truncated to whole seconds so iat/exp round-trip
        exactly through the integer JWT timestamps.
        """
        now = self.clock().replace(microsecond=0)
        expire = now + self.config.ttl
        payload: dict[str, Any] = {
            "sub": account.username,
            "iss": self.config.issuer,
            "iat": now,
            "exp": expire,
            "userId": str(account.id),
            "email": account.email,
            "firstName": account.first_name,
            "lastName": account.last_name,
            "status": AccountStatus(account.status).value,
            "roles": sorted(role.name for role in account.roles),
        }
        return jwt.encode(payload, self._key, algorithm=self.config.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """
        Verify signature and expiry; return the decoded claims.

        Raises TokenMalformedError, SignatureInvalidError or TokenExpiredError.
        Expiry is checked against this engine's clock: a token is expired iff
        exp <= now.
        """
        if not isinstance(token, str) or not token.strip():
            raise TokenMalformedError("Token is empty.")
        try:
            payload = jwt.decode(
                token,
                self._key,
                algorithms=[self.config.algorithm],
                # exp/iat are checked below against the injected clock.
                options={
                    "require": REQUIRED_CLAIMS,
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except jwt.InvalidSignatureError as e:
            raise SignatureInvalidError("Token signature is invalid.") from e
        except jwt.DecodeError as e:
            # A signature segment that is not even valid base64 is still a bad signature.
            if _has_well_formed_signing_input(token):
                raise SignatureInvalidError("Token signature is invalid.") from e
            raise TokenMalformedError(f"Token is malformed: {e}") from e
        except jwt.PyJWTError as e:
            raise TokenMalformedError(f"Token is malformed: {e}") from e

        try:
            claims = TokenClaims.model_validate(payload)
        except ValueError as e:
            raise TokenMalformedError("Token claims are malformed.") from e

        if claims.expires_at <= self.clock():
            raise TokenExpiredError("Token has expired.")
        return claims

    def extract_subject(self, token: str) -> str:
        return self.verify(token).subject

    def extract_expiry(self, token: str) -> datetime:
        return self.verify(token).expires_at

    def matches_identity(self, token: str, expected_username: str) -> bool:
        """True iff the token verifies, is unexpired and belongs to expected_username."""
        try:
            claims = self.verify(token)
        except TokenError as e:
            logger.debug("Token rejected during identity check: %s", type(e).__name__)
            return False
        return claims.subject == expected_username and claims.expires_at > self.clock()


def _has_well_formed_signing_input(token: str) -> bool:
    """True if the header and payload segments decode, whatever the signature segment holds."""
    if token.count(".") != 2:
        return False
    signing_input = token.rsplit(".", 1)[0]
    try:
        jwt.decode(f"{signing_input}.", options={"verify_signature": False})
    except jwt.PyJWTError:
        return False
    return True
