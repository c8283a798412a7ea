"""JWT access token issuance and verification."""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from uuid import uuid4

from jose import jwt
from jose.exceptions import JOSEError
from jose.utils import base64url_decode, base64url_encode

from user_service.services.errors import UnauthenticatedError

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(days=7)


@dataclass(frozen=True)
class Identity:
    """Identity claims resolved from a verified token."""

    subject_id: str
    email: str


class TokenError(UnauthenticatedError):
    """Base class for token verification failures."""

    default_message = "Invalid or expired token"


class MalformedTokenError(TokenError):
    pass


class InvalidSignatureError(TokenError):
    pass


class ExpiredTokenError(TokenError):
    pass


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TokenService:
    """Signs and verifies bearer tokens.

    Verification is pure computation over the presented token and the signing
    secret: no database lookup and no revocation list. Changing the secret
    invalidates every outstanding token.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] = _utcnow,
    ):
        if not secret:
            raise ValueError("Token signing secret must not be empty")
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = ttl
        self._clock = clock

    def issue(self, account_id: str, email: str) -> str:
        """Create a signed access token for an account."""
        issued_at = self._clock()
        expires_at = issued_at + self._ttl
        to_encode = {
            "sub": str(account_id),
            "email": email,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
            "jti": uuid4().hex,
        }
        return jwt.encode(to_encode, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> Identity:
        """Verify a token and return the identity it carries.

        Raises:
            MalformedTokenError: the token cannot be parsed or lacks claims.
            InvalidSignatureError: the signature does not match.
            ExpiredTokenError: the token is past its expiry.
        """
        try:
            unverified = jwt.get_unverified_claims(token)
        except (JOSEError, ValueError, TypeError) as e:
            raise MalformedTokenError(reason=f"unparseable token: {e}") from None
        if not isinstance(unverified, Mapping):
            raise MalformedTokenError(reason="claims are not an object")

        self._check_canonical_signature(token)

        try:
            # Expiry is checked below against the injected clock
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"verify_exp": False},
            )
        except (JOSEError, ValueError) as e:
            raise InvalidSignatureError(reason=f"signature check failed: {e}") from None

        subject_id = claims.get("sub")
        email = claims.get("email")
        expires_at = claims.get("exp")
        if not subject_id or not email or not isinstance(expires_at, int | float):
            raise MalformedTokenError(reason="missing sub, email or exp claim")

        if self._clock().timestamp() > expires_at:
            raise ExpiredTokenError(reason="token expired")

        return Identity(subject_id=str(subject_id), email=str(email))

    @staticmethod
    def _check_canonical_signature(token: str) -> None:
        # base64url ignores the spare bits of the last character, so two
        # encodings can decode to the same signature; only the canonical one is accepted
        segments = token.split(".")
        if len(segments) != 3:
            raise MalformedTokenError(reason="token must have three segments")
        signature = segments[2].encode("ascii", errors="replace")
        try:
            canonical = base64url_encode(base64url_decode(signature))
        except (ValueError, TypeError) as e:
            raise MalformedTokenError(reason=f"undecodable signature: {e}") from None
        if canonical != signature:
            raise InvalidSignatureError(reason="non-canonical signature encoding")
