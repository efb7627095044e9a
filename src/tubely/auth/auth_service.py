"""Access token issuance and validation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID

import jwt
from jwt import ExpiredSignatureError
from jwt import InvalidTokenError as PyJWTInvalidTokenError
import structlog


logger = structlog.get_logger(__name__)

TOKEN_ISSUER = "tubely-access"


def _utcnow() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(tz=timezone.utc)


class AuthError(Exception):
    """Base class for auth failures."""


class InvalidTokenError(AuthError):
    """Raised when token cannot be decoded."""


class TokenExpiredError(AuthError):
    """Raised when token is expired."""


@dataclass(slots=True)
class TokenService:
    """Issue and validate HS256 access tokens whose subject is a user id."""

    signing_key: str
    token_ttl: timedelta = timedelta(hours=1)
    issuer: str = TOKEN_ISSUER

    def issue_token(self, user_id: UUID, *, now: datetime | None = None) -> str:
        issued_at = now or _utcnow()
        payload: dict[str, Any] = {
            "iss": self.issuer,
            "sub": str(user_id),
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self.token_ttl).timestamp()),
        }
        return jwt.encode(payload, self.signing_key, algorithm="HS256")

    def validate_token(self, token: str) -> UUID:
        """Decode ``token`` and return the user id it was issued for."""
        try:
            payload: dict[str, Any] = jwt.decode(
                token,
                self.signing_key,
                algorithms=["HS256"],
                issuer=self.issuer,
                options={"require": ["exp", "iat", "iss", "sub"]},
            )
        except ExpiredSignatureError as exc:
            logger.info("auth.token.expired")
            raise TokenExpiredError("Token expired") from exc
        except PyJWTInvalidTokenError as exc:
            logger.warning("auth.token.invalid", error=str(exc))
            raise InvalidTokenError("Invalid token") from exc

        try:
            return UUID(payload["sub"])
        except (TypeError, ValueError) as exc:
            logger.warning("auth.token.invalid_subject", subject=payload.get("sub"))
            raise InvalidTokenError("Invalid token subject") from exc


__all__ = [
    "AuthError",
    "InvalidTokenError",
    "TokenExpiredError",
    "TokenService",
    "TOKEN_ISSUER",
]
