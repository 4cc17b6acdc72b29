"""Stateless session tokens."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import jwt

from around.domain.errors import InvalidTokenError
from around.domain.models import AuthenticatedUser


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class TokenService:
    """Issues and verifies signed, time-limited session tokens."""

    signing_key: str
    algorithm: str = "HS256"
    ttl: timedelta = timedelta(hours=24)
    clock: Callable[[], datetime] = field(default=_utcnow)

    def issue_token(self, username: str) -> str:
        """Return a signed token carrying the username and an expiry."""
        claims = {"username": username, "exp": self.clock() + self.ttl}
        return jwt.encode(claims, self.signing_key, algorithm=self.algorithm)

    def verify_token(self, token: str) -> AuthenticatedUser:
        """Validate signature and expiry and return the token's identity."""
        try:
            claims = jwt.decode(
                token,
                self.signing_key,
                algorithms=[self.algorithm],
                options={"require": ["exp"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise InvalidTokenError("Token has expired") from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError("Token is invalid") from exc
        username = claims.get("username")
        if not isinstance(username, str) or not username:
            raise InvalidTokenError("Token has no username claim")
        return AuthenticatedUser(username=username)
