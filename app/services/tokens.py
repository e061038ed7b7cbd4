"""Signed, expiring bearer tokens (HS256 JWT).

Tokens carry ``userId`` and ``username`` and are never stored server-side, so
validity is decided by signature and ``exp`` alone.
"""
from datetime import datetime, timedelta, timezone

import jwt

from app.schemas.auth import TokenClaims


class InvalidTokenError(Exception):
    pass


class TokenIssuer:
    ALGORITHM = "HS256"
    DEFAULT_EXPIRE_MINUTES = 60

    def __init__(self, secret_key: str, expire_minutes: int = DEFAULT_EXPIRE_MINUTES):
        if not secret_key:
            raise ValueError("JWT secret key cannot be empty")
        self._secret_key = secret_key
        self._expire = timedelta(minutes=expire_minutes)

    def issue(self, user_id: str, username: str, expires_delta: timedelta | None = None) -> str:
        now = datetime.now(tz=timezone.utc)
        payload = {
            "userId": user_id,
            "username": username,
            "iat": now,
            "exp": now + (expires_delta if expires_delta is not None else self._expire),
        }
        return jwt.encode(payload, self._secret_key, algorithm=self.ALGORITHM)

    def verify(self, token: str) -> TokenClaims:
        """Decode ``token``.

        Raises ``InvalidTokenError`` when the signature does not match, the
        payload is malformed, or the token has expired.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.ALGORITHM],
                options={"require": ["exp", "iat"]},
            )
            return TokenClaims(
                user_id=payload["userId"],
                username=payload["username"],
                issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            )
        except jwt.ExpiredSignatureError as e:
            raise InvalidTokenError("Token has expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(f"Invalid token: {e}") from e
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidTokenError(f"Malformed token payload: {e}") from e
