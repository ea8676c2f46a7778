"""
JWT token creation and verification.

Tokens are HS256 JWTs (python-jose) whose only claims are ``sub``
(the user id) and ``exp``.  The secret, expiry and algorithm are handed
to ``TokenIssuer`` at construction; ``get_token_issuer`` builds the
application-wide instance from ``config``.
"""

from __future__ import annotations

import time
from functools import lru_cache
from typing import Optional

from jose import JWTError, jwt

from auth.errors import AuthError, ErrorKind
from config.settings import config


class TokenIssuer:
    def __init__(self, secret: str, expiry_seconds: int, algorithm: str = "HS256"):
        if not secret:
            raise ValueError("Token secret must not be empty")
        self._secret = secret
        self._algorithm = algorithm
        self.expiry_seconds = expiry_seconds

    def issue(self, user_id: str, issued_at: Optional[int] = None) -> str:
        """Create a signed token containing ``user_id`` as subject and an expiry."""
        now = int(time.time()) if issued_at is None else int(issued_at)
        claims = {"sub": str(user_id), "exp": now + self.expiry_seconds}
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def decode(self, token: str) -> dict:
        """Return the verified claims.  Raises ``JWTError`` on failure."""
        return jwt.decode(token, self._secret, algorithms=[self._algorithm])

    def verify(self, token: str) -> str:
        """
        Verify token and return the subject ``user_id``.

        Raises ``AuthError(UNAUTHORIZED)`` on invalid or expired tokens.
        """
        try:
            claims = self.decode(token)
        except JWTError as exc:
            raise AuthError(ErrorKind.UNAUTHORIZED, "Invalid or expired token") from exc
        subject = claims.get("sub")
        if not subject:
            raise AuthError(ErrorKind.UNAUTHORIZED, "Invalid or expired token")
        return subject


@lru_cache
def get_token_issuer() -> TokenIssuer:
    return TokenIssuer(
        secret=config.jwt_secret,
        expiry_seconds=config.jwt_expiry_seconds,
        algorithm=config.jwt_algorithm,
    )
