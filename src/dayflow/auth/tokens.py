from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import timedelta

import jwt

from ..common.datetime_utils import Clock, SystemClock
from ..core.exceptions import AuthenticationError

_ALGORITHM = "HS256"


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


class TokenService:
    """Signs and verifies access/refresh JWTs.

    Access tokens are short-lived bearer credentials. Refresh tokens use a
    separate secret and carry a random ``jti`` so every issue is distinct;
    the one currently valid per employee is stored on the employee row.
    """

    def __init__(
        self,
        *,
        secret: str,
        refresh_secret: str,
        access_ttl: timedelta,
        refresh_ttl: timedelta,
        clock: Clock | None = None,
    ):
        self._secret = secret
        self._refresh_secret = refresh_secret
        self._access_ttl = access_ttl
        self._refresh_ttl = refresh_ttl
        self._clock = clock or SystemClock()

    def _encode(self, user_id: int, *, kind: str, secret: str, ttl: timedelta, jti: str | None = None) -> str:
        issued = int(self._clock.now().timestamp())
        payload = {
            "sub": str(user_id),
            "type": kind,
            "iat": issued,
            "exp": issued + int(ttl.total_seconds()),
        }
        if jti:
            payload["jti"] = jti
        return jwt.encode(payload, secret, algorithm=_ALGORITHM)

    def _decode(self, token: str, *, kind: str, secret: str) -> int:
        # expiry is checked against the injected clock, not PyJWT's wall clock
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[_ALGORITHM],
                options={"require": ["sub", "exp"], "verify_exp": False, "verify_iat": False},
            )
        except jwt.InvalidTokenError:
            raise AuthenticationError("Invalid token")

        if payload.get("type") != kind:
            raise AuthenticationError("Invalid token")
        try:
            user_id = int(payload["sub"])
            expires = int(payload["exp"])
        except (TypeError, ValueError):
            raise AuthenticationError("Invalid token")
        if expires <= int(self._clock.now().timestamp()):
            raise AuthenticationError("Token expired")
        return user_id

    def issue_access(self, user_id: int) -> str:
        return self._encode(user_id, kind="access", secret=self._secret, ttl=self._access_ttl)

    def issue_refresh(self, user_id: int) -> str:
        return self._encode(
            user_id,
            kind="refresh",
            secret=self._refresh_secret,
            ttl=self._refresh_ttl,
            jti=uuid.uuid4().hex,
        )

    def issue_pair(self, user_id: int) -> TokenPair:
        return TokenPair(access_token=self.issue_access(user_id), refresh_token=self.issue_refresh(user_id))

    def decode_access(self, token: str) -> int:
        return self._decode(token, kind="access", secret=self._secret)

    def decode_refresh(self, token: str) -> int:
        return self._decode(token, kind="refresh", secret=self._refresh_secret)
