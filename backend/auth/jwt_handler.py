"""Session tokens: signed JWTs whose ``sub`` claim is the user's id."""

from datetime import datetime, timedelta, timezone

import jwt

from backend.core import config


class InvalidSubjectError(jwt.InvalidTokenError):
    """The token verified but its ``sub`` claim is not a user id."""


def create_access_token(user_id: int, expires_minutes: int | None = None, now: datetime | None = None) -> str:
    issued_at = now or datetime.now(timezone.utc)
    lifetime = timedelta(minutes=expires_minutes or config.JWT_EXPIRES_MINUTES)
    claims = {"sub": str(user_id), "iat": issued_at, "exp": issued_at + lifetime}
    return jwt.encode(claims, config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    return jwt.decode(
        token,
        config.JWT_SECRET_KEY,
        algorithms=[config.JWT_ALGORITHM],
        options={"require": ["sub", "exp"]},
    )


def user_id_from_token(token: str) -> int:
    subject = decode_access_token(token)["sub"]
    if not isinstance(subject, str) or not subject.isdigit():
        raise InvalidSubjectError("Token subject is not a user id")
    return int(subject)
