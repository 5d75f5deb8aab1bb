"""Session verification for tokens issued by the external auth provider.

The provider signs a JWT carrying the user id (`sub`), `email` and `name` and
hands it to the browser as a cookie. API clients may send the same token as a
Bearer header instead.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ouracoach.config import Settings, get_settings

_bearer = HTTPBearer(auto_error=False)


@dataclass
class CurrentUser:
    id: str
    email: str | None = None
    name: str | None = None


def _unauthorized(detail: str = "Unauthorized") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def verify_session_token(token: str, settings: Settings | None = None) -> CurrentUser:
    settings = settings or get_settings()
    try:
        claims = jwt.decode(
            token,
            settings.session_secret,
            algorithms=[settings.session_algorithm],
            options={"require": ["sub", "exp"]},
        )
    except jwt.PyJWTError as e:
        raise _unauthorized(f"Invalid session token: {e}") from e
    return CurrentUser(id=str(claims["sub"]), email=claims.get("email"), name=claims.get("name"))


def issue_session_token(
    user: CurrentUser,
    expires_in: timedelta = timedelta(days=7),
    settings: Settings | None = None,
) -> str:
    """Sign a session token the same way the auth provider does (tests and tooling)."""
    settings = settings or get_settings()
    claims = {
        "sub": user.id,
        "email": user.email,
        "name": user.name,
        "exp": datetime.now(timezone.utc) + expires_in,
    }
    return jwt.encode(claims, settings.session_secret, algorithm=settings.session_algorithm)


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> CurrentUser:
    token = credentials.credentials if credentials else None
    if token is None:
        token = request.cookies.get(get_settings().session_cookie_name)
    if not token:
        raise _unauthorized()
    return verify_session_token(token)
