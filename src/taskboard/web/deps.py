from typing import Annotated, cast

from fastapi import Depends, Request
from fastapi.security import APIKeyCookie, HTTPAuthorizationCredentials, HTTPBearer

from taskboard.app import App
from taskboard.core.modules.session.models import AuthToken
from taskboard.errors import AuthenticationError

AUTH_COOKIE = "auth_token"

bearer_scheme = HTTPBearer(auto_error=False)
cookie_scheme = APIKeyCookie(name=AUTH_COOKIE, auto_error=False)


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def get_auth_token(
    app: Annotated[App, Depends(get_app)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)] = None,
    token_cookie: Annotated[str | None, Depends(cookie_scheme)] = None,
) -> AuthToken:
    """Take the first valid token from the Authorization header, then the cookie."""
    candidates = []
    if credentials is not None and credentials.scheme.lower() == "bearer":
        candidates.append(credentials.credentials)
    if token_cookie:
        candidates.append(token_cookie)

    for candidate in candidates:
        if await app.is_auth_token_valid(AuthToken(candidate)):
            return AuthToken(candidate)
    raise AuthenticationError("Unauthorized")


AppDep = Annotated[App, Depends(get_app)]
AuthTokenDep = Annotated[AuthToken, Depends(get_auth_token)]
