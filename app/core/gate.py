"""Route gate: redirect requests for protected pages that carry no valid session cookie."""

import logging
from collections.abc import Sequence

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response
from starlette.types import ASGIApp

from app.core.security import SessionTokenService

logger = logging.getLogger(__name__)


def _matches_prefix(path: str, prefix: str) -> bool:
    """True if path is prefix itself or lies below it (segment-aware: /v1 does not match /v10)."""
    base = prefix.rstrip("/")
    if not base:
        return True
    return path == base or path.startswith(base + "/")


def requires_session(
    path: str,
    protected_prefixes: Sequence[str],
    public_prefixes: Sequence[str],
) -> bool:
    """Whether path must carry a valid session. Public prefixes win over protected ones."""
    if any(_matches_prefix(path, prefix) for prefix in public_prefixes):
        return False
    return any(_matches_prefix(path, prefix) for prefix in protected_prefixes)


class SessionGateMiddleware(BaseHTTPMiddleware):
    """
    Verify the session cookie on every request to a protected path.

    Missing or invalid tokens get a redirect to the login path; valid ones pass
    through untouched. The identity is not attached to the request, so handlers
    that need it verify the cookie again. Nothing is cached between requests.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        token_service: SessionTokenService,
        cookie_name: str,
        protected_prefixes: Sequence[str],
        public_prefixes: Sequence[str],
        redirect_path: str = "/",
    ) -> None:
        super().__init__(app)
        self.token_service = token_service
        self.cookie_name = cookie_name
        self.protected_prefixes = tuple(protected_prefixes)
        self.public_prefixes = tuple(public_prefixes)
        self.redirect_path = redirect_path

    def is_authenticated(self, request: Request) -> bool:
        token = request.cookies.get(self.cookie_name)
        if not token:
            return False
        return self.token_service.verify(token) is not None

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        if requires_session(path, self.protected_prefixes, self.public_prefixes):
            if not self.is_authenticated(request):
                logger.debug("Unauthenticated request to %s; redirecting to %s", path, self.redirect_path)
                return RedirectResponse(url=self.redirect_path, status_code=307)
        return await call_next(request)
