"""HTTP middleware: CORS, the signed session cookie, security headers, and per-client rate limiting."""

import time
from collections import defaultdict, deque

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.middleware.sessions import SessionMiddleware
from starlette.types import ASGIApp

from geotarget_api.core.config import Settings

SESSION_COOKIE_NAME = "geotarget_session"

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "same-origin",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
}

_FALLBACK_PROXY_HEADERS = ("CF-Connecting-IP", "X-Forwarded-For", "X-Real-IP")
_WINDOW_SECONDS = 60.0


def get_client_ip(request: Request, trusted_headers: list[str] | None = None) -> str:
    """Identify the caller for rate limiting.

    The first non-blank trusted proxy header wins; ``X-Forwarded-For``
    contributes its leftmost address. Without one, the socket peer is used.

    Args:
        request: The incoming request.
        trusted_headers: Header names in priority order.

    Returns:
        The client address, or ``"unknown"``.
    """
    for name in _FALLBACK_PROXY_HEADERS if trusted_headers is None else trusted_headers:
        raw = request.headers.get(name, "").strip()
        if raw:
            return raw.split(",", 1)[0].strip() if name.lower() == "x-forwarded-for" else raw
    return request.client.host if request.client else "unknown"


def setup_cors(app: FastAPI, settings: Settings) -> None:
    """Allow the configured browser origins, with credentials so the session cookie is sent."""
    origin_regex = settings.cors_origin_regex.strip() or None
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_origin_regex=origin_regex,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )


def setup_sessions(app: FastAPI, settings: Settings) -> None:
    """Keep each browser session's state whitelist in a signed cookie."""
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret_key,
        session_cookie=SESSION_COOKIE_NAME,
        max_age=settings.session_max_age_seconds,
        same_site="lax",
        https_only=settings.session_https_only,
    )


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Stamp SECURITY_HEADERS onto every response."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        response.headers.update(SECURITY_HEADERS)
        return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Sliding one-minute request budget per client address.

    Only paths under ``path_prefix`` are counted, so health checks and the
    docs stay reachable. Counters live in process memory.
    """

    def __init__(
        self,
        app: ASGIApp,
        requests_per_minute: int = 60,
        trusted_proxy_headers: list[str] | None = None,
        path_prefix: str = "/api",
    ) -> None:
        super().__init__(app)
        self.requests_per_minute = requests_per_minute
        self.trusted_proxy_headers = trusted_proxy_headers
        self.path_prefix = path_prefix
        self._hits: dict[str, deque[float]] = defaultdict(deque)

    def _retry_after(self, client: str) -> int | None:
        """Seconds until ``client`` may retry, or None if it is under budget. Records the hit when allowed."""
        now = time.monotonic()
        hits = self._hits[client]
        while hits and now - hits[0] >= _WINDOW_SECONDS:
            hits.popleft()
        if len(hits) >= self.requests_per_minute:
            return max(1, int(_WINDOW_SECONDS - (now - hits[0])))
        hits.append(now)
        return None

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not request.url.path.startswith(self.path_prefix):
            return await call_next(request)

        retry_after = self._retry_after(get_client_ip(request, self.trusted_proxy_headers))
        if retry_after is not None:
            return Response(
                content='{"detail":"Rate limit exceeded"}',
                status_code=429,
                media_type="application/json",
                headers={"Retry-After": str(retry_after)},
            )
        return await call_next(request)
