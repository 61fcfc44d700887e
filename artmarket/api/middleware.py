# artmarket/api/middleware.py
from typing import Callable, Sequence

from limits import parse
from limits.storage import storage_from_string
from limits.strategies import FixedWindowRateLimiter
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from artmarket.utils.logging import get_logger
from artmarket.utils.settings import TRUSTED_PROXIES

logger = get_logger(__name__)

DOCS_PATHS = ("/docs", "/redoc", "/openapi.json")


def get_client_ip(request: Request, trusted_proxies: Sequence[str] = TRUSTED_PROXIES) -> str:
    """
    IP klienta. X-Forwarded-For liczy sie tylko gdy polaczenie przyszlo
    od naszego proxy, inaczej kazdy moglby podac sobie nowe IP.
    """
    remote = request.client.host if request.client else "127.0.0.1"
    forwarded = request.headers.get("X-Forwarded-For")
    if not forwarded or remote not in trusted_proxies:
        return remote

    # proxy dopisuja sie na koncu, pierwszy obcy od prawej to klient
    hops = [hop.strip() for hop in forwarded.split(",") if hop.strip()]
    for hop in reversed(hops):
        if hop not in trusted_proxies:
            return hop
    return remote


class RateLimiter:
    """Limit per IP w stalym oknie; storage memory:// albo redis://... przy kilku instancjach."""

    def __init__(
        self,
        enabled: bool,
        limit: str,
        storage_uri: str,
        key_func: Callable[[Request], str] = get_client_ip,
    ):
        self.enabled = enabled
        self.limit = parse(limit)
        self.strategy = FixedWindowRateLimiter(storage_from_string(storage_uri))
        self.key_func = key_func

    def hit(self, request: Request) -> bool:
        if not self.enabled:
            return True
        return self.strategy.hit(self.limit, self.key_func(request))


def too_many_requests(request: Request, client_ip: str) -> JSONResponse:
    logger.warning(f"Rate limit exceeded: {client_ip} on {request.url.path}")
    return JSONResponse(
        status_code=429,
        content={"detail": "Too many requests from this IP, please try again later."},
    )


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Liczy kazde zapytanie, niezaleznie od tego czy trafi w jakis route."""

    async def dispatch(self, request: Request, call_next) -> Response:
        limiter: RateLimiter = request.app.state.limiter
        # redis storage jest blokujacy
        allowed = await run_in_threadpool(limiter.hit, request)
        if not allowed:
            return too_many_requests(request, limiter.key_func(request))
        return await call_next(request)


class UnhandledErrorMiddleware(BaseHTTPMiddleware):
    """Nieoczekiwany blad -> 500 bez szczegolow; siedzi pod CORS wiec front widzi body."""

    async def dispatch(self, request: Request, call_next) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            logger.exception(f"Unhandled error on {request.method} {request.url.path}: {e}")
            return JSONResponse(status_code=500, content={"detail": "Server error"})


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Naglowki bezpieczenstwa na kazdej odpowiedzi (odpowiednik helmet)."""

    CSP = "default-src 'self'; frame-ancestors 'none'; object-src 'none'; base-uri 'self'"
    DOCS_CSP = (
        "default-src 'self'; script-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
        "style-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; img-src 'self' data: https:"
    )

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)

        is_docs = request.url.path in DOCS_PATHS
        response.headers["Content-Security-Policy"] = self.DOCS_CSP if is_docs else self.CSP
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "no-referrer"
        response.headers["Cross-Origin-Resource-Policy"] = "same-origin"
        return response
