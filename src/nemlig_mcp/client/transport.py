"""
HTTP transport for the Nemlig API.

Every API call goes through HttpTransport.send(). Cross-cutting behaviour
(rate limiting, session cookies, request logging) is added as middleware with
a before/after hook around the single request primitive.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from http.cookiejar import http2time
from http.cookies import CookieError, SimpleCookie
from typing import Any, Dict, List, Optional, Sequence, Set
from urllib.parse import urlparse

import requests

from ..errors import TransportError
from ..result import Failure, Result, Success
from .rate_limit import RateLimiter
from .session import SessionStore

logger = logging.getLogger(__name__)


@dataclass
class HttpRequest:
    method: str
    url: str
    params: Optional[Dict[str, Any]] = None
    json_body: Optional[Any] = None
    headers: Dict[str, str] = field(default_factory=dict)
    cookies: Dict[str, str] = field(default_factory=dict)

    @property
    def host(self) -> str:
        return urlparse(self.url).hostname or ""


@dataclass
class HttpResponse:
    status_code: int
    text: str = ""
    headers: Dict[str, str] = field(default_factory=dict)
    cookies: Dict[str, str] = field(default_factory=dict)
    url: str = ""
    # Names the server deleted (Max-Age=0 or an Expires date in the past)
    expired_cookies: List[str] = field(default_factory=list)

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


class Middleware:
    """Hook pair run around each request. Both hooks default to no-ops."""

    async def before(self, request: HttpRequest) -> None:
        pass

    async def after(self, request: HttpRequest, response: HttpResponse) -> None:
        pass


class RateLimitMiddleware(Middleware):
    def __init__(self, limiter: RateLimiter):
        self.limiter = limiter

    async def before(self, request: HttpRequest) -> None:
        await self.limiter.acquire()


class CookieMiddleware(Middleware):
    """Sends the stored cookies for the request host and keeps new ones"""

    def __init__(self, store: SessionStore):
        self.store = store

    async def before(self, request: HttpRequest) -> None:
        stored = self.store.load_cookies(request.host)
        stored.update(request.cookies)
        request.cookies = stored

    async def after(self, request: HttpRequest, response: HttpResponse) -> None:
        self.store.save_cookies(request.host, response.cookies)
        self.store.remove_cookies(request.host, response.expired_cookies)


class LoggingMiddleware(Middleware):
    async def before(self, request: HttpRequest) -> None:
        logger.debug(f"Request: {request.method} {request.url}")

    async def after(self, request: HttpRequest, response: HttpResponse) -> None:
        logger.debug(f"Response: {response.status_code} {request.url}")


def _expired_cookie_names(response) -> List[str]:
    """Cookies a response deletes.

    The requests cookie jar drops an expired cookie without a trace, so the
    raw Set-Cookie headers are read instead.
    """
    headers = getattr(getattr(response, "raw", None), "headers", None)
    if headers is None or not hasattr(headers, "getlist"):
        return []

    names = []
    for header in headers.getlist("Set-Cookie"):
        cookie = SimpleCookie()
        try:
            cookie.load(header)
        except CookieError:
            continue
        for name, morsel in cookie.items():
            max_age = morsel["max-age"].strip()
            expires = http2time(morsel["expires"]) if morsel["expires"] else None
            if (max_age.lstrip("-").isdigit() and int(max_age) <= 0) or (
                expires is not None and expires <= time.time()
            ):
                names.append(name)
    return names


class HttpTransport:
    """Performs requests with requests.request in a worker thread.

    send() never raises for network problems; they come back as a Failure
    carrying a TransportError. Response bodies are returned as text, this
    layer does not interpret JSON.
    """

    def __init__(self, timeout_ms: int = 30000, middlewares: Sequence[Middleware] = ()):
        self.timeout = timeout_ms / 1000.0
        self.middlewares: List[Middleware] = list(middlewares)

    def _perform(self, request: HttpRequest) -> HttpResponse:
        response = requests.request(
            request.method,
            request.url,
            params=request.params,
            json=request.json_body,
            headers=request.headers,
            cookies=request.cookies or None,
            # requests has no write timeout; the read timeout covers the exchange
            timeout=(self.timeout, self.timeout),
        )

        # Login may answer with a redirect that sets cookies on the way
        cookies: Dict[str, str] = {}
        expired: Set[str] = set()
        for hop in list(response.history) + [response]:
            hop_cookies = hop.cookies.get_dict()
            cookies.update(hop_cookies)
            expired.difference_update(hop_cookies)
            for name in _expired_cookie_names(hop):
                cookies.pop(name, None)
                expired.add(name)

        return HttpResponse(
            status_code=response.status_code,
            text=response.text or "",
            headers=dict(response.headers),
            cookies=cookies,
            url=response.url,
            expired_cookies=sorted(expired),
        )

    async def send(self, request: HttpRequest) -> Result[HttpResponse]:
        for middleware in self.middlewares:
            await middleware.before(request)

        try:
            response = await asyncio.to_thread(self._perform, request)
        except requests.Timeout as e:
            logger.warning(f"Timeout after {self.timeout}s: {request.method} {request.url}")
            return Failure(TransportError(
                f"Request timed out after {self.timeout:g}s: {request.method} {request.url}", e
            ))
        except requests.ConnectionError as e:
            logger.warning(f"Connection error: {request.method} {request.url}: {e}")
            return Failure(TransportError(f"Could not connect to Nemlig: {e}", e))
        except requests.RequestException as e:
            logger.warning(f"Request failed: {request.method} {request.url}: {e}")
            return Failure(TransportError(f"Request to Nemlig failed: {e}", e))

        for middleware in reversed(self.middlewares):
            await middleware.after(request, response)

        return Success(response)


def build_transport(
    session_store: SessionStore,
    rate_limiter: RateLimiter,
    timeout_ms: int = 30000,
) -> HttpTransport:
    """Standard middleware stack: wait for a rate slot, attach cookies, log"""
    return HttpTransport(
        timeout_ms=timeout_ms,
        middlewares=[
            RateLimitMiddleware(rate_limiter),
            CookieMiddleware(session_store),
            LoggingMiddleware(),
        ],
    )
