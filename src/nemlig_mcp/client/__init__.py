"""
Nemlig API client: session cookies, rate limiting, HTTP transport,
response parsers and the client that ties them together.
"""

from .api import NemligClient
from .rate_limit import RateLimiter
from .session import SessionStore
from .transport import HttpRequest, HttpResponse, HttpTransport, build_transport

__all__ = [
    "NemligClient",
    "RateLimiter",
    "SessionStore",
    "HttpRequest",
    "HttpResponse",
    "HttpTransport",
    "build_transport",
]
