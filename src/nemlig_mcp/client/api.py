"""
Client for the Nemlig web API.

Endpoints were discovered empirically (see https://github.com/schourode/nemlig)
and only a subset is known. Every method returns a Success or a Failure and
never raises; retries are left to the caller.
"""

import json
import logging
from typing import Callable, List, Optional
from urllib.parse import urlparse

from ..config import NemligConfig
from ..errors import (
    ConfigurationError,
    ProductNotFoundError,
    SessionExpiredError,
    UnsupportedOperationError,
    UpstreamError,
    ValidationError,
)
from ..models import Cart, DeliverySlot, Order, OrderDetail, Product, SearchResult
from ..result import Failure, Result, Success
from . import parsers
from .rate_limit import RateLimiter
from .session import SessionStore
from .transport import HttpRequest, HttpTransport, build_transport

logger = logging.getLogger(__name__)

LOGIN_PATH = "login/login"
SEARCH_PATH = "s/0/1/0/Search/Search"
GET_BASKET_PATH = "basket/GetBasket"
ADD_TO_BASKET_PATH = "basket/AddToBasket"
ORDER_HISTORY_PATH = "order/GetBasicOrderHistory"
ORDER_DETAIL_PATH = "order/GetOrderHistory"

# How many search hits to scan when looking a product up by id
PRODUCT_LOOKUP_TAKE = 20

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "User-Agent": "nemlig-mcp/1.0",
}


def _diagnostic(text: str, limit: int = 200) -> str:
    """Best-effort human readable message from an error body"""
    try:
        data = json.loads(text)
    except ValueError:
        data = None
    if isinstance(data, dict):
        for key in ("ErrorMessage", "Message", "message", "error"):
            if isinstance(data.get(key), str) and data[key].strip():
                return data[key].strip()
    text = (text or "").strip()
    if not text:
        return "no response body"
    return text if len(text) <= limit else text[:limit] + "..."


class NemligClient:
    """Async client for nemlig.com.

    One instance is meant to live for the whole process: it owns the session
    cookies and the rate limiter shared by every tool call.
    """

    def __init__(
        self,
        config: NemligConfig,
        session_store: Optional[SessionStore] = None,
        rate_limiter: Optional[RateLimiter] = None,
        transport: Optional[HttpTransport] = None,
    ):
        self.config = config
        self.session_store = session_store or SessionStore()
        self.rate_limiter = rate_limiter or RateLimiter(
            requests_per_second=config.rate_limit.requests_per_second,
            burst_size=config.rate_limit.burst_size,
        )
        self.transport = transport or build_transport(
            self.session_store, self.rate_limiter, config.timeout_ms
        )

    @property
    def host(self) -> str:
        return urlparse(self.config.api_url).hostname or ""

    def _url(self, path: str) -> str:
        return f"{self.config.api_url.rstrip('/')}/{path.lstrip('/')}"

    def _request(self, method: str, path: str, params=None, json_body=None) -> HttpRequest:
        headers = dict(DEFAULT_HEADERS)
        if json_body is not None:
            headers["Content-Type"] = "application/json"
        return HttpRequest(
            method=method,
            url=self._url(path),
            params=params,
            json_body=json_body,
            headers=headers,
        )

    async def _call(
        self,
        operation: str,
        request: HttpRequest,
        parse: Callable[[str], Result],
        login: bool = False,
    ) -> Result:
        sent = await self.transport.send(request)
        if isinstance(sent, Failure):
            logger.error(f"{operation} failed: {sent.error}")
            return sent

        response = sent.value
        if response.status_code in (401, 403) and not login:
            logger.warning(f"{operation}: session rejected with HTTP {response.status_code}")
            return Failure(SessionExpiredError(response.status_code, response.text))

        if not response.is_success:
            message = _diagnostic(response.text)
            logger.error(f"{operation} failed: {response.status_code} - {message}")
            return Failure(UpstreamError(
                f"{operation} failed: HTTP {response.status_code} - {message}",
                response.status_code,
                response.text,
            ))

        parsed = parse(response.text)
        if isinstance(parsed, Failure):
            logger.error(f"{operation}: could not parse response: {parsed.error}")
        return parsed

    async def authenticate(self) -> Result[str]:
        """Log in with the configured credentials.

        The session is carried by the Set-Cookie headers of the login response,
        which the transport stores. Without credentials this fails before any
        request is made.
        """
        if not self.config.has_credentials:
            logger.warning("Authentication skipped: username or password not configured")
            return Failure(ConfigurationError(
                "Username and password must be configured (NEMLIG_USERNAME / NEMLIG_PASSWORD)"
            ))

        logger.info(f"Authenticating with Nemlig API as {self.config.username}")
        request = self._request(
            "POST",
            LOGIN_PATH,
            json_body={
                "Username": self.config.username,
                "Password": self.config.password,
                "AppInstalled": False,
                "AutoLogin": False,
                "CheckForExistingProducts": True,
                "DoMerge": True,
            },
        )
        result = await self._call(
            "Authentication", request, lambda body: Success("authenticated"), login=True
        )
        if isinstance(result, Success):
            logger.info("Authentication successful - session cookies stored")
        return result

    async def search_products(self, query: str, limit: int = 20, page: int = 1) -> Result[SearchResult]:
        """Search the catalog. Nemlig takes a flat "take" count, page is only echoed."""
        if not query or not query.strip():
            return Failure(ValidationError("Search query must not be empty"))
        if limit < 1 or page < 1:
            return Failure(ValidationError("limit and page must be at least 1"))

        logger.info(f"Searching products: query='{query}', limit={limit}, page={page}")
        request = self._request("GET", SEARCH_PATH, params={"query": query, "take": limit})
        result = await self._call(
            "Search", request, lambda body: parsers.parse_search(body, query, limit, page)
        )
        if isinstance(result, Success):
            logger.info(f"Search completed: {result.value.total_results} results")
        return result

    async def get_product(self, product_id: str) -> Result[Product]:
        if not product_id or not product_id.strip():
            return Failure(ValidationError("Product id must not be empty"))

        logger.info(f"Getting product details: {product_id}")
        return await self._fetch_product(product_id.strip())

    async def _fetch_product(self, product_id: str) -> Result[Product]:
        # No product endpoint is known: search for the id and keep the exact match
        found = await self.search_products(product_id, limit=PRODUCT_LOOKUP_TAKE)
        if isinstance(found, Failure):
            return found

        for product in found.value.products:
            if product.id == product_id:
                return Success(product)

        logger.info(f"Product {product_id} not among {len(found.value.products)} search hits")
        return Failure(ProductNotFoundError(product_id))

    async def get_cart(self) -> Result[Cart]:
        logger.info("Getting cart")
        request = self._request("GET", GET_BASKET_PATH)
        return await self._call("Get cart", request, parsers.parse_cart)

    async def add_to_cart(self, product_id: str, quantity: int) -> Result[Cart]:
        if not product_id or not product_id.strip():
            return Failure(ValidationError("Product id must not be empty"))
        if quantity < 1:
            return Failure(ValidationError("Quantity must be at least 1"))

        logger.info(f"Adding to cart: productId={product_id}, quantity={quantity}")
        return await self._update_basket("Add to cart", product_id, quantity)

    async def remove_from_cart(self, product_id: str) -> Result[Cart]:
        """Remove a product by setting its basket quantity to 0.

        Quantity 0 on AddToBasket is the assumed removal convention; it has
        not been confirmed against a live response.
        """
        if not product_id or not product_id.strip():
            return Failure(ValidationError("Product id must not be empty"))

        logger.info(f"Removing from cart: {product_id}")
        return await self._update_basket("Remove from cart", product_id, 0)

    async def _update_basket(self, operation: str, product_id: str, quantity: int) -> Result[Cart]:
        request = self._request(
            "POST",
            ADD_TO_BASKET_PATH,
            json_body={"productId": product_id, "quantity": quantity},
        )
        return await self._call(operation, request, parsers.parse_cart)

    async def get_orders(self, limit: int = 10, skip: int = 0) -> Result[List[Order]]:
        if limit < 1 or skip < 0:
            return Failure(ValidationError("limit must be at least 1 and skip not negative"))

        logger.info(f"Getting order history: limit={limit}")
        request = self._request("GET", ORDER_HISTORY_PATH, params={"skip": skip, "take": limit})
        result = await self._call("Get orders", request, parsers.parse_orders)
        if isinstance(result, Success):
            logger.info(f"Retrieved {len(result.value)} orders")
        return result

    async def get_order_details(self, order_id: str) -> Result[OrderDetail]:
        if not order_id or not order_id.strip():
            return Failure(ValidationError("Order id must not be empty"))

        logger.info(f"Getting order details: {order_id}")
        request = self._request("GET", ORDER_DETAIL_PATH, params={"id": order_id})
        return await self._call(
            "Get order details", request, lambda body: parsers.parse_order_detail(body, order_id)
        )

    async def get_delivery_slots(self) -> Result[List[DeliverySlot]]:
        logger.info("Getting delivery slots")
        return await self._fetch_delivery_slots()

    async def _fetch_delivery_slots(self) -> Result[List[DeliverySlot]]:
        # No delivery slot endpoint is known; a response from one decodes
        # with parsers.parse_delivery_slots
        return Failure(UnsupportedOperationError("get_delivery_slots"))
