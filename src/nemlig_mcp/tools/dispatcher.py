"""
Tool dispatcher: maps tool names and JSON argument objects onto NemligClient
calls and turns the outcome into the tool result shape.

Every result is either {"success": True, ...fields} or
{"success": False, "error": "<message>"}; dispatch() never raises.
"""

import dataclasses
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Iterable, Optional

from ..client import NemligClient
from ..errors import ValidationError
from ..result import Failure, Result

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_LIMIT = 20
DEFAULT_PAGE = 1
DEFAULT_ORDER_LIMIT = 10
DEFAULT_QUANTITY = 1

# Fields left out of the compact product entries in search results
_SEARCH_EXCLUDE = ("image_url", "description", "nutritional_info")


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def serialize(value: Any, exclude: Iterable[str] = ()) -> Any:
    """Turn models into JSON-ready dicts with camelCase keys.

    None-valued fields are dropped and enums are written by name.
    """
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            _camel(f.name): serialize(getattr(value, f.name))
            for f in dataclasses.fields(value)
            if f.name not in exclude and getattr(value, f.name) is not None
        }
    if isinstance(value, (list, tuple)):
        return [serialize(item, exclude) for item in value]
    if isinstance(value, Enum):
        return value.name
    return value


def error_result(message: str) -> Dict[str, Any]:
    return {"success": False, "error": message or "Unknown error"}


def _required_str(arguments: Dict[str, Any], key: str) -> str:
    value = arguments.get(key)
    if value is None:
        raise ValidationError(f"Missing required parameter: {key}")
    if not isinstance(value, str):
        raise ValidationError(f"Parameter '{key}' must be a string")
    if not value.strip():
        raise ValidationError(f"Parameter '{key}' must not be empty")
    return value.strip()


def _optional_int(arguments: Dict[str, Any], key: str, default: int, minimum: int = 1) -> int:
    value = arguments.get(key)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"Parameter '{key}' must be a number")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(f"Parameter '{key}' must be a whole number")
        value = int(value)
    if value < minimum:
        raise ValidationError(f"Parameter '{key}' must be at least {minimum}")
    return value


class ToolDispatcher:
    """Validates tool arguments, calls the client and shapes the result"""

    def __init__(self, client: NemligClient):
        self.client = client
        self._handlers: Dict[str, Callable[[Dict[str, Any]], Awaitable[Dict[str, Any]]]] = {
            "search_products": self._search_products,
            "get_product_details": self._get_product_details,
            "view_cart": self._view_cart,
            "add_to_cart": self._add_to_cart,
            "remove_from_cart": self._remove_from_cart,
            "get_order_history": self._get_order_history,
            "get_order_details": self._get_order_details,
            "get_delivery_slots": self._get_delivery_slots,
            "authenticate": self._authenticate,
            "force_reauthenticate": self._force_reauthenticate,
        }

    @property
    def tool_names(self):
        return list(self._handlers)

    async def dispatch(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        logger.info(f"Tool called: {name}")
        handler = self._handlers.get(name)
        if handler is None:
            return error_result(f"Unknown tool: {name}")
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            return error_result("Tool arguments must be a JSON object")

        try:
            return await handler(arguments)
        except ValidationError as e:
            logger.info(f"Rejected {name} call: {e.message}")
            return error_result(e.message)
        except Exception as e:
            logger.exception(f"Unexpected error in tool {name}")
            return error_result(f"Unexpected error in {name}: {str(e) or type(e).__name__}")

    @staticmethod
    def _respond(result: Result, build: Callable[[Any], Dict[str, Any]]) -> Dict[str, Any]:
        if isinstance(result, Failure):
            return error_result(str(result.error))
        return {"success": True, **build(result.value)}

    async def _search_products(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        query = _required_str(arguments, "query")
        limit = _optional_int(arguments, "limit", DEFAULT_SEARCH_LIMIT)
        page = _optional_int(arguments, "page", DEFAULT_PAGE)

        result = await self.client.search_products(query, limit=limit, page=page)
        return self._respond(result, lambda found: {
            "query": found.query,
            "products": serialize(found.products, exclude=_SEARCH_EXCLUDE),
            "totalResults": found.total_results,
            "page": found.page,
            "pageSize": found.page_size,
        })

    async def _get_product_details(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        product_id = _required_str(arguments, "productId")
        result = await self.client.get_product(product_id)
        return self._respond(result, lambda product: {"product": serialize(product)})

    async def _view_cart(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        result = await self.client.get_cart()
        return self._respond(result, lambda cart: {"cart": serialize(cart)})

    async def _add_to_cart(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        product_id = _required_str(arguments, "productId")
        quantity = _optional_int(arguments, "quantity", DEFAULT_QUANTITY, minimum=1)

        result = await self.client.add_to_cart(product_id, quantity)
        return self._respond(result, lambda cart: {
            "message": f"Added {quantity} item(s) to cart",
            "productId": product_id,
            "quantity": quantity,
            "cart": serialize(cart),
        })

    async def _remove_from_cart(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        product_id = _required_str(arguments, "productId")
        result = await self.client.remove_from_cart(product_id)
        return self._respond(result, lambda cart: {
            "message": "Removed item from cart",
            "productId": product_id,
            "cart": serialize(cart),
        })

    async def _get_order_history(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        limit = _optional_int(arguments, "limit", DEFAULT_ORDER_LIMIT)
        result = await self.client.get_orders(limit=limit)
        return self._respond(result, lambda orders: {
            "orders": serialize(orders),
            "count": len(orders),
        })

    async def _get_order_details(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        order_id = _required_str(arguments, "orderId")
        result = await self.client.get_order_details(order_id)
        return self._respond(result, lambda order: {"order": serialize(order)})

    async def _get_delivery_slots(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        result = await self.client.get_delivery_slots()
        return self._respond(result, lambda slots: {"slots": serialize(slots)})

    async def _authenticate(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        result = await self.client.authenticate()
        return self._respond(result, lambda _: {"message": "Authenticated with Nemlig"})

    async def _force_reauthenticate(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        self.client.session_store.clear()
        logger.info("Session cookies cleared, logging in again")
        result = await self.client.authenticate()
        return self._respond(result, lambda _: {
            "message": "Session cleared and authenticated with Nemlig again",
        })
