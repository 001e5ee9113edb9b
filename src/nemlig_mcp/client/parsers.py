"""
Parsers turning Nemlig response bodies into models.

Nemlig's web API is undocumented and its field names have drifted, so every
parser looks fields up through a list of known aliases. Missing optional
fields get defaults, unknown fields are ignored and a missing nested object
means "no data". A missing identifier is never defaulted: it fails the parse.
"""

import json
import math
from typing import Any, Dict, List, Optional

from ..errors import ParseError
from ..models import (
    Cart,
    CartItem,
    CouponLine,
    DeliverySlot,
    NutritionalInfo,
    Order,
    OrderDetail,
    OrderLine,
    OrderStatus,
    Product,
    SearchResult,
)
from ..result import Failure, Result, Success


class _MissingField(Exception):
    def __init__(self, field: str, reason: str):
        super().__init__(reason)
        self.field = field
        self.reason = reason


def _first(obj: Any, *keys: str) -> Any:
    """Value of the first alias present (and not null) in obj"""
    if not isinstance(obj, dict):
        return None
    for key in keys:
        value = obj.get(key)
        if value is not None:
            return value
    return None


def _as_str(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (dict, list)):
        return None
    text = str(value).strip()
    return text or None


def _as_float(value: Any, default: float = 0.0) -> float:
    if isinstance(value, bool) or value is None:
        return default
    try:
        number = float(str(value).replace(",", ".")) if isinstance(value, str) else float(value)
    except (TypeError, ValueError, OverflowError):
        return default
    # 1e400 decodes to inf; money and nutrition values are always finite
    return number if math.isfinite(number) else default


def _as_optional_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    result = _as_float(value, default=float("nan"))
    return None if result != result else result


def _as_int(value: Any, default: int = 0) -> int:
    if isinstance(value, bool) or value is None:
        return default
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default


def _as_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes"):
            return True
        if lowered in ("false", "0", "no"):
            return False
    return default


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _require_id(obj: Any, field: str, *keys: str) -> str:
    identifier = _as_str(_first(obj, *keys))
    if not identifier:
        raise _MissingField(field, "identifier is missing or empty")
    return identifier


def _load_json(body: str) -> Any:
    if body is None or not str(body).strip():
        raise _MissingField("<body>", "response body is empty")
    try:
        return json.loads(body)
    except ValueError as e:
        raise _MissingField("<body>", f"response is not valid JSON ({e})")
    except RecursionError:
        raise _MissingField("<body>", "response is nested too deeply")


def _load_object(body: str) -> Dict[str, Any]:
    root = _load_json(body)
    if not isinstance(root, dict):
        raise _MissingField("<body>", f"expected a JSON object, got {type(root).__name__}")
    return root


def _parse(func, *args) -> Result:
    try:
        return Success(func(*args))
    except _MissingField as e:
        return Failure(ParseError(e.field, e.reason))


def _round_money(value: float) -> float:
    return round(value, 2)


def _format_delivery_time(value: Any) -> Optional[str]:
    if isinstance(value, dict):
        start = _as_str(_first(value, "Start", "From")) or ""
        end = _as_str(_first(value, "End", "To")) or ""
        if not start and not end:
            return None
        return f"{start} - {end}"
    return _as_str(value)


def _format_address(value: Any) -> Optional[str]:
    if isinstance(value, dict):
        parts = [
            _as_str(_first(value, "StreetName", "Street")),
            _as_str(_first(value, "HouseNumber")),
            _as_str(_first(value, "PostalCode", "ZipCode")),
            _as_str(_first(value, "PostalDistrict", "City")),
        ]
        text = " ".join(part for part in parts if part)
        return text or None
    return _as_str(value)


# Products

def _nutrition_from(obj: Dict[str, Any]) -> Optional[NutritionalInfo]:
    data = _first(obj, "NutritionalInfo", "Nutrition", "NutritionalContent")
    if not isinstance(data, dict):
        return None

    info = NutritionalInfo(
        energy_kj=_as_optional_float(_first(data, "EnergyKj", "EnergyKJ")),
        energy_kcal=_as_optional_float(_first(data, "EnergyKcal", "Energy")),
        fat=_as_optional_float(_first(data, "Fat")),
        saturated_fat=_as_optional_float(_first(data, "SaturatedFat")),
        carbohydrates=_as_optional_float(_first(data, "Carbohydrates", "Carbohydrate")),
        sugar=_as_optional_float(_first(data, "Sugar", "Sugars")),
        protein=_as_optional_float(_first(data, "Protein")),
        salt=_as_optional_float(_first(data, "Salt")),
        fiber=_as_optional_float(_first(data, "Fiber", "Fibre", "DietaryFiber")),
    )
    if info == NutritionalInfo():
        return None
    return info


def _product_from(obj: Any, field: str = "Id") -> Product:
    if not isinstance(obj, dict):
        raise _MissingField(field, "product entry is not an object")

    availability = obj.get("Availability")
    in_stock = _first(availability, "IsAvailableInStock")
    if in_stock is None:
        in_stock = _first(obj, "IsAvailableInStock", "InStock")

    image = _first(obj, "PrimaryImage", "ImageUrl", "Image")
    if isinstance(image, dict):
        image = _first(image, "Url", "Src")

    return Product(
        id=_require_id(obj, field, "Id", "ProductId", "ProductNumber"),
        name=_as_str(_first(obj, "Name", "ProductName")) or "",
        price=_as_float(_first(obj, "Price", "UnitPrice")),
        unit=_as_str(_first(obj, "UnitPriceLabel", "Unit", "Description2")),
        brand=_as_str(_first(obj, "Brand")),
        category=_as_str(_first(obj, "Category", "CategoryName")),
        image_url=_as_str(image),
        description=_as_str(_first(obj, "Description", "LongDescription")),
        in_stock=_as_bool(in_stock, True),
        nutritional_info=_nutrition_from(obj),
    )


def parse_product(obj: Any) -> Result[Product]:
    """Decode one product object (already loaded from JSON)"""
    return _parse(_product_from, obj)


def _search_from(body: str, query: str, limit: int, page: int) -> SearchResult:
    root = _load_object(body)
    container = root.get("Products")

    if isinstance(container, dict):
        items = _as_list(container.get("Products"))
        num_found = container.get("NumFound")
    else:
        items = _as_list(container)
        num_found = root.get("NumFound")

    products = [
        _product_from(item, f"Products[{index}].Id")
        for index, item in enumerate(items)
    ]

    return SearchResult(
        query=query,
        products=products,
        total_results=_as_int(num_found, len(products)),
        page=page,
        page_size=limit,
    )


def parse_search(body: str, query: str, limit: int = 20, page: int = 1) -> Result[SearchResult]:
    """Decode GET /s/0/1/0/Search/Search. Product order is kept as returned."""
    return _parse(_search_from, body, query, limit, page)


# Basket

def _cart_item_from(obj: Any, index: int) -> CartItem:
    field = f"Lines[{index}].Id"
    if not isinstance(obj, dict):
        raise _MissingField(field, "basket line is not an object")

    quantity = _as_int(_first(obj, "Quantity", "Count"))
    if quantity < 0:
        raise _MissingField(f"Lines[{index}].Quantity", f"negative quantity {quantity}")

    unit_price = _as_float(_first(obj, "Price", "ItemPrice", "UnitPrice"))
    reported_total = _first(obj, "TotalPrice", "Amount", "LineTotal")
    total = _as_float(reported_total) if reported_total is not None else quantity * unit_price

    return CartItem(
        product_id=_require_id(obj, field, "Id", "ProductId", "ProductNumber"),
        product_name=_as_str(_first(obj, "Name", "ProductName")) or "",
        quantity=quantity,
        price_per_unit=unit_price,
        total_price=_round_money(total),
    )


def _cart_from(body: str) -> Cart:
    root = _load_object(body)
    items = [
        _cart_item_from(line, index)
        for index, line in enumerate(_as_list(_first(root, "Lines", "Items")))
    ]

    total = _first(root, "TotalPrice", "Total", "TotalProductsPrice")
    return Cart(
        items=items,
        total_price=_round_money(
            _as_float(total) if total is not None else sum(item.total_price for item in items)
        ),
        item_count=_as_int(_first(root, "NumberOfProducts", "NumberOfLines"), len(items)),
    )


def parse_cart(body: str) -> Result[Cart]:
    """Decode a basket body.

    GetBasket and AddToBasket (adding as well as removing) all return the
    same basket shape, and all three are decoded here.
    """
    return _parse(_cart_from, body)


# Orders

def _order_from(obj: Any, index: int) -> Order:
    field = f"Orders[{index}].Id"
    if not isinstance(obj, dict):
        raise _MissingField(field, "order entry is not an object")

    return Order(
        id=_require_id(obj, field, "Id", "OrderId"),
        order_number=_as_str(_first(obj, "OrderNumber")) or "",
        date=_as_str(_first(obj, "OrderDate", "Date")) or "",
        status=OrderStatus.from_code(_first(obj, "Status", "StatusCode")),
        total_price=_as_float(_first(obj, "Total", "TotalPrice")),
        sub_total=_as_float(_first(obj, "SubTotal")),
        delivery_address=_format_address(_first(obj, "DeliveryAddress")),
        delivery_time=_format_delivery_time(_first(obj, "DeliveryTime")),
        is_editable=_as_bool(_first(obj, "IsEditable"), False),
        is_cancellable=_as_bool(_first(obj, "IsCancellable"), False),
    )


def _orders_from(body: str) -> List[Order]:
    root = _load_json(body)
    if isinstance(root, dict):
        items = _as_list(_first(root, "Orders", "Items"))
    elif isinstance(root, list):
        items = root
    else:
        raise _MissingField("<body>", f"expected orders, got {type(root).__name__}")
    return [_order_from(item, index) for index, item in enumerate(items)]


def parse_orders(body: str) -> Result[List[Order]]:
    """Decode GET /order/GetBasicOrderHistory"""
    return _parse(_orders_from, body)


def _order_line_from(obj: Any, index: int) -> OrderLine:
    if not isinstance(obj, dict):
        raise _MissingField(f"Lines[{index}]", "order line is not an object")

    is_deposit = _as_bool(_first(obj, "IsDepositLine"), False)
    return OrderLine(
        product_number=_as_str(_first(obj, "ProductNumber", "ProductId", "Id")) or "",
        product_name=_as_str(_first(obj, "ProductName", "Name")) or "",
        group_name=_as_str(_first(obj, "GroupName", "MainGroupName")),
        quantity=_as_int(_first(obj, "Quantity")),
        unit_price=_as_float(_first(obj, "ItemPrice", "UnitPrice", "Price")),
        amount=_as_float(_first(obj, "Amount", "TotalPrice")),
        discount_amount=_as_float(_first(obj, "DiscountAmount", "Discount")),
        is_product_line=_as_bool(_first(obj, "IsProductLine"), not is_deposit),
        campaign_name=_as_str(_first(obj, "CampaignName")),
    )


def _coupon_line_from(obj: Any) -> CouponLine:
    return CouponLine(
        type=_as_str(_first(obj, "Type", "CouponType")),
        name=_as_str(_first(obj, "Name", "Description")),
        coupon_number=_as_str(_first(obj, "CouponNumber", "Number")),
    )


def _order_detail_from(body: str, order_id: str) -> OrderDetail:
    root = _load_object(body)
    # Some responses wrap the order in an "Order" object
    order = root.get("Order") if isinstance(root.get("Order"), dict) else root

    lines = [
        _order_line_from(line, index)
        for index, line in enumerate(_as_list(_first(order, "Lines", "OrderLines")))
    ]
    if not lines:
        raise _MissingField("Lines", "order has no lines")

    identifier = _as_str(_first(order, "Id", "OrderId")) or _as_str(order_id)
    if not identifier:
        raise _MissingField("Id", "identifier is missing or empty")

    return OrderDetail(
        id=identifier,
        order_number=_as_str(_first(order, "OrderNumber")) or "",
        order_date=_as_str(_first(order, "OrderDate", "Date")) or "",
        lines=lines,
        status=OrderStatus.from_code(_first(order, "Status", "StatusCode")),
        total=_as_float(_first(order, "Total", "TotalPrice")),
        sub_total=_as_float(_first(order, "SubTotal")),
        shipping_price=_as_float(_first(order, "ShippingPrice", "DeliveryPrice")),
        packaging_price=_as_float(_first(order, "PackagingPrice")),
        deposit_price=_as_float(_first(order, "DepositPrice")),
        coupon_discount=_as_float(_first(order, "CouponDiscount")),
        total_product_discount=_as_float(_first(order, "TotalProductDiscount")),
        number_of_products=_as_int(_first(order, "NumberOfProducts"), len(lines)),
        delivery_address=_format_address(_first(order, "DeliveryAddress")),
        delivery_time=_format_delivery_time(_first(order, "DeliveryTime")),
        coupon_lines=[
            _coupon_line_from(coupon)
            for coupon in _as_list(_first(order, "CouponLines", "Coupons"))
            if isinstance(coupon, dict)
        ],
    )


def parse_order_detail(body: str, order_id: str = "") -> Result[OrderDetail]:
    """Decode GET /order/GetOrderHistory.

    A real order always has lines; a body that decodes to zero lines is
    reported as a ParseError rather than an empty order.
    """
    return _parse(_order_detail_from, body, order_id)


# Delivery slots

def _slot_from(obj: Any, index: int) -> DeliverySlot:
    field = f"Slots[{index}].Id"
    if not isinstance(obj, dict):
        raise _MissingField(field, "slot entry is not an object")

    return DeliverySlot(
        id=_require_id(obj, field, "Id", "SlotId", "TimeslotId"),
        date=_as_str(_first(obj, "Date", "DeliveryDate")) or "",
        time_from=_as_str(_first(obj, "TimeFrom", "StartTime", "Start")) or "",
        time_to=_as_str(_first(obj, "TimeTo", "EndTime", "End")) or "",
        available=_as_bool(_first(obj, "IsAvailable", "Available"), True),
        price=_as_float(_first(obj, "Price", "DeliveryPrice")),
    )


def _slots_from(body: str) -> List[DeliverySlot]:
    root = _load_json(body)
    if isinstance(root, dict):
        items = _as_list(_first(root, "Slots", "DeliverySlots", "Timeslots"))
    elif isinstance(root, list):
        items = root
    else:
        raise _MissingField("<body>", f"expected slots, got {type(root).__name__}")
    return [_slot_from(item, index) for index, item in enumerate(items)]


def parse_delivery_slots(body: str) -> Result[List[DeliverySlot]]:
    """Decode a delivery slot listing.

    No Nemlig endpoint is known yet; this is the decode side of the extension
    point in NemligClient._fetch_delivery_slots.
    """
    return _parse(_slots_from, body)
