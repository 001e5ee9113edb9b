"""
Data models for Nemlig products, baskets, orders and delivery slots.

All models are immutable snapshots built fresh from a response body; nothing
here is cached between calls.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional


@dataclass(frozen=True)
class NutritionalInfo:
    """Nutrition per 100 g/ml as reported by Nemlig"""
    energy_kj: Optional[float] = None
    energy_kcal: Optional[float] = None
    fat: Optional[float] = None
    saturated_fat: Optional[float] = None
    carbohydrates: Optional[float] = None
    sugar: Optional[float] = None
    protein: Optional[float] = None
    salt: Optional[float] = None
    fiber: Optional[float] = None


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    price: float = 0.0
    unit: Optional[str] = None
    brand: Optional[str] = None
    category: Optional[str] = None
    image_url: Optional[str] = None
    description: Optional[str] = None
    in_stock: bool = True
    nutritional_info: Optional[NutritionalInfo] = None


@dataclass(frozen=True)
class SearchResult:
    """Search hits in the order Nemlig ranked them.

    page and page_size echo the request; the search endpoint only takes a flat
    "take" count, so they are not a statement about upstream paging.
    """
    query: str
    products: List[Product]
    total_results: int
    page: int = 1
    page_size: int = 20


@dataclass(frozen=True)
class CartItem:
    product_id: str
    product_name: str
    quantity: int
    price_per_unit: float
    total_price: float


@dataclass(frozen=True)
class Cart:
    items: List[CartItem] = field(default_factory=list)
    total_price: float = 0.0
    item_count: int = 0


class OrderStatus(Enum):
    PENDING = 0
    CONFIRMED = 1
    PROCESSING = 2
    DELIVERED = 3
    CANCELLED = 4

    @classmethod
    def from_code(cls, code: Any) -> "OrderStatus":
        """Decode an upstream status code.

        Unknown or malformed codes decode to PENDING instead of failing, so a
        new upstream status never breaks order listing.
        """
        if isinstance(code, bool):
            return cls.PENDING
        try:
            return cls(int(code))
        except (TypeError, ValueError, OverflowError):
            return cls.PENDING


@dataclass(frozen=True)
class Order:
    id: str
    order_number: str
    date: str
    status: OrderStatus
    total_price: float
    sub_total: float = 0.0
    delivery_address: Optional[str] = None
    delivery_time: Optional[str] = None
    is_editable: bool = False
    is_cancellable: bool = False


@dataclass(frozen=True)
class OrderLine:
    product_number: str
    product_name: str
    group_name: Optional[str] = None
    quantity: int = 0
    unit_price: float = 0.0
    amount: float = 0.0
    discount_amount: float = 0.0
    is_product_line: bool = True
    campaign_name: Optional[str] = None


@dataclass(frozen=True)
class CouponLine:
    type: Optional[str] = None
    name: Optional[str] = None
    coupon_number: Optional[str] = None


@dataclass(frozen=True)
class OrderDetail:
    """Expanded order. lines is never empty for a real order."""
    id: str
    order_number: str
    order_date: str
    lines: List[OrderLine]
    status: OrderStatus = OrderStatus.PENDING
    total: float = 0.0
    sub_total: float = 0.0
    shipping_price: float = 0.0
    packaging_price: float = 0.0
    deposit_price: float = 0.0
    coupon_discount: float = 0.0
    total_product_discount: float = 0.0
    number_of_products: int = 0
    delivery_address: Optional[str] = None
    delivery_time: Optional[str] = None
    coupon_lines: List[CouponLine] = field(default_factory=list)


@dataclass(frozen=True)
class DeliverySlot:
    id: str
    date: str
    time_from: str
    time_to: str
    available: bool = True
    price: float = 0.0
