from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Dict, Generic, List, Literal, Optional, TypeVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from .money import ZERO, quantize, to_decimal

T = TypeVar("T")


def _money(value: Any) -> Any:
    if value is None or isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float, str)):
        return to_decimal(value)
    return value


Money = Annotated[Decimal, BeforeValidator(_money)]


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


class Product(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    price: Money
    original_price: Optional[Money] = None
    rating: float = 0.0
    reviews: int = 0
    image: str = ""
    category: str = ""
    is_flash: bool = False
    is_hot: bool = False
    time_left: Optional[str] = None
    description: Optional[str] = None
    seller_id: Optional[str] = None

    @classmethod
    def from_backend(cls, data: Dict[str, Any]) -> "Product":
        """Normalize either backend product shape into a Product.

        The catalog endpoints return ``starting_price``/``buy_now_price``,
        an ``images`` list and a nested ``category`` object; older endpoints
        and the static fallback already use the flat storefront shape.
        """

        price = data.get("price")
        if price is None:
            price = data.get("buy_now_price") or data.get("starting_price") or 0

        image = data.get("image")
        if not image:
            images = data.get("images") or []
            image = images[0] if images else ""

        category = data.get("category") or ""
        if isinstance(category, dict):
            category = category.get("name", "")

        return cls(
            id=str(data["id"]),
            title=data.get("title") or data.get("name") or "",
            price=price,
            original_price=data.get("original_price", data.get("originalPrice")),
            rating=float(data.get("rating") or 0.0),
            reviews=int(data.get("reviews", data.get("review_count")) or 0),
            image=image,
            category=category,
            is_flash=bool(data.get("is_flash", data.get("isFlash", False))),
            is_hot=bool(data.get("is_hot", data.get("isHot", data.get("featured", False)))),
            time_left=data.get("time_left", data.get("timeLeft")),
            description=data.get("description"),
            seller_id=data.get("seller_id", data.get("sellerId")),
        )


class CartItem(Product):
    quantity: int = Field(1, ge=1)

    @classmethod
    def from_product(cls, product: Product, quantity: int = 1) -> "CartItem":
        return cls(**product.model_dump(exclude={"quantity"}), quantity=quantity)

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


class ProductFilter(BaseModel):
    page: Optional[int] = None
    limit: Optional[int] = None
    category: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    condition: Optional[str] = None
    status: Optional[str] = None
    sort_by: Optional[Literal["created_at", "price", "title"]] = None
    sort_order: Optional[Literal["asc", "desc"]] = None
    search: Optional[str] = None

    def as_params(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class Page(BaseModel, Generic[T]):
    """Result of a list endpoint."""

    items: List[T] = Field(default_factory=list)
    total: int = 0
    success: bool = True
    message: Optional[str] = None


class Category(BaseModel):
    id: str
    name: str
    slug: str = ""
    description: Optional[str] = None
    image_url: Optional[str] = None
    parent_id: Optional[str] = None
    sort_order: int = 0
    is_active: bool = True
    children: List["Category"] = Field(default_factory=list)
    attributes: List["CategoryAttribute"] = Field(default_factory=list)


class CategoryAttribute(BaseModel):
    id: str
    category_id: str = ""
    name: str
    type: str = "text"
    options: List[str] = Field(default_factory=list)
    required: bool = False
    sort_order: int = 0


class ProductCollection(BaseModel):
    id: str
    name: str
    slug: str = ""
    description: Optional[str] = None
    image_url: Optional[str] = None
    is_active: bool = True
    sort_order: int = 0


class ProductVariant(BaseModel):
    id: str
    product_id: str = ""
    sku: Optional[str] = None
    name: str = ""
    price: Optional[Money] = None
    compare_at_price: Optional[Money] = None
    stock: int = 0
    attributes: Dict[str, str] = Field(default_factory=dict)
    is_available: bool = True


class InventoryStock(BaseModel):
    id: str = ""
    product_id: str
    variant_id: Optional[str] = None
    quantity: int = 0
    reserved: int = 0
    available: int = 0
    low_stock_alert: int = 0
    last_updated: Optional[datetime] = None


class StockMovement(BaseModel):
    id: str = ""
    product_id: str
    variant_id: Optional[str] = None
    type: Literal["in", "out", "adjustment", "return"]
    quantity: int
    reason: Optional[str] = None
    reference: Optional[str] = None
    created_at: Optional[datetime] = None


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------


class User(BaseModel):
    id: str
    email: str
    first_name: str = ""
    last_name: str = ""
    role: Literal["buyer", "seller", "admin"] = "buyer"
    avatar_url: Optional[str] = None
    phone: Optional[str] = None
    email_verified: bool = False


class AuthResponse(BaseModel):
    user: User
    access_token: str
    refresh_token: str = ""
    expires_in: int = 0


class Address(BaseModel):
    """Address snapshot as sent with an order."""

    first_name: str
    last_name: str
    address_line1: str
    address_line2: Optional[str] = None
    city: str
    state: str
    postal_code: str
    country: str = "US"
    phone: Optional[str] = None


class SavedAddress(Address):
    """Entry in the user's address book."""

    id: str
    type: Literal["shipping", "billing"] = "shipping"
    label: str = ""
    company: Optional[str] = None
    is_default: bool = False


# ---------------------------------------------------------------------------
# Orders & payments
# ---------------------------------------------------------------------------


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    def can_transition_to(self, target: "OrderStatus") -> bool:
        return target in _ORDER_TRANSITIONS[self]


_ORDER_TRANSITIONS: Dict[OrderStatus, frozenset] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


class OrderItem(BaseModel):
    id: str = ""
    order_id: str = ""
    product_id: str
    quantity: int
    unit_price: Money
    total: Money = ZERO


class Order(BaseModel):
    id: str
    user_id: str = ""
    status: OrderStatus = OrderStatus.PENDING
    subtotal: Money = ZERO
    tax_amount: Money = ZERO
    shipping_cost: Money = ZERO
    discount_amount: Money = ZERO
    total_amount: Money = ZERO
    shipping_address: Optional[Address] = None
    billing_address: Optional[Address] = None
    payment_id: Optional[str] = None
    tracking_number: Optional[str] = None
    notes: Optional[str] = None
    items: List[OrderItem] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def grand_total(self) -> Decimal:
        """Total due, recomputed from the parts when the server sent none."""

        if self.total_amount:
            return quantize(self.total_amount)
        return quantize(self.subtotal + self.tax_amount + self.shipping_cost - self.discount_amount)


class CreateOrderRequest(BaseModel):
    shipping_address: Address
    billing_address: Address
    notes: Optional[str] = None


class OrderStatistics(BaseModel):
    total_orders: int = 0
    total_revenue: Money = ZERO
    pending_orders: int = 0
    shipped_orders: int = 0
    delivered_orders: int = 0
    cancelled_orders: int = 0
    average_order_value: Money = ZERO


class PaymentIntentStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class PaymentIntent(BaseModel):
    id: str
    amount: int  # minor units
    currency: str = "usd"
    status: PaymentIntentStatus = PaymentIntentStatus.PENDING
    client_secret: Optional[str] = None
    payment_method_id: Optional[str] = None
    created_at: Optional[datetime] = None


class PaymentMethod(BaseModel):
    id: str
    type: Literal["credit_card", "debit_card", "paypal", "bank_account"] = "credit_card"
    provider: Literal["stripe", "paypal", "bank"] = "stripe"
    method_ref: str = ""
    is_default: bool = False
    last4: Optional[str] = None
    expiry_month: Optional[int] = None
    expiry_year: Optional[int] = None
    brand: Optional[str] = None


# ---------------------------------------------------------------------------
# Auctions
# ---------------------------------------------------------------------------


class Bid(BaseModel):
    id: str
    auction_id: str
    user_id: str = ""
    amount: Money
    is_autobid: bool = False
    created_at: Optional[datetime] = None


class Auction(BaseModel):
    id: str
    product_id: str
    seller_id: str = ""
    title: str = ""
    description: Optional[str] = None
    starting_price: Money = ZERO
    reserve_price: Optional[Money] = None
    current_price: Money = ZERO
    buy_now_price: Optional[Money] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    status: Literal["scheduled", "live", "ended", "cancelled"] = "scheduled"
    image: Optional[str] = None
    total_bids: int = 0
    min_bid_increment: Money = ZERO
    is_live: bool = False


class AuctionStats(BaseModel):
    total_bids: int = 0
    unique_bidders: int = 0
    highest_bid: Money = ZERO
    lowest_bid: Money = ZERO
    average_bid: Money = ZERO
    bid_history: List[Bid] = Field(default_factory=list)


class AutoBidSettings(BaseModel):
    enabled: bool
    max_amount: Money


# ---------------------------------------------------------------------------
# Chat
# ---------------------------------------------------------------------------


class ChatTurn(BaseModel):
    role: Literal["user", "assistant"]
    text: str


Category.model_rebuild()
