"""Read-only product catalog for a session."""

from __future__ import annotations

from typing import Iterator, Literal, Optional, Sequence, Tuple

from .console import warn
from .money import quantize
from .schemas import Product, ProductFilter
from .services.products import ProductService

FALLBACK_PRODUCTS: Tuple[Product, ...] = (
    Product(
        id="1",
        title="NeonX Runner Vapor",
        price="149.99",
        original_price="220.00",
        rating=4.9,
        reviews=128,
        image="https://picsum.photos/400/400?random=1",
        category="Active",
        is_flash=True,
        time_left="04:23:12",
        description="Built for speed. Ultra-light composite materials and energy-return foam.",
    ),
    Product(
        id="2",
        title="CyberSync Headset Pro",
        price="299.00",
        rating=4.8,
        reviews=854,
        image="https://picsum.photos/400/400?random=2",
        category="Audio",
        is_hot=True,
        description="Zero latency audio for the competitive edge.",
    ),
    Product(
        id="3",
        title="Quantm Smart Watch",
        price="350.00",
        rating=4.7,
        reviews=342,
        image="https://picsum.photos/400/400?random=3",
        category="Wearables",
        description="Biometric streaming and instant notifications.",
    ),
    Product(
        id="4",
        title="Velocity Drone MK-II",
        price="899.00",
        original_price="1200.00",
        rating=5.0,
        reviews=42,
        image="https://picsum.photos/400/400?random=4",
        category="Tech",
        is_flash=True,
        time_left="01:15:00",
        description="8K video at 120fps with obstacle avoidance and 45 minute flight time.",
    ),
    Product(
        id="5",
        title="MechKey RGB 60%",
        price="120.00",
        rating=4.6,
        reviews=1102,
        image="https://picsum.photos/400/400?random=5",
        category="Tech",
        description="Hot-swappable switches and per-key RGB programming.",
    ),
    Product(
        id="6",
        title="Urban Drift Pack",
        price="85.00",
        rating=4.8,
        reviews=215,
        image="https://picsum.photos/400/400?random=6",
        category="Active",
        description="Waterproof, tear-proof carrier for the city.",
    ),
    Product(
        id="7",
        title="HoloLens Visor",
        price="450.00",
        original_price="600.00",
        rating=4.5,
        reviews=88,
        image="https://picsum.photos/400/400?random=7",
        category="Tech",
        is_flash=True,
        time_left="00:45:00",
        description="Navigation, notifications, and media overlay.",
    ),
    Product(
        id="8",
        title="Boost Juice PowerBank",
        price="45.00",
        rating=4.9,
        reviews=3320,
        image="https://picsum.photos/400/400?random=8",
        category="Tech",
        is_hot=True,
        description="20,000mAh. Charges laptop, phone, and watch at once.",
    ),
)


class CatalogSnapshot:
    """Products fetched once and kept unchanged for the session."""

    def __init__(
        self,
        products: Sequence[Product],
        source: Literal["backend", "fallback"] = "backend",
    ) -> None:
        self._products: Tuple[Product, ...] = tuple(products)
        self.source = source

    @classmethod
    def load(cls, service: ProductService, category: Optional[str] = None) -> "CatalogSnapshot":
        """Fetch from the backend, falling back to the bundled products."""

        page = service.get_products(ProductFilter(category=category) if category else None)
        if page.success and page.items:
            return cls(page.items, source="backend")
        if page.success:
            warn("Backend returned no products, using bundled catalog")
        return cls.fallback(category)

    @classmethod
    def fallback(cls, category: Optional[str] = None) -> "CatalogSnapshot":
        products = FALLBACK_PRODUCTS
        if category:
            products = tuple(p for p in products if p.category.lower() == category.lower())
        return cls(products, source="fallback")

    @property
    def products(self) -> Tuple[Product, ...]:
        return self._products

    def __iter__(self) -> Iterator[Product]:
        return iter(self._products)

    def __len__(self) -> int:
        return len(self._products)

    def find(self, product_id: str) -> Optional[Product]:
        return next((p for p in self._products if p.id == product_id), None)

    def by_category(self, name: str) -> Tuple[Product, ...]:
        return tuple(p for p in self._products if p.category.lower() == name.lower())

    def flash_sales(self) -> Tuple[Product, ...]:
        return tuple(p for p in self._products if p.is_flash)

    def categories(self) -> Tuple[str, ...]:
        seen: dict[str, None] = {}
        for product in self._products:
            if product.category:
                seen.setdefault(product.category, None)
        return tuple(seen)

    def summary(self) -> str:
        """One line per product: title, price, category."""

        return "\n".join(f"- {p.title}: ${quantize(p.price)} ({p.category})" for p in self._products)
