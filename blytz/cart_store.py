"""Session cart state kept close to the backend cart without blocking on it.

Every mutation is two-phase: the local projection is applied at once, then
the backend is asked to make the same change and the authoritative cart is
fetched back. The projection is only replaced by a successful fetch; if the
backend is unreachable the local view stays and ``pending_sync`` is set until
the next successful ``load_cart()``.

Overlapping resyncs are not serialized: whichever fetch lands last wins.
"""

from __future__ import annotations

from contextlib import contextmanager
from decimal import Decimal
from typing import Callable, Iterator, List, Optional, Sequence, Tuple

from pydantic import ValidationError as SchemaError

from .console import warn
from .errors import StorefrontError, ValidationError
from .money import ZERO, quantize
from .schemas import CartItem, Product
from .services.cart import CartService
from .storage import MemoryStorage, StateStorage

CART_STORAGE_KEY = "cart-storage"


def merge_item(items: Sequence[CartItem], product: Product, quantity: int) -> List[CartItem]:
    """Add ``quantity`` of ``product``, bumping an existing entry instead of duplicating it."""

    merged: List[CartItem] = []
    found = False
    for item in items:
        if item.id == product.id:
            merged.append(item.model_copy(update={"quantity": item.quantity + quantity}))
            found = True
        else:
            merged.append(item)
    if not found:
        merged.append(CartItem.from_product(product, quantity))
    return merged


def dedupe(items: Sequence[CartItem]) -> List[CartItem]:
    result: List[CartItem] = []
    for item in items:
        result = merge_item(result, item, item.quantity)
    return result


class CartStore:
    def __init__(self, service: CartService, storage: StateStorage | None = None) -> None:
        self.service = service
        self.storage = storage if storage is not None else MemoryStorage()
        self.is_loading = False
        self.is_open = False
        self.pending_sync = False
        self._items: List[CartItem] = self._restore()

    @property
    def items(self) -> Tuple[CartItem, ...]:
        return tuple(self._items)

    def get(self, product_id: str) -> Optional[CartItem]:
        return next((item for item in self._items if item.id == product_id), None)

    def set_is_open(self, is_open: bool) -> None:
        self.is_open = is_open

    # Backend sync

    def load_cart(self) -> bool:
        """Replace local items with the backend cart. Failure leaves state untouched."""

        with self._loading():
            try:
                items = self.service.get_cart()
            except StorefrontError as exc:
                warn("Failed to load cart", exc)
                return False
        self._reconcile(items)
        return True

    def add_item(self, product: Product, quantity: int = 1) -> bool:
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1", ["quantity"])
        self._apply(merge_item(self._items, product, quantity))
        return self._sync(lambda: self.service.add_to_cart(product.id, quantity), "Failed to add item to cart")

    def remove_item(self, product_id: str) -> bool:
        if self.get(product_id) is None:
            return True
        self._apply([item for item in self._items if item.id != product_id])
        return self._sync(lambda: self.service.remove_from_cart(product_id), "Failed to remove item from cart")

    def update_quantity(self, product_id: str, quantity: int) -> bool:
        if quantity <= 0:
            return self.remove_item(product_id)
        if self.get(product_id) is None:
            return True
        self._apply(
            [item.model_copy(update={"quantity": quantity}) if item.id == product_id else item for item in self._items]
        )
        return self._sync(
            lambda: self.service.update_item_quantity(product_id, quantity),
            "Failed to update item quantity",
        )

    def clear_cart(self) -> bool:
        self._apply([])
        with self._loading():
            try:
                self.service.clear_cart()
            except StorefrontError as exc:
                warn("Failed to clear cart", exc)
                self.pending_sync = True
                return False
        self.pending_sync = False
        return True

    # Getters

    def get_total(self) -> Decimal:
        total = sum((item.price * item.quantity for item in self._items), ZERO)
        return quantize(total)

    def get_item_count(self) -> int:
        return sum(item.quantity for item in self._items)

    def is_empty(self) -> bool:
        return not self._items

    # Internals

    def _sync(self, mutate: Callable[[], None], message: str) -> bool:
        with self._loading():
            try:
                mutate()
                items = self.service.get_cart()
            except StorefrontError as exc:
                warn(message, exc)
                self.pending_sync = True
                return False
        self._reconcile(items)
        return True

    def _reconcile(self, items: Sequence[CartItem]) -> None:
        self._apply(dedupe(items))
        self.pending_sync = False

    def _apply(self, items: List[CartItem]) -> None:
        self._items = items
        self.storage.save(CART_STORAGE_KEY, {"items": [item.model_dump(mode="json") for item in items]})

    def _restore(self) -> List[CartItem]:
        try:
            saved = self.storage.load(CART_STORAGE_KEY) or {}
            return dedupe([CartItem.model_validate(raw) for raw in saved.get("items", [])])
        except (SchemaError, AttributeError, TypeError, ValueError) as exc:
            warn("Discarding unreadable saved cart", exc)
            return []

    @contextmanager
    def _loading(self) -> Iterator[None]:
        self.is_loading = True
        try:
            yield
        finally:
            self.is_loading = False
