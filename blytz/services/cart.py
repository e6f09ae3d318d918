from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..api_client import ApiClient
from ..errors import ApiError
from ..schemas import CartItem, Product

PLACEHOLDER_IMAGE = "https://picsum.photos/400/400?random=1"


class CartService:
    """Backend cart endpoints. Errors propagate; the cart store decides what to do."""

    def __init__(self, client: ApiClient) -> None:
        self.client = client

    def get_cart(self) -> List[CartItem]:
        data = self.client.get("/cart")
        records: List[Dict[str, Any]] = []
        if isinstance(data, dict):
            records = data.get("items") or (data.get("cart") or {}).get("items") or []
        elif isinstance(data, list):
            records = data
        try:
            return [self._to_cart_item(r) for r in records]
        except (AttributeError, TypeError, ValueError) as exc:
            raise ApiError(200, f"Unreadable cart line: {exc}", data) from exc

    def add_to_cart(self, product_id: str, quantity: int, variant_id: Optional[str] = None) -> None:
        payload: Dict[str, Any] = {"product_id": product_id, "quantity": quantity}
        if variant_id:
            payload["variant_id"] = variant_id
        self.client.post("/cart/items", payload)

    def update_item_quantity(self, item_id: str, quantity: int) -> None:
        self.client.put(f"/cart/items/{item_id}", {"quantity": quantity})

    def remove_from_cart(self, item_id: str) -> None:
        self.client.delete(f"/cart/items/{item_id}")

    def clear_cart(self) -> None:
        self.client.delete("/cart")

    def merge_cart(self, cart_token: Optional[str] = None) -> None:
        self.client.post("/cart/merge", {"cart_token": cart_token})

    @staticmethod
    def _to_cart_item(record: Dict[str, Any]) -> CartItem:
        product = record.get("product")
        if not isinstance(product, dict) or not product:
            raise ValueError("cart line has no product")
        product_id = record.get("product_id") or product.get("id")
        if not product_id:
            raise ValueError("cart line has no product id")

        data = {**product, "id": product_id}
        if not data.get("image") and not data.get("images"):
            data["image"] = PLACEHOLDER_IMAGE
        return CartItem.from_product(Product.from_backend(data), record.get("quantity", 1))
