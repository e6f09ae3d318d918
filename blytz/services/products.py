from __future__ import annotations

from typing import Any, List, Optional

from ..api_client import ApiClient, unwrap_item, unwrap_list
from ..console import warn
from ..errors import ApiError, StorefrontError
from ..schemas import Page, Product, ProductFilter


def _to_products(records: List[Any]) -> List[Product]:
    try:
        return [Product.from_backend(r) for r in records]
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise ApiError(200, f"Unexpected product in response: {exc}", records) from exc


class ProductService:
    """Catalog reads. Failures degrade to empty results."""

    def __init__(self, client: ApiClient) -> None:
        self.client = client

    def get_products(self, filters: ProductFilter | None = None) -> Page[Product]:
        params = filters.as_params() if filters else None
        try:
            records, total = unwrap_list(self.client.get("/products", params=params), "products")
            products = _to_products(records)
        except StorefrontError as exc:
            warn("Failed to fetch products", exc)
            return Page[Product](success=False, message="Failed to fetch products")
        return Page[Product](items=products, total=total)

    def get_product(self, product_id: str) -> Optional[Product]:
        try:
            data = self.client.get(f"/products/{product_id}")
            return _to_products([unwrap_item(data, "product")])[0]
        except StorefrontError as exc:
            warn("Failed to fetch product", exc)
            return None

    def search_products(self, query: str, filters: ProductFilter | None = None) -> Page[Product]:
        params = {"q": query, **(filters.as_params() if filters else {})}
        try:
            records, total = unwrap_list(self.client.get("/catalog/search/products", params=params), "products")
            products = _to_products(records)
        except StorefrontError as exc:
            warn("Failed to search products", exc)
            return Page[Product](success=False, message="Failed to search products")
        return Page[Product](items=products, total=total)

    def get_featured_products(self, limit: int = 10) -> List[Product]:
        return self._product_list("/catalog/search/products/featured", limit, "featured products")

    def get_related_products(self, product_id: str, limit: int = 6) -> List[Product]:
        return self._product_list(f"/catalog/search/products/{product_id}/related", limit, "related products")

    def _product_list(self, path: str, limit: int, what: str) -> List[Product]:
        try:
            records, _ = unwrap_list(self.client.get(path, params={"limit": limit}), "products")
            return _to_products(records)
        except StorefrontError as exc:
            warn(f"Failed to fetch {what}", exc)
            return []
