"""Catalog management endpoints used by the seller dashboard."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..api_client import ApiClient, parse_item, parse_list
from ..schemas import (
    Category,
    CategoryAttribute,
    InventoryStock,
    ProductCollection,
    ProductVariant,
    StockMovement,
)


class CatalogService:
    def __init__(self, client: ApiClient) -> None:
        self.client = client

    # Categories

    def get_categories(self, parent_id: Optional[str] = None, depth: Optional[int] = None) -> List[Category]:
        data = self.client.get("/catalog/categories", params={"parent_id": parent_id, "depth": depth})
        return parse_list(Category, data, "categories")[0]

    def get_category_tree(self, depth: Optional[int] = None, include_inactive: bool = False) -> List[Category]:
        params = {"depth": depth, "include_inactive": include_inactive or None}
        data = self.client.get("/catalog/categories", params=params)
        return parse_list(Category, data, "categories")[0]

    def get_category(self, category_id: str) -> Category:
        return parse_item(Category, self.client.get(f"/catalog/categories/{category_id}"), "category")

    def create_category(self, data: Dict[str, Any]) -> Category:
        return parse_item(Category, self.client.post("/catalog/categories", data), "category")

    def update_category(self, category_id: str, changes: Dict[str, Any]) -> Category:
        data = self.client.put(f"/catalog/categories/{category_id}", changes)
        return parse_item(Category, data, "category")

    def delete_category(self, category_id: str) -> None:
        self.client.delete(f"/catalog/categories/{category_id}")

    def move_category(self, category_id: str, parent_id: Optional[str] = None, sort_order: Optional[int] = None) -> None:
        self.client.put(f"/catalog/categories/{category_id}/move", {"parent_id": parent_id, "sort_order": sort_order})

    def get_category_attributes(self, category_id: str) -> List[CategoryAttribute]:
        data = self.client.get(f"/catalog/categories/{category_id}/attributes")
        return parse_list(CategoryAttribute, data, "attributes")[0]

    def create_category_attribute(self, category_id: str, data: Dict[str, Any]) -> CategoryAttribute:
        body = self.client.post(f"/catalog/categories/{category_id}/attributes", data)
        return parse_item(CategoryAttribute, body, "attribute")

    def update_category_attribute(self, attribute_id: str, changes: Dict[str, Any]) -> CategoryAttribute:
        body = self.client.put(f"/catalog/categories/attributes/{attribute_id}", changes)
        return parse_item(CategoryAttribute, body, "attribute")

    def delete_category_attribute(self, attribute_id: str) -> None:
        self.client.delete(f"/catalog/categories/attributes/{attribute_id}")

    # Collections

    def get_collections(self, is_active: Optional[bool] = None) -> List[ProductCollection]:
        data = self.client.get("/catalog/collections", params={"is_active": is_active})
        return parse_list(ProductCollection, data, "collections")[0]

    def get_collection(self, collection_id: str) -> ProductCollection:
        data = self.client.get(f"/catalog/collections/{collection_id}")
        return parse_item(ProductCollection, data, "collection")

    def create_collection(self, data: Dict[str, Any]) -> ProductCollection:
        return parse_item(ProductCollection, self.client.post("/catalog/collections", data), "collection")

    def update_collection(self, collection_id: str, changes: Dict[str, Any]) -> ProductCollection:
        data = self.client.put(f"/catalog/collections/{collection_id}", changes)
        return parse_item(ProductCollection, data, "collection")

    def delete_collection(self, collection_id: str) -> None:
        self.client.delete(f"/catalog/collections/{collection_id}")

    def add_products_to_collection(self, collection_id: str, product_ids: List[str]) -> None:
        self.client.post(f"/catalog/collections/{collection_id}/products", {"product_ids": product_ids})

    def remove_products_from_collection(self, collection_id: str, product_ids: List[str]) -> None:
        self.client.delete(f"/catalog/collections/{collection_id}/products", {"product_ids": product_ids})

    # Variants

    def get_product_variants(self, product_id: str) -> List[ProductVariant]:
        data = self.client.get(f"/catalog/variants/products/{product_id}")
        return parse_list(ProductVariant, data, "variants")[0]

    def create_variant(self, product_id: str, variant: Dict[str, Any]) -> ProductVariant:
        data = self.client.post("/catalog/variants", {"product_id": product_id, "variant": variant})
        return parse_item(ProductVariant, data, "variant")

    def update_variant(self, variant_id: str, changes: Dict[str, Any]) -> ProductVariant:
        data = self.client.put(f"/catalog/variants/{variant_id}", changes)
        return parse_item(ProductVariant, data, "variant")

    def delete_variant(self, variant_id: str) -> None:
        self.client.delete(f"/catalog/variants/{variant_id}")

    # Inventory

    def get_inventory_by_product(self, product_id: str) -> InventoryStock:
        data = self.client.get(f"/catalog/inventory/products/{product_id}")
        return parse_item(InventoryStock, data, "inventory")

    def get_inventory_by_variant(self, variant_id: str) -> InventoryStock:
        data = self.client.get(f"/catalog/inventory/variants/{variant_id}")
        return parse_item(InventoryStock, data, "inventory")

    def update_inventory(self, product_id: str, quantity: int, low_stock_alert: Optional[int] = None) -> InventoryStock:
        if quantity < 0:
            raise ValueError("Stock cannot be negative")
        payload: Dict[str, Any] = {"quantity": quantity}
        if low_stock_alert is not None:
            payload["low_stock_alert"] = low_stock_alert
        data = self.client.put(f"/catalog/inventory/products/{product_id}", payload)
        return parse_item(InventoryStock, data, "inventory")

    def get_stock_movements(self, product_id: str, limit: Optional[int] = None) -> List[StockMovement]:
        data = self.client.get(f"/catalog/inventory/products/{product_id}/movements", params={"limit": limit})
        return parse_list(StockMovement, data, "movements")[0]

    def create_stock_movement(self, product_id: str, data: Dict[str, Any]) -> StockMovement:
        body = self.client.post(f"/catalog/inventory/products/{product_id}/movements", data)
        return parse_item(StockMovement, body, "movement")

    def get_low_stock_products(self) -> List[InventoryStock]:
        data = self.client.get("/catalog/inventory/low-stock")
        return parse_list(InventoryStock, data, "inventory")[0]

    def get_out_of_stock_products(self) -> List[InventoryStock]:
        data = self.client.get("/catalog/inventory/out-of-stock")
        return parse_list(InventoryStock, data, "inventory")[0]

    # Stats

    def get_catalog_stats(self) -> Dict[str, Any]:
        return self.client.get("/catalog/stats/catalog") or {}

    def get_category_stats(self, category_id: str) -> Dict[str, Any]:
        return self.client.get(f"/catalog/stats/categories/{category_id}") or {}
