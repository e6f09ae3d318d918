from __future__ import annotations

from typing import Any, Dict, List

from ..api_client import ApiClient, parse_item, parse_list
from ..schemas import SavedAddress


class AddressService:
    def __init__(self, client: ApiClient) -> None:
        self.client = client

    def get_addresses(self) -> List[SavedAddress]:
        return parse_list(SavedAddress, self.client.get("/addresses"), "addresses")[0]

    def get_address(self, address_id: str) -> SavedAddress:
        return parse_item(SavedAddress, self.client.get(f"/addresses/{address_id}"), "address")

    def create_address(self, data: Dict[str, Any]) -> SavedAddress:
        return parse_item(SavedAddress, self.client.post("/addresses", data), "address")

    def update_address(self, address_id: str, changes: Dict[str, Any]) -> SavedAddress:
        data = self.client.put(f"/addresses/{address_id}", changes)
        return parse_item(SavedAddress, data, "address")

    def delete_address(self, address_id: str) -> None:
        self.client.delete(f"/addresses/{address_id}")

    def set_default_address(self, address_id: str) -> SavedAddress:
        data = self.client.put(f"/addresses/{address_id}/default")
        return parse_item(SavedAddress, data, "address")
