from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..api_client import ApiClient, parse_item, parse_list, unwrap_item, unwrap_list
from ..config import settings
from ..schemas import Page, PaymentIntent, PaymentMethod


class PaymentService:
    def __init__(self, client: ApiClient) -> None:
        self.client = client

    def get_payment_methods(self) -> List[PaymentMethod]:
        return parse_list(PaymentMethod, self.client.get("/payments/methods"), "methods")[0]

    def save_payment_method(self, payment_method_id: str) -> PaymentMethod:
        data = self.client.post("/payments/methods", {"payment_method_id": payment_method_id})
        return parse_item(PaymentMethod, data, "method")

    def delete_payment_method(self, method_id: str) -> None:
        self.client.delete(f"/payments/methods/{method_id}")

    def create_payment_intent(
        self,
        amount: int,
        currency: Optional[str] = None,
        payment_method_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> PaymentIntent:
        """Create an intent; ``amount`` is in minor units (cents)."""

        if amount <= 0:
            raise ValueError("Payment amount must be positive")
        payload: Dict[str, Any] = {"amount": amount, "currency": currency or settings.currency}
        if payment_method_id:
            payload["payment_method_id"] = payment_method_id
        if metadata:
            payload["metadata"] = metadata
        data = self.client.post("/payments/intents", payload)
        return parse_item(PaymentIntent, data, "payment_intent")

    def get_payment_intent(self, intent_id: str) -> PaymentIntent:
        return parse_item(PaymentIntent, self.client.get(f"/payments/{intent_id}"), "payment_intent")

    def confirm_payment(self, payment_intent_id: str, payment_method_id: Optional[str] = None) -> PaymentIntent:
        payload: Dict[str, Any] = {"payment_intent_id": payment_intent_id}
        if payment_method_id:
            payload["payment_method_id"] = payment_method_id
        data = self.client.post("/payments/confirm", payload)
        return parse_item(PaymentIntent, data, "payment_intent")

    def refund_payment(self, payment_id: str, amount: Optional[int] = None) -> Dict[str, Any]:
        return self.client.post("/admin/payments/refund", {"payment_id": payment_id, "amount": amount}) or {}

    def get_payments(self, page: Optional[int] = None, limit: Optional[int] = None) -> Page[Dict[str, Any]]:
        records, total = unwrap_list(self.client.get("/admin/payments", params={"page": page, "limit": limit}), "payments")
        return Page[Dict[str, Any]](items=records, total=total)

    def get_payment(self, payment_id: str) -> Dict[str, Any]:
        return unwrap_item(self.client.get(f"/admin/payments/{payment_id}"), "payment")
