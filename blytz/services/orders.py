from __future__ import annotations

from typing import Optional

from ..api_client import ApiClient, parse_item, parse_list
from ..errors import InvalidTransitionError
from ..schemas import CreateOrderRequest, Order, OrderStatistics, OrderStatus, Page


class OrderService:
    def __init__(self, client: ApiClient) -> None:
        self.client = client

    def get_orders(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        status: Optional[str] = None,
    ) -> Page[Order]:
        data = self.client.get("/orders", params={"page": page, "limit": limit, "status": status})
        items, total = parse_list(Order, data, "orders")
        return Page[Order](items=items, total=total)

    def get_order(self, order_id: str) -> Order:
        return parse_item(Order, self.client.get(f"/orders/{order_id}"), "order")

    def create_order(self, request: CreateOrderRequest) -> Order:
        data = self.client.post("/orders", request.model_dump(mode="json", exclude_none=True))
        return parse_item(Order, data, "order")

    def update_order_status(self, order: Order, status: OrderStatus | str) -> Order:
        """Move an order forward (seller/admin flows).

        The transition is checked locally first so an impossible request is
        never sent.
        """

        target = OrderStatus(status)
        if not order.status.can_transition_to(target):
            raise InvalidTransitionError(order.status.value, target.value)
        data = self.client.put(f"/orders/{order.id}/status", {"status": target.value})
        return parse_item(Order, data, "order")

    def cancel_order(self, order: Order) -> Order:
        if not order.status.can_transition_to(OrderStatus.CANCELLED):
            raise InvalidTransitionError(order.status.value, OrderStatus.CANCELLED.value)
        data = self.client.delete(f"/orders/{order.id}")
        return parse_item(Order, data, "order")

    def get_order_statistics(self) -> OrderStatistics:
        return parse_item(OrderStatistics, self.client.get("/admin/orders/statistics"), "stats")
