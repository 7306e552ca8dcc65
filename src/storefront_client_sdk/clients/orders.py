from __future__ import annotations

from dataclasses import dataclass

from ..models import Order
from .base import BaseClient, expect_list, expect_object


@dataclass
class OrdersClient(BaseClient):
    module: str = "orders"

    async def place_order(self) -> Order:
        data = await self._request("POST", "/orders", operation="place_order")
        return Order.model_validate(expect_object(data, "place order"))

    async def list_orders(self) -> list[Order]:
        data = await self._request("GET", "/orders", operation="list_orders")
        return [Order.model_validate(row) for row in expect_list(data, "orders")]

    async def get_order(self, order_id: int) -> Order:
        data = await self._request("GET", f"/orders/{order_id}", operation="get_order")
        return Order.model_validate(expect_object(data, "order"))
