from __future__ import annotations

import asyncio

from ..models import Order
from .base import ViewController

DEFAULT_POLL_SECONDS = 15.0


class OrdersView(ViewController):
    module = "orders"

    def __init__(self, context) -> None:
        super().__init__(context)
        self.orders: list[Order] = []

    async def load(self) -> list[Order]:
        if not self.require_login():
            return self.orders
        self.loading = True
        self.error = None
        try:
            orders = await self.fetch(self.clients.orders.list_orders(), what="orders")
        finally:
            self.loading = False
        if orders is not None and self.active:
            self.orders = orders
        return self.orders

    async def poll(self, interval_seconds: float = DEFAULT_POLL_SECONDS, *, iterations: int | None = None) -> None:
        """Refresh the list until the view is dismissed, the session ends or ``iterations`` runs out."""
        completed = 0
        while self.active and (iterations is None or completed < iterations):
            await self.load()
            completed += 1
            if not self.session.is_logged_in:
                return
            if iterations is not None and completed >= iterations:
                return
            await asyncio.sleep(interval_seconds)


class OrderDetailView(ViewController):
    module = "order_detail"

    def __init__(self, context) -> None:
        super().__init__(context)
        self.order: Order | None = None
        self.is_new = False

    async def load(self, order_id: int, *, is_new: bool = False) -> Order | None:
        if not self.require_login():
            return None
        self.is_new = is_new
        self.loading = True
        try:
            order = await self.fetch(self.clients.orders.get_order(order_id), what="order", fallback="Order not found")
        finally:
            self.loading = False
        if self.active:
            self.order = order
        return self.order
