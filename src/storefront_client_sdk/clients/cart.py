from __future__ import annotations

from dataclasses import dataclass

from ..models import Cart
from .base import BaseClient


@dataclass
class CartClient(BaseClient):
    module: str = "cart"

    async def get_cart(self) -> Cart:
        data = await self._request("GET", "/cart", operation="get_cart")
        return _cart_or_empty(data)

    async def add_item(self, product_id: int, quantity: int = 1) -> Cart:
        payload = {"productId": product_id, "quantity": quantity}
        data = await self._request("POST", "/cart/items", json_body=payload, operation="add_item")
        return _cart_or_empty(data)

    async def update_item(self, item_id: int, quantity: int) -> Cart:
        data = await self._request(
            "PUT",
            f"/cart/items/{item_id}",
            params={"quantity": quantity},
            operation="update_item",
        )
        return _cart_or_empty(data)

    async def remove_item(self, item_id: int) -> Cart:
        data = await self._request("DELETE", f"/cart/items/{item_id}", operation="remove_item")
        return _cart_or_empty(data)

    async def clear(self) -> None:
        await self._request("DELETE", "/cart", operation="clear")


def _cart_or_empty(data) -> Cart:
    # A missing body or items collection counts as an empty cart.
    if not isinstance(data, dict):
        return Cart()
    return Cart.model_validate(data)
