from __future__ import annotations

from dataclasses import dataclass

from ..models import WishlistEntry
from .base import BaseClient, expect_list


@dataclass
class WishlistClient(BaseClient):
    module: str = "wishlist"

    async def list_entries(self) -> list[WishlistEntry]:
        data = await self._request("GET", "/wishlist", operation="list")
        return [WishlistEntry.model_validate(row) for row in expect_list(data, "wishlist")]

    async def add(self, product_id: int) -> None:
        await self._request("POST", f"/wishlist/{product_id}", operation="add")

    async def remove(self, product_id: int) -> None:
        await self._request("DELETE", f"/wishlist/{product_id}", operation="remove")
