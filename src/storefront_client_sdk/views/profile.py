from __future__ import annotations

import asyncio
from typing import Any

from ..models import Order, UserProfile, WishlistEntry
from ..mutations import MutationOutcome
from .base import ViewController


class ProfileView(ViewController):
    module = "profile"

    def __init__(self, context) -> None:
        super().__init__(context)
        self.profile: UserProfile | None = None
        self.orders: list[Order] = []
        self.wishlist: list[WishlistEntry] = []

    async def load(self) -> None:
        if not self.require_login():
            return
        self.loading = True
        self.error = None
        try:
            profile, orders, wishlist = await asyncio.gather(
                self.fetch(self.clients.users.me(), what="profile"),
                self.fetch(self.clients.orders.list_orders(), what="orders"),
                self.fetch(self.clients.wishlist.list_entries(), what="wishlist"),
            )
        finally:
            self.loading = False
        if not self.active:
            return
        self.profile = profile
        self.orders = orders or []
        self.wishlist = wishlist or []

    async def update_profile(self, **changes: Any) -> MutationOutcome | None:
        if self.profile is None:
            return None
        snapshot = self.profile
        draft = snapshot.model_copy(update=changes)

        def apply() -> None:
            self.profile = draft

        def reconcile(profile: UserProfile) -> None:
            self.profile = profile
            self.session.update_identity(profile.identity())

        def rollback(_exc: BaseException) -> None:
            self.profile = snapshot

        mutation = self.mutation(
            "update_profile",
            apply=apply,
            remote=lambda: self.clients.users.update_profile(draft),
            reconcile=reconcile,
            rollback=rollback,
            success_message="Profile updated",
            failure_message="Failed to update profile",
        )
        return await self.context.coordinator.run(mutation)

    async def remove_from_wishlist(self, product_id: int) -> MutationOutcome:
        snapshot = list(self.wishlist)

        def apply() -> None:
            self.wishlist = [entry for entry in snapshot if not _is_product(entry, product_id)]

        def rollback(_exc: BaseException) -> None:
            self.wishlist = snapshot

        mutation = self.mutation(
            "remove_from_wishlist",
            apply=apply,
            remote=lambda: self.clients.wishlist.remove(product_id),
            rollback=rollback,
            success_message="Removed from wishlist",
            failure_message="Failed to remove from wishlist",
            forbidden_message="Please login to manage your wishlist",
        )
        return await self.context.coordinator.run(mutation)


def _is_product(entry: WishlistEntry, product_id: int) -> bool:
    return entry.product is not None and entry.product.id == product_id
