from __future__ import annotations

import logging
from decimal import Decimal

from ..error_mapper import normalize_error
from ..exceptions import ApiError
from ..models import Cart
from ..mutations import MutationOutcome
from .base import ViewController

logger = logging.getLogger(__name__)


class CartView(ViewController):
    """Cart page. Every edit is optimistic, then merged with the cart the server returns.

    Edits settle even after the view is dismissed so the shared cart count
    stays in step with the server; only the view's own state is left alone.

    Quantity updates to the same line are last-write-wins unless
    ``ordered_updates`` is set, in which case responses superseded by a newer
    update to that line are dropped.
    """

    module = "cart"

    def __init__(self, context, *, ordered_updates: bool = False) -> None:
        super().__init__(context)
        self.cart: Cart | None = None
        self.ordered_updates = ordered_updates

    @property
    def is_empty(self) -> bool:
        return self.cart is None or self.cart.is_empty

    async def load(self) -> Cart | None:
        if not self.require_login():
            return None
        self.loading = True
        try:
            cart = await self.fetch(self.clients.cart.get_cart(), what="cart")
        finally:
            self.loading = False
        if cart is not None and self.active:
            self._merge(cart)
        return self.cart

    async def update_quantity(self, item_id: int, quantity: int) -> MutationOutcome | None:
        if quantity < 1 or self.cart is None:
            return None
        snapshot = self.cart

        def apply() -> None:
            items = [
                item.model_copy(update={"quantity": quantity}) if item.id == item_id else item
                for item in snapshot.items
            ]
            self.cart = snapshot.model_copy(update={"items": items}).recalculate_total()

        mutation = self.mutation(
            "update_cart_item",
            apply=apply,
            remote=lambda: self.clients.cart.update_item(item_id, quantity),
            reconcile=self._merge,
            rollback=lambda _exc: self._reload(snapshot),
            failure_message="Failed to update quantity",
            forbidden_message="Please login to manage your cart",
            resource_key=f"cart-item:{item_id}" if self.ordered_updates else None,
            is_active=None,
        )
        return await self.context.coordinator.run(mutation)

    async def remove_item(self, item_id: int) -> MutationOutcome | None:
        if self.cart is None:
            return None
        snapshot = self.cart

        def apply() -> None:
            items = [item for item in snapshot.items if item.id != item_id]
            self.cart = snapshot.model_copy(update={"items": items}).recalculate_total()

        mutation = self.mutation(
            "remove_cart_item",
            apply=apply,
            remote=lambda: self.clients.cart.remove_item(item_id),
            reconcile=self._merge,
            rollback=lambda _exc: self._reload(snapshot),
            success_message="Item removed",
            failure_message="Failed to remove item",
            forbidden_message="Please login to manage your cart",
            is_active=None,
        )
        return await self.context.coordinator.run(mutation)

    async def clear(self) -> MutationOutcome | None:
        if self.cart is None:
            return None
        snapshot = self.cart

        def apply() -> None:
            self.cart = snapshot.model_copy(update={"items": [], "total_amount": Decimal("0")})

        async def reconcile(_result: None) -> None:
            await self.context.cart.resync()

        mutation = self.mutation(
            "clear_cart",
            apply=apply,
            remote=self.clients.cart.clear,
            reconcile=reconcile,
            rollback=lambda _exc: self._reload(snapshot),
            success_message="Cart cleared",
            failure_message="Failed to clear cart",
            forbidden_message="Please login to manage your cart",
            is_active=None,
        )
        return await self.context.coordinator.run(mutation)

    def _merge(self, cart: Cart) -> None:
        if self.active:
            self.cart = cart
        self.context.cart.apply_cart(cart)

    async def _reload(self, snapshot: Cart) -> None:
        """Rollback: re-read the server cart, or fall back to the pre-mutation snapshot."""
        if not self.session.is_logged_in:
            self.cart = snapshot
            return
        try:
            cart = await self.clients.cart.get_cart()
        except (ApiError, ValueError) as exc:
            logger.info("cart_reload_failed", extra={"code": normalize_error(exc).code})
            self.cart = snapshot
            return
        self._merge(cart)
