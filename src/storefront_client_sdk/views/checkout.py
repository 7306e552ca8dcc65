from __future__ import annotations

import asyncio
from dataclasses import dataclass, fields, replace

from ..exceptions import ApiError
from ..models import Cart, Order, UserProfile
from ..mutations import MutationOutcome
from ..navigation import Route
from .base import ViewController

REQUIRED_SHIPPING_FIELDS = ("first_name", "last_name", "email", "address_line1", "city", "zip_code")


@dataclass(frozen=True)
class ShippingForm:
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone_number: str = ""
    address_line1: str = ""
    city: str = ""
    zip_code: str = ""

    @classmethod
    def from_profile(cls, profile: UserProfile) -> ShippingForm:
        values = {item.name: getattr(profile, item.name, None) or "" for item in fields(cls)}
        return cls(**values)

    def missing_fields(self) -> list[str]:
        return [name for name in REQUIRED_SHIPPING_FIELDS if not getattr(self, name).strip()]


class CheckoutView(ViewController):
    module = "checkout"

    def __init__(self, context) -> None:
        super().__init__(context)
        self.cart: Cart | None = None
        self.form = ShippingForm()
        self.form_errors: list[str] = []
        self.placing = False
        self.order: Order | None = None

    async def load(self) -> None:
        if not self.require_login():
            return
        self.loading = True
        try:
            cart, profile = await asyncio.gather(
                self.fetch(self.clients.cart.get_cart(), what="cart"),
                self._load_profile(),
            )
        finally:
            self.loading = False
        if not self.active or cart is None:
            return
        if cart.is_empty:
            self.navigator.push(Route.CART)
            return
        self.cart = cart
        if profile is not None:
            self.form = ShippingForm.from_profile(profile)

    def update_form(self, **changes: str) -> ShippingForm:
        self.form = replace(self.form, **changes)
        return self.form

    async def place_order(self) -> MutationOutcome | None:
        self.form_errors = self.form.missing_fields()
        if self.form_errors or self.placing:
            return None

        def apply() -> None:
            self.placing = True

        async def reconcile(order: Order) -> None:
            self.placing = False
            self.order = order
            await self.context.cart.resync()
            if self.active:
                self.navigator.push(Route.ORDER_DETAIL, id=order.id, query={"new": "true"})

        def rollback(_exc: BaseException) -> None:
            self.placing = False

        mutation = self.mutation(
            "place_order",
            apply=apply,
            remote=self.clients.orders.place_order,
            reconcile=reconcile,
            rollback=rollback,
            success_message="Order placed",
            failure_message="Failed to place order",
            forbidden_message="Please login to place an order",
            # The order and the emptied cart are real whether or not the page is still open.
            is_active=None,
        )
        return await self.context.coordinator.run(mutation)

    async def _load_profile(self) -> UserProfile | None:
        # Prefill is best effort; checkout works without a profile.
        try:
            return await self.clients.users.me()
        except (ApiError, ValueError):
            return None
