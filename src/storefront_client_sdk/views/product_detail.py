from __future__ import annotations

import asyncio

from ..exceptions import ApiError, ConflictError, UnauthorizedError
from ..models import Product
from ..mutations import MutationOutcome
from ..navigation import Route
from .base import ViewController, add_to_cart_mutation


class ProductDetailView(ViewController):
    module = "product_detail"

    def __init__(self, context) -> None:
        super().__init__(context)
        self.product: Product | None = None
        self.wishlisted = False

    async def load(self, product_id: int) -> Product | None:
        self.loading = True
        try:
            self.product = await self.clients.products.get_product(product_id)
        except UnauthorizedError:
            self.product = None
        except (ApiError, ValueError):
            self.product = None
            if self.active:
                self.navigator.push(Route.PRODUCTS)
        finally:
            self.loading = False
        return self.product

    def add_to_cart(self) -> asyncio.Task[MutationOutcome] | None:
        """Bump the counter and confirm now; the request settles in the background."""
        if self.product is None:
            return None
        task = self.context.coordinator.dispatch(add_to_cart_mutation(self, self.product.id, success_message=None))
        self.notifier.notify_success("Added to Cart")
        return task

    async def add_to_wishlist(self) -> MutationOutcome | None:
        if self.product is None:
            return None
        product_id = self.product.id
        previous = self.wishlisted

        def apply() -> None:
            self.wishlisted = True

        def rollback(exc: BaseException) -> None:
            self.wishlisted = previous or isinstance(exc, ConflictError)

        mutation = self.mutation(
            "add_to_wishlist",
            apply=apply,
            remote=lambda: self.clients.wishlist.add(product_id),
            rollback=rollback,
            success_message="Saved to wishlist",
            failure_message="Failed to save to wishlist",
            conflict_message="Item already in wishlist",
            forbidden_message="Please login to save items",
        )
        return await self.context.coordinator.run(mutation)
