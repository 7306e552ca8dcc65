from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, TypeVar

from ..cart_sync import CartSynchronizer
from ..clients.bundle import ApiClients
from ..error_mapper import normalize_error
from ..exceptions import ApiError, UnauthorizedError
from ..mutations import MutationCoordinator, OptimisticMutation
from ..navigation import Navigator, Route
from ..notifications import Notifier
from ..session import SessionStore
from ..ui_errors import to_user_facing_error

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class ViewContext:
    session: SessionStore
    navigator: Navigator
    notifier: Notifier
    cart: CartSynchronizer
    coordinator: MutationCoordinator
    clients: ApiClients


class ViewController:
    module = "view"

    def __init__(self, context: ViewContext) -> None:
        self.context = context
        self.active = True
        self.loading = False
        self.error: str | None = None

    @property
    def session(self) -> SessionStore:
        return self.context.session

    @property
    def navigator(self) -> Navigator:
        return self.context.navigator

    @property
    def notifier(self) -> Notifier:
        return self.context.notifier

    @property
    def clients(self) -> ApiClients:
        return self.context.clients

    def is_active(self) -> bool:
        return self.active

    def dismiss(self) -> None:
        self.active = False

    def require_login(self) -> bool:
        """Gate for authenticated views.

        A pending session neither renders nor redirects, so a rehydrating
        session is never bounced to the login page.
        """
        if not self.session.is_ready:
            return False
        if not self.session.is_logged_in:
            if not self.navigator.is_at(Route.LOGIN):
                self.navigator.push(Route.LOGIN)
            return False
        return True

    def mutation(self, name: str, **kwargs: Any) -> OptimisticMutation[Any]:
        kwargs.setdefault("module", self.module)
        kwargs.setdefault("is_active", self.is_active)
        return OptimisticMutation(name=name, **kwargs)

    async def fetch(self, awaitable: Awaitable[T], *, what: str, fallback: str = "Failed to load") -> T | None:
        """Run a read for this view; failures become ``self.error`` instead of raising."""
        try:
            return await awaitable
        except UnauthorizedError:
            return None
        except (ApiError, ValueError) as exc:
            error = normalize_error(exc)
            logger.warning("view_load_failed", extra={"view": self.module, "what": what, "code": error.code})
            self.error = to_user_facing_error(exc, fallback).message if isinstance(exc, ApiError) else fallback
            return None


def add_to_cart_mutation(
    view: ViewController,
    product_id: int,
    *,
    success_message: str | None = "Added to cart",
) -> OptimisticMutation[Any]:
    cart = view.context.cart

    async def rollback(_exc: BaseException) -> None:
        await cart.resync()

    return view.mutation(
        "add_to_cart",
        apply=cart.increment_local,
        remote=lambda: view.clients.cart.add_item(product_id, 1),
        reconcile=cart.apply_cart,
        rollback=rollback,
        success_message=success_message,
        failure_message="Failed to add to cart",
        forbidden_message="Please login to add items to cart",
        # The counter is shared across views, so a dismissed view still settles it.
        is_active=None,
    )
