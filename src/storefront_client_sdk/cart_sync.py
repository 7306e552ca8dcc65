from __future__ import annotations

import logging
from typing import Callable, Protocol

from .error_mapper import is_unreachable, normalize_error
from .exceptions import ApiError
from .models import Cart
from .notifications import Notifier
from .session import SessionChange, SessionStore

logger = logging.getLogger(__name__)

CountListener = Callable[[int], None]


class CartReader(Protocol):
    async def get_cart(self) -> Cart: ...


class CartSynchronizer:
    """Cross-page cart item counter.

    The count is a cache of the server's sum of line quantities. Optimistic
    increments may overstate it until the next resync or merged cart, which
    always replaces it with the authoritative value.
    """

    def __init__(self, cart_client: CartReader, session: SessionStore, notifier: Notifier | None = None) -> None:
        self.cart_client = cart_client
        self.session = session
        self.notifier = notifier
        self.count = 0
        self.degraded = False
        self._listeners: list[CountListener] = []
        self._unsubscribe_session = session.subscribe(self._on_session_change)

    def subscribe(self, listener: CountListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def increment_local(self) -> int:
        self._set_count(self.count + 1)
        return self.count

    def apply_cart(self, cart: Cart) -> int:
        self._set_count(cart.item_count)
        return self.count

    def reset(self) -> None:
        self._set_count(0)

    def mark_unreachable(self) -> None:
        self._set_degraded(True)

    async def resync(self) -> int:
        if not self.session.is_logged_in:
            self._set_count(0)
            return self.count
        try:
            cart = await self.cart_client.get_cart()
        except (ApiError, ValueError) as exc:
            # ValueError covers a cart body that fails model validation.
            error = normalize_error(exc)
            logger.warning(
                "cart_resync_failed",
                extra={"code": error.code, "type": error.type, "status_code": error.status_code},
            )
            self._set_count(0)
            self._set_degraded(is_unreachable(exc))
            return self.count
        self._set_degraded(False)
        return self.apply_cart(cart)

    def close(self) -> None:
        self._unsubscribe_session()

    def _on_session_change(self, change: SessionChange) -> None:
        if not change.logged_in:
            self.reset()

    def _set_count(self, value: int) -> None:
        value = max(0, value)
        if value == self.count:
            return
        self.count = value
        for listener in list(self._listeners):
            listener(value)

    def _set_degraded(self, active: bool) -> None:
        if active == self.degraded:
            return
        self.degraded = active
        logger.info("degraded_mode_changed", extra={"active": active})
        if self.notifier is not None:
            self.notifier.notify_degraded(active)
