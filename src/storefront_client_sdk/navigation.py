from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable
from urllib.parse import urlencode

logger = logging.getLogger(__name__)


class Route(str, Enum):
    HOME = "/"
    PRODUCTS = "/products"
    PRODUCT_DETAIL = "/products/{id}"
    SEARCH = "/search"
    CART = "/cart"
    CHECKOUT = "/checkout"
    ORDERS = "/orders"
    ORDER_DETAIL = "/orders/{id}"
    PROFILE = "/profile"
    LOGIN = "/login"
    REGISTER = "/register"


@dataclass(frozen=True)
class Location:
    route: Route
    params: dict[str, Any] = field(default_factory=dict)
    query: dict[str, Any] = field(default_factory=dict)

    @property
    def path(self) -> str:
        path = self.route.value.format(**self.params) if self.params else self.route.value
        if self.query:
            return f"{path}?{urlencode(self.query)}"
        return path


NavigationListener = Callable[[Location], None]


class Navigator:
    """In-process router: tracks the current location and its history."""

    def __init__(self, initial: Route = Route.HOME) -> None:
        self.current = Location(initial)
        self.history: list[Location] = [self.current]
        self._listeners: list[NavigationListener] = []

    def push(self, route: Route, *, query: dict[str, Any] | None = None, **params: Any) -> Location:
        location = Location(route, params=dict(params), query=dict(query or {}))
        logger.info("navigation", extra={"route": location.path})
        self.current = location
        self.history.append(location)
        for listener in list(self._listeners):
            listener(location)
        return location

    def is_at(self, route: Route) -> bool:
        return self.current.route is route

    def subscribe(self, listener: NavigationListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
