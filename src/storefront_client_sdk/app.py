from __future__ import annotations

import logging
from dataclasses import dataclass

from .auth_store import AuthStore, FileAuthStore
from .cart_sync import CartSynchronizer
from .clients.bundle import ApiClients
from .config import ClientConfig, load_config
from .http_client import HttpClient
from .mutations import MutationCoordinator
from .navigation import Location, Navigator, Route
from .notifications import LoggingNotifier, Notifier
from .remote_client import RemoteClient
from .session import SessionChange, SessionStore
from .telemetry import TelemetryLogger, cart_count_event, navigation_event, session_event
from .views import (
    CartView,
    CatalogView,
    CheckoutView,
    LoginView,
    OrderDetailView,
    OrdersView,
    ProductDetailView,
    ProfileView,
    RegisterView,
    SearchView,
    ViewContext,
)

logger = logging.getLogger(__name__)


@dataclass
class BootstrapResult:
    route: Route
    logged_in: bool
    cart_count: int


class StorefrontApp:
    """Composition root: one isolated session, counter and coordinator per instance."""

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        store: AuthStore | None = None,
        navigator: Navigator | None = None,
        notifier: Notifier | None = None,
        http: HttpClient | None = None,
        telemetry: TelemetryLogger | None = None,
    ) -> None:
        self.config = config or load_config()
        self.store = store or FileAuthStore(data_dir=self.config.data_dir)
        self.navigator = navigator or Navigator()
        self.notifier = notifier or LoggingNotifier()
        self.telemetry = telemetry or TelemetryLogger(app_name="storefront", enabled=self.config.telemetry_enabled)
        self.session = SessionStore(self.store, self.navigator)
        self.http = http or HttpClient(config=self.config)
        self.remote = RemoteClient(http=self.http, session=self.session, navigator=self.navigator)
        self.clients = ApiClients.from_remote(self.remote)
        self.cart = CartSynchronizer(self.clients.cart, self.session, self.notifier)
        self.coordinator = MutationCoordinator(
            self.notifier,
            self.navigator,
            telemetry=self.telemetry,
            on_unreachable=self.cart.mark_unreachable,
        )
        self.context = ViewContext(
            session=self.session,
            navigator=self.navigator,
            notifier=self.notifier,
            cart=self.cart,
            coordinator=self.coordinator,
            clients=self.clients,
        )
        self._unsubscribers = [
            self.session.subscribe(self._on_session_change),
            self.navigator.subscribe(self._on_navigation),
            self.cart.subscribe(self._on_cart_count),
        ]

    async def start(self) -> BootstrapResult:
        self.session.initialize()
        count = await self.cart.resync()
        logger.info("storefront_ready", extra={"logged_in": self.session.is_logged_in, "cart_count": count})
        return BootstrapResult(
            route=self.navigator.current.route,
            logged_in=self.session.is_logged_in,
            cart_count=count,
        )

    def logout(self) -> None:
        self.session.logout()

    async def close(self) -> None:
        await self.coordinator.drain()
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self.cart.close()
        self.http.close()

    def catalog_view(self) -> CatalogView:
        return CatalogView(self.context)

    def search_view(self) -> SearchView:
        return SearchView(self.context)

    def product_view(self) -> ProductDetailView:
        return ProductDetailView(self.context)

    def cart_view(self, *, ordered_updates: bool = False) -> CartView:
        return CartView(self.context, ordered_updates=ordered_updates)

    def checkout_view(self) -> CheckoutView:
        return CheckoutView(self.context)

    def orders_view(self) -> OrdersView:
        return OrdersView(self.context)

    def order_detail_view(self) -> OrderDetailView:
        return OrderDetailView(self.context)

    def profile_view(self) -> ProfileView:
        return ProfileView(self.context)

    def login_view(self) -> LoginView:
        return LoginView(self.context)

    def register_view(self) -> RegisterView:
        return RegisterView(self.context)

    def _on_session_change(self, change: SessionChange) -> None:
        self.telemetry.emit(session_event(change))

    def _on_navigation(self, location: Location) -> None:
        self.telemetry.emit(navigation_event(location))

    def _on_cart_count(self, count: int) -> None:
        self.telemetry.emit(cart_count_event(count))
