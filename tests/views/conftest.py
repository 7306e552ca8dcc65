from __future__ import annotations

import pytest

from storefront_client_sdk.cart_sync import CartSynchronizer
from storefront_client_sdk.mutations import MutationCoordinator
from storefront_client_sdk.views import ViewContext


@pytest.fixture
def context(session, navigator, notifier, clients) -> ViewContext:
    cart = CartSynchronizer(clients.cart, session, notifier)
    coordinator = MutationCoordinator(notifier, navigator, on_unreachable=cart.mark_unreachable)
    return ViewContext(
        session=session,
        navigator=navigator,
        notifier=notifier,
        cart=cart,
        coordinator=coordinator,
        clients=clients,
    )
