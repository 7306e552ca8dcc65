from __future__ import annotations

from dataclasses import dataclass

from ..remote_client import RemoteClient
from .auth import AuthClient
from .cart import CartClient
from .orders import OrdersClient
from .products import CatalogClient, ProductsClient
from .users import UsersClient
from .wishlist import WishlistClient


@dataclass
class ApiClients:
    auth: AuthClient
    products: ProductsClient
    catalog: CatalogClient
    cart: CartClient
    orders: OrdersClient
    users: UsersClient
    wishlist: WishlistClient

    @classmethod
    def from_remote(cls, remote: RemoteClient) -> ApiClients:
        return cls(
            auth=AuthClient(remote=remote),
            products=ProductsClient(remote=remote),
            catalog=CatalogClient(remote=remote),
            cart=CartClient(remote=remote),
            orders=OrdersClient(remote=remote),
            users=UsersClient(remote=remote),
            wishlist=WishlistClient(remote=remote),
        )
