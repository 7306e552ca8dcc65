from .auth import AuthClient
from .bundle import ApiClients
from .cart import CartClient
from .orders import OrdersClient
from .products import CatalogClient, ProductsClient
from .users import UsersClient
from .wishlist import WishlistClient

__all__ = [
    "ApiClients",
    "AuthClient",
    "CartClient",
    "CatalogClient",
    "OrdersClient",
    "ProductsClient",
    "UsersClient",
    "WishlistClient",
]
