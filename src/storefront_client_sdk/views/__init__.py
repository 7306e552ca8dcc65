from .auth import LoginView, RegisterView
from .base import ViewContext, ViewController
from .cart import CartView
from .catalog import CatalogFilters, CatalogView, SearchView
from .checkout import CheckoutView, ShippingForm
from .orders import OrderDetailView, OrdersView
from .product_detail import ProductDetailView
from .profile import ProfileView

__all__ = [
    "CartView",
    "CatalogFilters",
    "CatalogView",
    "CheckoutView",
    "LoginView",
    "OrderDetailView",
    "OrdersView",
    "ProductDetailView",
    "ProfileView",
    "RegisterView",
    "SearchView",
    "ShippingForm",
    "ViewContext",
    "ViewController",
]
