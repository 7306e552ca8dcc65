from .app import BootstrapResult, StorefrontApp
from .auth_store import AuthStore, FileAuthStore, MemoryAuthStore
from .cart_sync import CartSynchronizer
from .clients import ApiClients
from .config import ClientConfig, ConfigError, load_config
from .error_mapper import is_unreachable, map_error, normalize_error
from .exceptions import (
    ApiError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    RateLimitError,
    ServerError,
    TransportError,
    UnauthorizedError,
    ValidationError,
)
from .http_client import HttpClient
from .models import (
    AuthResponse,
    Brand,
    Cart,
    CartItem,
    Category,
    Order,
    OrderItem,
    Product,
    ProductPage,
    ProductQuery,
    RegisterRequest,
    UserIdentity,
    UserProfile,
    WishlistEntry,
)
from .mutations import MutationCoordinator, MutationOutcome, MutationStatus, OptimisticMutation, ResourceVersions
from .navigation import Location, Navigator, Route
from .notifications import LoggingNotifier, Notifier, RecordingNotifier
from .remote_client import RemoteClient
from .session import SessionChange, SessionStatus, SessionStore
from .ui_errors import UserFacingError, to_user_facing_error

__all__ = [
    "ApiClients",
    "ApiError",
    "AuthResponse",
    "AuthStore",
    "BootstrapResult",
    "Brand",
    "Cart",
    "CartItem",
    "CartSynchronizer",
    "Category",
    "ClientConfig",
    "ConfigError",
    "ConflictError",
    "FileAuthStore",
    "ForbiddenError",
    "HttpClient",
    "Location",
    "LoggingNotifier",
    "MemoryAuthStore",
    "MutationCoordinator",
    "MutationOutcome",
    "MutationStatus",
    "Navigator",
    "NotFoundError",
    "Notifier",
    "OptimisticMutation",
    "Order",
    "OrderItem",
    "Product",
    "ProductPage",
    "ProductQuery",
    "RateLimitError",
    "RecordingNotifier",
    "RegisterRequest",
    "RemoteClient",
    "ResourceVersions",
    "Route",
    "ServerError",
    "SessionChange",
    "SessionStatus",
    "SessionStore",
    "StorefrontApp",
    "TransportError",
    "UnauthorizedError",
    "UserFacingError",
    "UserIdentity",
    "UserProfile",
    "ValidationError",
    "WishlistEntry",
    "is_unreachable",
    "load_config",
    "map_error",
    "normalize_error",
    "to_user_facing_error",
]
