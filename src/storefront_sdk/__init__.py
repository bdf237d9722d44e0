from .config import ClientConfig, ConfigError, load_config
from .context import StorefrontContext, build_context
from .exceptions import (
    ApiError,
    NetworkError,
    NotFoundError,
    ServerError,
    StaleResult,
    UnauthorizedError,
    ValidationError,
)
from .http_client import ApiClient, ApiResult
from .models import (
    Cart,
    CartLine,
    LoginResponse,
    Page,
    Product,
    SessionIdentity,
    UserRecord,
    WishlistItem,
    WishlistResponse,
)
from .pagination import ELLIPSIS, PageWindow, PaginationState, paginate
from .search import QueryState, SearchController
from .session import SessionFileStore, SessionManager
from .stores import CartStore, MutationOutcome, SyncState, WishlistStore

__all__ = [
    "ApiClient",
    "ApiError",
    "ApiResult",
    "Cart",
    "CartLine",
    "CartStore",
    "ClientConfig",
    "ConfigError",
    "ELLIPSIS",
    "LoginResponse",
    "MutationOutcome",
    "NetworkError",
    "NotFoundError",
    "Page",
    "PageWindow",
    "PaginationState",
    "Product",
    "QueryState",
    "SearchController",
    "ServerError",
    "SessionFileStore",
    "SessionIdentity",
    "SessionManager",
    "StaleResult",
    "StorefrontContext",
    "SyncState",
    "UnauthorizedError",
    "UserRecord",
    "ValidationError",
    "WishlistItem",
    "WishlistResponse",
    "WishlistStore",
    "build_context",
    "load_config",
    "paginate",
]
