from .auth import AuthClient
from .carts import CartsClient
from .listings import ListingClient
from .products import ProductsClient
from .wishlist import WishlistClient

__all__ = [
    "AuthClient",
    "CartsClient",
    "ListingClient",
    "ProductsClient",
    "WishlistClient",
]
