from .base import MutationOutcome, OptimisticStore, SyncState
from .cart import CartStore
from .wishlist import WishlistStore

__all__ = [
    "CartStore",
    "MutationOutcome",
    "OptimisticStore",
    "SyncState",
    "WishlistStore",
]
