"""Typed wrappers over the backend endpoint families."""

from .addresses import AddressService
from .auctions import AuctionService
from .auth import AuthService
from .cart import CartService
from .catalog import CatalogService
from .orders import OrderService
from .payments import PaymentService
from .products import ProductService

__all__ = [
    "AddressService",
    "AuctionService",
    "AuthService",
    "CartService",
    "CatalogService",
    "OrderService",
    "PaymentService",
    "ProductService",
]
