"""Wires the client, services and stores together for one session."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import requests

from .api_client import ApiClient
from .cart_store import CartStore
from .catalog import CatalogSnapshot
from .chat import ChatAssistant, TextGenerator
from .checkout import CheckoutFlow
from .services import (
    AddressService,
    AuctionService,
    AuthService,
    CartService,
    CatalogService,
    OrderService,
    PaymentService,
    ProductService,
)
from .storage import MemoryStorage, StateStorage


@dataclass
class Storefront:
    client: ApiClient
    auth: AuthService
    products: ProductService
    cart_service: CartService
    orders: OrderService
    payments: PaymentService
    addresses: AddressService
    auctions: AuctionService
    catalog_admin: CatalogService
    cart: CartStore
    catalog: Optional[CatalogSnapshot] = field(default=None)

    @classmethod
    def create(
        cls,
        storage: StateStorage | None = None,
        base_url: str | None = None,
        session: requests.Session | None = None,
    ) -> "Storefront":
        storage = storage if storage is not None else MemoryStorage()
        client = ApiClient(base_url=base_url, storage=storage, session=session)
        cart_service = CartService(client)
        return cls(
            client=client,
            auth=AuthService(client),
            products=ProductService(client),
            cart_service=cart_service,
            orders=OrderService(client),
            payments=PaymentService(client),
            addresses=AddressService(client),
            auctions=AuctionService(client),
            catalog_admin=CatalogService(client),
            cart=CartStore(cart_service, storage),
        )

    def load_catalog(self, category: Optional[str] = None) -> CatalogSnapshot:
        self.catalog = CatalogSnapshot.load(self.products, category)
        return self.catalog

    def checkout(self) -> CheckoutFlow:
        return CheckoutFlow(self.cart, self.auth, self.orders, self.payments)

    def chat(self, generator: TextGenerator) -> ChatAssistant:
        return ChatAssistant(generator, self.catalog or self.load_catalog())
