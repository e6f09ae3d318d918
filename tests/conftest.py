"""Pytest fixtures for blytz tests."""

import json
from decimal import Decimal
from urllib.parse import parse_qs, urlparse

import pytest
import requests
from requests.adapters import BaseAdapter

from blytz.api_client import ApiClient
from blytz.catalog import FALLBACK_PRODUCTS
from blytz.storage import MemoryStorage
from blytz.storefront import Storefront

BASE_URL = "http://blytz.test/api/v1"
TOKEN = "token-123"
SHOPPER = {"id": "u-1", "email": "shopper@blytz.io", "first_name": "Ada", "last_name": "Lovelace"}


def backend_product(product):
    """Catalog-endpoint shape of a product."""
    return {
        "id": product.id,
        "title": product.title,
        "starting_price": float(product.price),
        "images": [product.image],
        "category": {"id": product.category.lower(), "name": product.category},
        "is_flash": product.is_flash,
    }


class FakeBackend(BaseAdapter):
    """In-memory marketplace backend served through a requests transport adapter."""

    def __init__(self):
        super().__init__()
        self.offline = False
        self.confirm_failures = 0
        self.calls = []
        self.overrides = {}
        self.products = {p.id: backend_product(p) for p in FALLBACK_PRODUCTS}
        self.cart = {}
        self.orders = []
        self.intents = []

    # requests adapter interface

    def send(self, request, **kwargs):
        if self.offline:
            raise requests.ConnectionError("backend offline")

        parsed = urlparse(request.url)
        path = parsed.path[len(urlparse(BASE_URL).path):]
        body = json.loads(request.body) if request.body else None
        self.calls.append(
            {
                "method": request.method,
                "path": path,
                "json": body,
                "query": parse_qs(parsed.query),
                "headers": dict(request.headers),
            }
        )

        if (request.method, path) in self.overrides:
            status, payload = self.overrides[(request.method, path)]
        else:
            status, payload = self.route(request.method, path, body, parse_qs(parsed.query), request.headers)
        return self._response(request, status, payload)

    def close(self):
        pass

    # helpers for assertions

    def requests_to(self, method, path):
        return [c for c in self.calls if c["method"] == method and c["path"] == path]

    # routing

    def route(self, method, path, body, query, headers):
        authorized = headers.get("Authorization") == f"Bearer {TOKEN}"
        parts = path.strip("/").split("/")

        if path == "/products" and method == "GET":
            records = list(self.products.values())
            if "category" in query:
                wanted = query["category"][0].lower()
                records = [r for r in records if r["category"]["name"].lower() == wanted]
            return 200, {"products": records, "total": len(records)}
        if parts[0] == "products" and len(parts) == 2 and method == "GET":
            record = self.products.get(parts[1])
            if record is None:
                return 404, {"error": "Product not found"}
            return 200, {"product": record}

        if path == "/auth/login" and method == "POST":
            if body == {"email": SHOPPER["email"], "password": "secret"}:
                return 200, {"user": SHOPPER, "access_token": TOKEN, "refresh_token": "refresh-123"}
            return 401, {"error": "Invalid credentials"}
        if path == "/auth/logout" and method == "POST":
            return 200, {"success": True}
        if path == "/auth/profile" and method == "GET":
            if not authorized:
                return 401, {"error": "Unauthorized"}
            return 200, {"user": SHOPPER}

        if parts[0] == "cart":
            return self.route_cart(method, parts, body)

        if path == "/orders" and method == "POST":
            if not authorized:
                return 401, {"error": "Unauthorized"}
            total = sum(
                (Decimal(str(line["product"]["starting_price"])) * line["quantity"] for line in self.cart.values()),
                Decimal("0"),
            )
            order = {
                "id": f"ord-{len(self.orders) + 1}",
                "user_id": SHOPPER["id"],
                "status": "pending",
                "subtotal": float(total),
                "total_amount": float(total),
                "shipping_address": body["shipping_address"],
                "billing_address": body["billing_address"],
            }
            self.orders.append(order)
            return 201, {"order": order}
        if path == "/orders" and method == "GET":
            return 200, {"orders": self.orders, "total": len(self.orders)}

        if path == "/payments/intents" and method == "POST":
            intent = {
                "id": f"pi-{len(self.intents) + 1}",
                "amount": body["amount"],
                "currency": body["currency"],
                "status": "pending",
                "metadata": body.get("metadata"),
            }
            self.intents.append(intent)
            return 201, {"payment_intent": intent}
        if path == "/payments/confirm" and method == "POST":
            intent = next(i for i in self.intents if i["id"] == body["payment_intent_id"])
            if self.confirm_failures > 0:
                self.confirm_failures -= 1
                intent["status"] = "failed"
            else:
                intent["status"] = "completed"
            return 200, {"payment_intent": intent}

        return 404, {"error": f"No route for {method} {path}"}

    def route_cart(self, method, parts, body):
        if parts == ["cart"] and method == "GET":
            return 200, {"items": list(self.cart.values())}
        if parts == ["cart"] and method == "DELETE":
            self.cart.clear()
            return 200, {"success": True}
        if parts == ["cart", "items"] and method == "POST":
            record = self.products.get(body["product_id"])
            if record is None:
                return 404, {"error": "Product not found"}
            line = self.cart.setdefault(
                record["id"],
                {
                    "product_id": record["id"],
                    "quantity": 0,
                    "product": {
                        "id": record["id"],
                        "title": record["title"],
                        "starting_price": record["starting_price"],
                        "images": record["images"],
                        "category": record["category"],
                    },
                },
            )
            line["quantity"] += body["quantity"]
            return 201, {"success": True}
        if len(parts) == 3 and parts[1] == "items":
            if parts[2] not in self.cart:
                return 404, {"error": "Cart item not found"}
            if method == "PUT":
                self.cart[parts[2]]["quantity"] = body["quantity"]
                return 200, {"success": True}
            if method == "DELETE":
                del self.cart[parts[2]]
                return 200, {"success": True}
        return 404, {"error": "No cart route"}

    @staticmethod
    def _response(request, status, payload):
        response = requests.Response()
        response.status_code = status
        response._content = json.dumps(payload).encode("utf-8") if payload is not None else b""
        response.headers["Content-Type"] = "application/json"
        response.encoding = "utf-8"
        response.reason = "OK" if status < 400 else "Error"
        response.url = request.url
        response.request = request
        return response


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def session(backend):
    http = requests.Session()
    http.mount("http://", backend)
    return http


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def client(session, storage):
    return ApiClient(base_url=BASE_URL, storage=storage, session=session)


@pytest.fixture
def storefront(session, storage):
    return Storefront.create(storage=storage, base_url=BASE_URL, session=session)


@pytest.fixture
def runner():
    """NeonX Runner Vapor, 149.99."""
    return FALLBACK_PRODUCTS[0]


@pytest.fixture
def headset():
    """CyberSync Headset Pro, 299.00."""
    return FALLBACK_PRODUCTS[1]


@pytest.fixture
def shipping_form():
    return {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "address_line1": "12 Analytical Way",
        "city": "London",
        "state": "LDN",
        "postal_code": "N1 9GU",
        "country": "gb",
    }
