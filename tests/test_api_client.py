"""Tests for the HTTP client and envelope helpers."""

import pytest

from blytz.api_client import ACCESS_TOKEN_KEY, unwrap_item, unwrap_list
from blytz.errors import ApiError, AuthenticationError, NotFoundError, TransportError


class TestRequest:
    def test_returns_decoded_body(self, client, backend):
        data = client.get("/products")

        assert data["total"] == len(backend.products)
        assert backend.calls[-1]["headers"]["Content-Type"] == "application/json"

    def test_no_authorization_header_without_token(self, client, backend):
        client.get("/products")

        assert "Authorization" not in backend.calls[-1]["headers"]

    def test_bearer_token_attached(self, client, backend, storage):
        storage.save(ACCESS_TOKEN_KEY, "token-123")
        client.get("/auth/profile")

        assert backend.calls[-1]["headers"]["Authorization"] == "Bearer token-123"

    def test_none_params_dropped(self, client, backend):
        client.get("/products", params={"category": "Tech", "page": None})

        assert backend.calls[-1]["query"] == {"category": ["Tech"]}

    def test_json_body_sent(self, client, backend):
        client.post("/cart/items", {"product_id": "1", "quantity": 2})

        assert backend.calls[-1]["json"] == {"product_id": "1", "quantity": 2}


class TestErrorMapping:
    def test_unauthorized(self, client):
        with pytest.raises(AuthenticationError) as excinfo:
            client.get("/auth/profile")

        assert excinfo.value.status == 401
        assert excinfo.value.message == "Unauthorized"

    def test_forbidden(self, client, backend):
        backend.overrides[("GET", "/admin/payments")] = (403, {"message": "Admins only"})

        with pytest.raises(AuthenticationError) as excinfo:
            client.get("/admin/payments")

        assert excinfo.value.status == 403

    def test_not_found(self, client):
        with pytest.raises(NotFoundError) as excinfo:
            client.get("/products/nope")

        assert excinfo.value.message == "Product not found"

    def test_server_error_message(self, client, backend):
        backend.overrides[("POST", "/orders")] = (500, {"detail": "database down"})

        with pytest.raises(ApiError) as excinfo:
            client.post("/orders", {})

        assert excinfo.value.status == 500
        assert str(excinfo.value) == "HTTP 500: database down"

    def test_error_without_body(self, client, backend):
        backend.overrides[("GET", "/cart")] = (502, None)

        with pytest.raises(ApiError) as excinfo:
            client.get("/cart")

        assert excinfo.value.message == "502 Error"
        assert excinfo.value.payload is None

    def test_transport_failure(self, client, backend):
        backend.offline = True

        with pytest.raises(TransportError) as excinfo:
            client.get("/cart")

        assert excinfo.value.method == "GET"
        assert excinfo.value.url.endswith("/api/v1/cart")


class TestUnwrap:
    def test_list_under_key(self):
        assert unwrap_list({"products": [1, 2], "total": 10}, "products") == ([1, 2], 10)

    def test_list_under_data(self):
        assert unwrap_list({"data": [1, 2, 3]}, "products") == ([1, 2, 3], 3)

    def test_bare_list(self):
        assert unwrap_list([1], "products") == ([1], 1)

    def test_unexpected_shape(self):
        assert unwrap_list(None, "products") == ([], 0)
        assert unwrap_list({"products": "oops"}, "products") == ([], 0)

    def test_item(self):
        assert unwrap_item({"order": {"id": "o1"}}, "order") == {"id": "o1"}
        assert unwrap_item({"id": "o1"}, "order") == {"id": "o1"}

    def test_item_rejects_non_object(self):
        with pytest.raises(ApiError):
            unwrap_item(["o1"], "order")
