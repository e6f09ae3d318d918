from __future__ import annotations

from typing import Optional

from ..api_client import ACCESS_TOKEN_KEY, REFRESH_TOKEN_KEY, ApiClient, parse_item
from ..console import warn
from ..errors import StorefrontError
from ..schemas import AuthResponse, User


class AuthService:
    """Login state for the current client.

    Tokens are kept in the client's ``StateStorage`` so the ``ApiClient``
    attaches them to every request. The refresh token is stored for later
    use; nothing refreshes it yet.
    """

    def __init__(self, client: ApiClient) -> None:
        self.client = client
        self.current_user: Optional[User] = None

    @property
    def is_authenticated(self) -> bool:
        return self.current_user is not None

    def login(self, email: str, password: str) -> AuthResponse:
        data = self.client.post("/auth/login", {"email": email, "password": password})
        auth = parse_item(AuthResponse, data, "auth")
        self.client.storage.save(ACCESS_TOKEN_KEY, auth.access_token)
        self.client.storage.save(REFRESH_TOKEN_KEY, auth.refresh_token)
        self.current_user = auth.user
        return auth

    def register(
        self,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        phone: str | None = None,
        role: str | None = None,
    ) -> User:
        payload = {
            "email": email,
            "password": password,
            "first_name": first_name,
            "last_name": last_name,
            "phone": phone,
            "role": role,
        }
        data = self.client.post("/auth/register", {k: v for k, v in payload.items() if v is not None})
        return parse_item(User, data, "user")

    def logout(self) -> None:
        try:
            self.client.post("/auth/logout")
        except StorefrontError as exc:
            warn("Logout error", exc)
        finally:
            self.client.storage.delete(ACCESS_TOKEN_KEY)
            self.client.storage.delete(REFRESH_TOKEN_KEY)
            self.current_user = None

    def get_profile(self) -> User:
        data = self.client.get("/auth/profile")
        self.current_user = parse_item(User, data, "user")
        return self.current_user

    def restore(self) -> Optional[User]:
        """Re-establish ``current_user`` from a stored token, if it is still valid."""

        if not self.client.token:
            return None
        try:
            return self.get_profile()
        except StorefrontError as exc:
            warn("Stored session could not be restored", exc)
            return None

    def change_password(self, current_password: str, new_password: str) -> None:
        self.client.post(
            "/auth/change-password",
            {"current_password": current_password, "new_password": new_password},
        )
