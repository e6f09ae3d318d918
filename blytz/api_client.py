from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar

import requests
from pydantic import BaseModel
from pydantic import ValidationError as SchemaError

from .config import settings
from .errors import ApiError, AuthenticationError, NotFoundError, TransportError
from .storage import MemoryStorage, StateStorage

ACCESS_TOKEN_KEY = "access_token"
REFRESH_TOKEN_KEY = "refresh_token"

M = TypeVar("M", bound=BaseModel)


class ApiClient:
    """Issue JSON requests against the marketplace backend."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        storage: StateStorage | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self.storage = storage if storage is not None else MemoryStorage()
        self._session = session or requests.Session()

    def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Send one request and return the decoded JSON body (or ``None``)."""

        url = self._build_url(path)
        kwargs: Dict[str, Any] = {"headers": self._headers()}
        if params:
            kwargs["params"] = {k: v for k, v in params.items() if v is not None}
        if json is not None:
            kwargs["json"] = json

        try:
            response = self._session.request(method=method, url=url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise TransportError(method, url, str(exc)) from exc

        body = self._decode(response)
        if response.ok:
            return body

        message = self._error_message(body, response)
        if response.status_code in (401, 403):
            raise AuthenticationError(message, status=response.status_code, payload=body)
        if response.status_code == 404:
            raise NotFoundError(message, payload=body)
        raise ApiError(response.status_code, message, body)

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, json: Any = None) -> Any:
        return self.request("POST", path, json=json)

    def put(self, path: str, json: Any = None) -> Any:
        return self.request("PUT", path, json=json)

    def delete(self, path: str, json: Any = None) -> Any:
        return self.request("DELETE", path, json=json)

    @property
    def token(self) -> Optional[str]:
        return self.storage.load(ACCESS_TOKEN_KEY)

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        token = self.token
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _build_url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        if not path.startswith("/"):
            path = f"/{path}"
        return f"{self.base_url}{path}"

    @staticmethod
    def _decode(response: requests.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    @staticmethod
    def _error_message(body: Any, response: requests.Response) -> str:
        if isinstance(body, dict):
            for key in ("error", "message", "detail"):
                value = body.get(key)
                if value:
                    return str(value)
        if isinstance(body, str) and body:
            return body[:200]
        return f"{response.status_code} {response.reason or 'error'}"


def unwrap_list(data: Any, key: str) -> Tuple[List[Any], int]:
    """Return ``(records, total)`` from a list envelope.

    Accepts ``{key: [...], "total": n}``, ``{"data": [...]}`` or a bare list.
    """

    if isinstance(data, list):
        return data, len(data)
    if not isinstance(data, dict):
        return [], 0
    records = data.get(key)
    if records is None:
        records = data.get("data")
    if not isinstance(records, list):
        records = []
    total = data.get("total") or len(records)
    return records, int(total)


def unwrap_item(data: Any, key: str) -> Dict[str, Any]:
    """Return the object under ``key`` when wrapped, else the body itself."""

    if isinstance(data, dict) and isinstance(data.get(key), dict):
        return data[key]
    if isinstance(data, dict):
        return data
    raise ApiError(200, f"Unexpected response body for {key}", data)


def parse_item(model: Type[M], data: Any, key: str) -> M:
    """Validate the object under ``key``; a malformed body becomes ``ApiError``."""

    try:
        return model.model_validate(unwrap_item(data, key))
    except SchemaError as exc:
        raise ApiError(200, f"Unexpected {key} in response ({exc.error_count()} invalid fields)", data) from exc


def parse_list(model: Type[M], data: Any, key: str) -> Tuple[List[M], int]:
    records, total = unwrap_list(data, key)
    try:
        return [model.model_validate(r) for r in records], total
    except SchemaError as exc:
        raise ApiError(200, f"Unexpected {key} in response ({exc.error_count()} invalid fields)", data) from exc
