"""
HTTP client for the shop API.

Works with any ``httpx.Client``; tests hand it FastAPI's ``TestClient``,
which is an ``httpx.Client`` bound to the in-process app.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from config import STORE_API_URL
from errors import ApiError, TransientNetworkError

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    try:
        detail = response.json().get("detail")
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(detail, list):
        # FastAPI request validation errors
        return "; ".join(err.get("msg", "") for err in detail)
    return detail or response.reason_phrase


class StorefrontClient:
    def __init__(self, http: Optional[httpx.Client] = None, base_url: str = STORE_API_URL):
        self.http = http or httpx.Client(base_url=base_url, timeout=10.0)
        self.token: Optional[str] = None

    def _request(self, method: str, path: str, **kwargs) -> Any:
        headers = kwargs.pop("headers", {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        try:
            response = self.http.request(method, path, headers=headers, **kwargs)
        except httpx.TransportError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise TransientNetworkError("Could not reach the shop. Please try again.")
        if response.is_error:
            message = _error_message(response)
            logger.info("%s %s -> %d %s", method, path, response.status_code, message)
            raise ApiError(message, status_code=response.status_code)
        return response.json()

    # Catalog

    def list_products(self, category: Optional[str] = None) -> List[Dict]:
        params = {"category": category} if category else None
        return self._request("GET", "/api/products", params=params)

    def get_product(self, product_id: int) -> Dict:
        return self._request("GET", f"/api/products/{product_id}")

    def list_categories(self) -> List[Dict]:
        return self._request("GET", "/api/categories")

    # Orders

    def place_order(self, order: Dict) -> Dict:
        return self._request("POST", "/api/orders", json=order)

    def get_order(self, order_id: str) -> Dict:
        return self._request("GET", f"/api/orders/{order_id}")

    # Users

    def register(self, **fields) -> Dict:
        return self._request("POST", "/api/users/register", json=fields)

    def login(self, email: str, password: str) -> Dict:
        return self._request("POST", "/api/users/login", json={"email": email, "password": password})

    def me(self) -> Dict:
        return self._request("GET", "/api/users/me")

    # Admin

    def list_orders(self) -> List[Dict]:
        return self._request("GET", "/api/admin/orders")

    def update_order_status(self, order_id: str, status: str) -> Dict:
        return self._request("PUT", f"/api/admin/orders/{order_id}/status", json={"status": status})

    def create_product(self, product: Dict) -> Dict:
        return self._request("POST", "/api/admin/products", json=product)

    def update_product(self, product_id: int, changes: Dict) -> Dict:
        return self._request("PUT", f"/api/admin/products/{product_id}", json=changes)

    def delete_product(self, product_id: int) -> Dict:
        return self._request("DELETE", f"/api/admin/products/{product_id}")

    def create_category(self, category: Dict) -> Dict:
        return self._request("POST", "/api/admin/categories", json=category)

    def update_category(self, category_id: int, changes: Dict) -> Dict:
        return self._request("PUT", f"/api/admin/categories/{category_id}", json=changes)

    def delete_category(self, category_id: int) -> Dict:
        return self._request("DELETE", f"/api/admin/categories/{category_id}")

    def list_users(self) -> List[Dict]:
        return self._request("GET", "/api/admin/users")

    def delete_user(self, user_id: str) -> Dict:
        return self._request("DELETE", f"/api/admin/users/{user_id}")
