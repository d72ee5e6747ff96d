# backend/utils/api_client.py
import logging
from typing import Any, Dict, List, Optional

import httpx

from config import settings
from services.checkout import ApiError

logger = logging.getLogger(__name__)


class StorefrontClient:
    """Synchronous client for the storefront REST API.

    Wraps an ``httpx.Client`` (any subclass works, including FastAPI's
    ``TestClient``). Failed calls raise ``ApiError`` carrying the server's
    ``detail`` message, or a generic fallback when the server sent none.
    """

    def __init__(self, http: Optional[httpx.Client] = None, base_url: Optional[str] = None, token: Optional[str] = None):
        self.http = http or httpx.Client(base_url=base_url or settings.BACKEND_URL)
        self.token = token

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(self, method: str, url: str, fallback: str, **kwargs) -> Any:
        try:
            response = self.http.request(method, url, headers=self._headers(), **kwargs)
        except httpx.RequestError as e:
            # Network failures surface with the generic message, no retry
            logger.error(f"Storefront API unreachable: {e}")
            raise ApiError(fallback) from e

        if response.status_code >= 400:
            message = None
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict) and isinstance(body.get("detail"), str):
                message = body["detail"]
            logger.warning("%s %s -> %s %s", method, url, response.status_code, message)
            raise ApiError(message or fallback, response.status_code)

        return response.json()

    # ---- identity ----

    def login(self, email: str, password: str) -> Dict[str, Any]:
        data = self._request("POST", "/api/users/login", "Login failed", json={"email": email, "password": password})
        self.token = data["access_token"]
        return data["user"]

    def register(self, name: str, email: str, password: str) -> Dict[str, Any]:
        data = self._request("POST", "/api/users/register", "Registration failed",
                             json={"name": name, "email": email, "password": password})
        self.token = data["access_token"]
        return data["user"]

    def logout(self) -> None:
        self._request("POST", "/api/users/logout", "Logout failed")
        self.token = None

    # ---- catalogue ----

    def list_products(self, keyword: Optional[str] = None, page: int = 1) -> Dict[str, Any]:
        params = {"page": page}
        if keyword:
            params["keyword"] = keyword
        return self._request("GET", "/api/products", "Failed to load products", params=params)

    def get_product(self, product_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/api/products/{product_id}", "Failed to load product")

    # ---- orders ----

    def create_order(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/api/orders", "Failed to place order", json=payload)

    def get_order(self, order_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/api/orders/{order_id}", "Failed to load order")

    def my_orders(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/orders/mine", "Failed to load orders")

    def pay_order(self, order_id: int, payment_result: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self._request("PUT", f"/api/orders/{order_id}/pay", "Payment failed", json=payment_result or {})

    def deliver_order(self, order_id: int) -> Dict[str, Any]:
        return self._request("PUT", f"/api/orders/{order_id}/deliver", "Failed to mark order as delivered")
