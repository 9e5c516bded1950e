# sdk/inventory_client.py
import logging
from typing import Any, Dict, Optional

import requests

from .config import get_settings
from .errors import ApiError, ConnectivityError
from .models import ApiResponse, ProductId, ProductPayload

logger = logging.getLogger(__name__)


class InventoryClient:
    """Thin JSON client for the ``/products`` REST resource.

    2xx responses come back as :class:`ApiResponse`. A non-2xx status raises
    :class:`ApiError` with the decoded body attached, and a request that got no
    response at all raises :class:`ConnectivityError`.
    """

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None,
                 session: Optional[requests.Session] = None):
        settings = get_settings()
        self.base_url = (base_url or settings.api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})

    def _request(self, method: str, path: str, **kwargs) -> ApiResponse:
        url = f"{self.base_url}{path}"
        logger.debug("%s %s", method, url)
        try:
            r = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            logger.error("%s %s failed: %s", method, url, e)
            raise ConnectivityError(str(e)) from e

        body = self._decode(r)
        if not 200 <= r.status_code < 300:
            raise ApiError(r.status_code, body)
        return ApiResponse.model_validate(body)

    @staticmethod
    def _decode(r: requests.Response) -> Dict[str, Any]:
        try:
            body = r.json()
        except ValueError:
            return {"success": False, "message": f"HTTP {r.status_code}: {r.text[:200]}"}
        if not isinstance(body, dict):
            return {"success": False, "message": f"unexpected response: {body!r}"}
        return body

    # Products
    def list_products(self) -> ApiResponse:
        return self._request("GET", "/products")

    def get_product(self, product_id: ProductId) -> ApiResponse:
        return self._request("GET", f"/products/{product_id}")

    def create_product(self, payload: ProductPayload) -> ApiResponse:
        return self._request("POST", "/products", json=payload.model_dump())

    def update_product(self, product_id: ProductId, payload: ProductPayload) -> ApiResponse:
        return self._request("PUT", f"/products/{product_id}", json=payload.model_dump())

    def delete_product(self, product_id: ProductId) -> ApiResponse:
        return self._request("DELETE", f"/products/{product_id}")

    # Server-side queries
    def search_products(self, term: str) -> ApiResponse:
        return self._request("GET", "/products/search", params={"q": term})

    def products_by_category(self, category: str) -> ApiResponse:
        return self._request("GET", f"/products/category/{category}")

    def low_stock_products(self, threshold: Optional[int] = None) -> ApiResponse:
        if threshold is None:
            threshold = get_settings().low_stock_threshold
        return self._request("GET", "/products/low-stock", params={"threshold": threshold})
