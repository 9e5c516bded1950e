# tests/conftest.py
import pytest
import requests
from fastapi.testclient import TestClient
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

from app.main import app
from app.core import reset_all_logic
from sdk.inventory_client import InventoryClient
from sdk.models import ApiResponse

BASE_URL = "http://testserver/api"


class AppAdapter(BaseAdapter):
    """Routes requests.Session traffic into the FastAPI app in-process."""

    def __init__(self, asgi_app):
        super().__init__()
        self.client = TestClient(asgi_app)

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        r = self.client.request(request.method, request.url, content=request.body,
                                headers={k: v for k, v in request.headers.items()})
        resp = requests.Response()
        resp.status_code = r.status_code
        resp._content = r.content
        resp.headers = CaseInsensitiveDict(r.headers)
        resp.encoding = "utf-8"
        resp.url = request.url
        resp.reason = r.reason_phrase
        resp.request = request
        return resp

    def close(self):
        self.client.close()


class DownAdapter(BaseAdapter):
    """Every request fails as if the backend were not running."""

    def send(self, request, **kwargs):
        raise requests.exceptions.ConnectionError(f"connection refused: {request.url}")

    def close(self):
        pass


@pytest.fixture
def api_client():
    reset_all_logic()
    session = requests.Session()
    session.mount("http://testserver", AppAdapter(app))
    yield InventoryClient(base_url=BASE_URL, session=session)
    session.close()


@pytest.fixture
def down_client():
    session = requests.Session()
    session.mount("http://", DownAdapter())
    return InventoryClient(base_url="http://backend.invalid/api", session=session)


class FakeClient:
    """Stands in for InventoryClient; queue a response or exception per method."""

    def __init__(self):
        self.calls = []
        self.results = {}

    def will(self, method, result):
        self.results[method] = result
        return self

    def _call(self, method, *args):
        self.calls.append((method,) + args)
        result = self.results.get(method, ApiResponse(success=True))
        if isinstance(result, Exception):
            raise result
        return result

    def list_products(self):
        return self._call("list_products")

    def get_product(self, product_id):
        return self._call("get_product", product_id)

    def create_product(self, payload):
        return self._call("create_product", payload)

    def update_product(self, product_id, payload):
        return self._call("update_product", product_id, payload)

    def delete_product(self, product_id):
        return self._call("delete_product", product_id)


@pytest.fixture
def fake_client():
    return FakeClient()


def product(pid, name, description=None, category=None, price=1.0, quantity=1):
    return {
        "id": pid, "name": name, "description": description, "category": category,
        "price": price, "quantity": quantity, "createdAt": "2024-01-15T10:30:00",
    }
