# sdk/errors.py
from typing import Any, Dict, Optional

# Messages surfaced to the user by the catalog view and the record editor.
FETCH_FAILED = "Failed to fetch products"
CONNECT_FAILED = "Error connecting to server. Please make sure the backend is running."
DELETE_FAILED = "Failed to delete product"
DELETE_ERROR = "Error deleting product"
NOT_FOUND = "Product not found"
FETCH_ONE_ERROR = "Error fetching product"
SAVE_FAILED = "Failed to save product"
SAVE_ERROR = "Error saving product"


class InventoryClientError(Exception):
    """Base class for anything the API client raises."""


class ConnectivityError(InventoryClientError):
    """The request never reached the server or no response came back."""


class ApiError(InventoryClientError):
    """The server answered with a non-2xx status."""

    def __init__(self, status_code: int, body: Optional[Dict[str, Any]] = None):
        self.status_code = status_code
        self.body = body or {}
        super().__init__(f"HTTP {status_code}: {self.message or 'request failed'}")

    @property
    def message(self) -> Optional[str]:
        return self.body.get("message")

    @property
    def errors(self) -> Optional[Dict[str, str]]:
        errors = self.body.get("errors")
        return errors or None


class EditorModeError(RuntimeError):
    pass


class DeleteTokenError(ValueError):
    pass
