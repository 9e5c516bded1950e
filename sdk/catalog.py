# sdk/catalog.py
"""Local view over the server's product collection.

The view keeps the last list the server returned and replaces it wholesale on
every successful ``load()``. Search filtering happens locally and is recomputed
on every read of ``filtered_products``. Deletion is a two-step protocol: a
``DeleteToken`` has to be requested and then confirmed before any request is
sent.
"""
import logging
import uuid
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from pydantic import ValidationError

from .errors import (
    CONNECT_FAILED, DELETE_ERROR, DELETE_FAILED, FETCH_FAILED,
    DeleteTokenError, InventoryClientError,
)
from .models import Product, ProductId

logger = logging.getLogger(__name__)

NO_RESULTS = "no_results"
NO_PRODUCTS = "no_products"


def _matches(value: Optional[str], term: str) -> bool:
    return bool(value) and term in value.lower()


def filter_products(products: Sequence[Product], search_term: str) -> List[Product]:
    """Products whose name, description or category contains the term, ignoring case.

    A blank term returns every product in its original order.
    """
    if not search_term or not search_term.strip():
        return list(products)
    term = search_term.lower()
    return [
        p for p in products
        if _matches(p.name, term) or _matches(p.description, term) or _matches(p.category, term)
    ]


@dataclass(frozen=True)
class DeleteToken:
    product_id: ProductId
    key: str


class CatalogView:
    def __init__(self, client):
        self.client = client
        self.products: List[Product] = []
        self.search_term = ""
        self.loading = False
        self.error: Optional[str] = None
        self._pending = {}

    def load(self) -> bool:
        """Fetch every product; on success the local list is replaced as a whole."""
        self.loading = True
        try:
            resp = self.client.list_products()
            if resp.success and isinstance(resp.data, list):
                self.products = [Product.model_validate(p) for p in resp.data]
                self.error = None
                logger.debug("loaded %d products", len(self.products))
                return True
            if resp.success:
                logger.error("Malformed product list: %r", resp.data)
            self.error = FETCH_FAILED
        except ValidationError as e:
            logger.error("Malformed product list: %s", e)
            self.error = FETCH_FAILED
        except InventoryClientError as e:
            logger.error("Error fetching products: %s", e)
            self.error = CONNECT_FAILED
        finally:
            self.loading = False
        return False

    def set_search_term(self, term: str):
        self.search_term = term or ""

    @property
    def filtered_products(self) -> List[Product]:
        return filter_products(self.products, self.search_term)

    @property
    def empty_state(self) -> Optional[str]:
        if self.filtered_products:
            return None
        return NO_RESULTS if self.search_term.strip() else NO_PRODUCTS

    def find(self, product_id: ProductId) -> Optional[Product]:
        for p in self.products:
            if p.id == product_id:
                return p
        return None

    # Deletion
    def request_delete(self, product_id: ProductId) -> DeleteToken:
        token = DeleteToken(product_id=product_id, key=uuid.uuid4().hex)
        self._pending[token.key] = token
        return token

    def cancel_delete(self, token: DeleteToken):
        self._pending.pop(token.key, None)

    def confirm_delete(self, token: DeleteToken) -> bool:
        """Send the delete for a previously requested token.

        The local entry is dropped only after the server acknowledges it.
        """
        if self._pending.pop(token.key, None) != token:
            raise DeleteTokenError(f"unknown or already used delete token for product {token.product_id}")

        try:
            resp = self.client.delete_product(token.product_id)
        except InventoryClientError as e:
            logger.error("Error deleting product %s: %s", token.product_id, e)
            self.error = DELETE_ERROR
            return False

        if not resp.success:
            self.error = DELETE_FAILED
            return False

        for i, p in enumerate(self.products):
            if p.id == token.product_id:
                del self.products[i]
                break
        logger.info("deleted product %s", token.product_id)
        return True

    def delete(self, product_id: ProductId, confirm: Callable[[ProductId], bool]) -> bool:
        token = self.request_delete(product_id)
        if not confirm(product_id):
            self.cancel_delete(token)
            return False
        return self.confirm_delete(token)
