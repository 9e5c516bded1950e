# sdk/editor.py
import logging
import math
import re
from typing import Dict, Optional

from pydantic import BaseModel, ValidationError

from .errors import (
    FETCH_ONE_ERROR, NOT_FOUND, SAVE_ERROR, SAVE_FAILED,
    ApiError, ConnectivityError, EditorModeError, InventoryClientError,
)
from .models import Product, ProductId, ProductPayload

logger = logging.getLogger(__name__)

CATALOG = "catalog"

NAME_REQUIRED = "Product name is required"
PRICE_INVALID = "Price must be greater than 0"
QUANTITY_INVALID = "Quantity cannot be negative"


class FormState(BaseModel):
    # raw user input, parsed only when the form is submitted
    name: str = ""
    description: str = ""
    price: str = ""
    quantity: str = ""
    category: str = ""


FIELDS = tuple(FormState.model_fields)

# plain decimal notation only; float() and int() also accept "1_5", "1e3", "nan"
PRICE_RE = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)")
QUANTITY_RE = re.compile(r"[+-]?\d+")


def _parse_price(raw: str) -> Optional[float]:
    raw = raw.strip()
    if not PRICE_RE.fullmatch(raw):
        return None
    value = float(raw)
    return value if math.isfinite(value) else None


def _parse_quantity(raw: str) -> Optional[int]:
    raw = raw.strip()
    if not QUANTITY_RE.fullmatch(raw):
        return None
    return int(raw)


def validate_form(form: FormState) -> Dict[str, str]:
    """Field errors for ``form``; an empty dict means it can be submitted."""
    errors = {}
    if not form.name.strip():
        errors["name"] = NAME_REQUIRED

    price = _parse_price(form.price)
    if price is None or price <= 0:
        errors["price"] = PRICE_INVALID

    quantity = _parse_quantity(form.quantity)
    if quantity is None or quantity < 0:
        errors["quantity"] = QUANTITY_INVALID
    return errors


def _to_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class RecordEditor:
    """Create-or-edit life cycle of a single product.

    Passing a non-empty ``product_id`` puts the editor in edit mode for its
    whole lifetime; otherwise it creates a new record.
    """

    def __init__(self, client, product_id: Optional[ProductId] = None):
        self.client = client
        self.product_id = product_id if product_id not in (None, "") else None
        self.form = FormState()
        self.validation_errors: Dict[str, str] = {}
        self.loading = False
        self.error: Optional[str] = None
        self.saved: Optional[Product] = None
        self.navigate_to: Optional[str] = None

    @property
    def is_editing(self) -> bool:
        return self.product_id is not None

    @property
    def can_submit(self) -> bool:
        return not self.loading

    @property
    def submit_label(self) -> str:
        if self.loading:
            return "Saving..."
        return "Update Product" if self.is_editing else "Add Product"

    def load(self) -> bool:
        if not self.is_editing:
            raise EditorModeError("load() is only available when editing an existing product")

        self.loading = True
        try:
            resp = self.client.get_product(self.product_id)
            if not resp.success:
                self.error = NOT_FOUND
                return False
            product = Product.model_validate(resp.data)
        except ApiError as e:
            logger.error("Error fetching product %s: %s", self.product_id, e)
            self.error = NOT_FOUND if e.status_code == 404 else FETCH_ONE_ERROR
            return False
        except (ConnectivityError, ValidationError) as e:
            logger.error("Error fetching product %s: %s", self.product_id, e)
            self.error = FETCH_ONE_ERROR
            return False
        finally:
            self.loading = False

        self.form = FormState(
            name=product.name or "",
            description=product.description or "",
            price=_to_text(product.price),
            quantity=_to_text(product.quantity),
            category=product.category or "",
        )
        self.error = None
        return True

    def set_field(self, name: str, value: str):
        if name not in FIELDS:
            raise KeyError(name)
        setattr(self.form, name, value)
        self.validation_errors.pop(name, None)

    def validate(self) -> bool:
        self.validation_errors = validate_form(self.form)
        return not self.validation_errors

    def build_payload(self) -> ProductPayload:
        return ProductPayload(
            name=self.form.name.strip(),
            description=self.form.description.strip(),
            price=float(self.form.price.strip()),
            quantity=int(self.form.quantity.strip()),
            category=self.form.category.strip(),
        )

    def submit(self) -> bool:
        if not self.can_submit:
            logger.debug("submit ignored, a save is already in flight")
            return False
        if not self.validate():
            return False

        payload = self.build_payload()
        self.loading = True
        self.error = None
        try:
            if self.is_editing:
                resp = self.client.update_product(self.product_id, payload)
            else:
                resp = self.client.create_product(payload)
        except ApiError as e:
            logger.error("Error saving product: %s", e)
            if e.errors:
                self.validation_errors = dict(e.errors)
            else:
                self.error = e.message or SAVE_ERROR
            return False
        except InventoryClientError as e:
            logger.error("Error saving product: %s", e)
            self.error = SAVE_ERROR
            return False
        finally:
            self.loading = False

        if not resp.success:
            if resp.errors:
                self.validation_errors = dict(resp.errors)
            else:
                self.error = resp.message or SAVE_FAILED
            return False

        try:
            self.saved = Product.model_validate(resp.data) if resp.data else None
        except ValidationError as e:
            logger.warning("saved product could not be read back: %s", e)
        self.navigate_to = CATALOG
        logger.info("product %s", "updated" if self.is_editing else "created")
        return True

    def cancel(self):
        self.navigate_to = CATALOG
