from datetime import datetime, timezone
from typing import Optional, Dict, Any, List

from fastapi import HTTPException

from .database import PRODUCTS, next_id, reset_store
from .models import ProductIn

# Field rules and the product operations behind each endpoint.

NAME_MAX = 100
DESCRIPTION_MAX = 500
CATEGORY_MAX = 50


class ProductValidationError(Exception):
    def __init__(self, errors: Dict[str, str]):
        self.errors = errors
        super().__init__("Validation failed")


def validate_product(p: ProductIn) -> Dict[str, str]:
    errors = {}
    if not p.name or not p.name.strip():
        errors["name"] = "Product name is required"
    elif len(p.name) > NAME_MAX:
        errors["name"] = f"Product name must not exceed {NAME_MAX} characters"
    if p.description and len(p.description) > DESCRIPTION_MAX:
        errors["description"] = f"Description must not exceed {DESCRIPTION_MAX} characters"
    if p.price is None:
        errors["price"] = "Price is required"
    elif p.price <= 0:
        errors["price"] = "Price must be greater than 0"
    if p.quantity is None:
        errors["quantity"] = "Quantity is required"
    elif p.quantity < 0:
        errors["quantity"] = "Quantity cannot be negative"
    if p.category and len(p.category) > CATEGORY_MAX:
        errors["category"] = f"Category must not exceed {CATEGORY_MAX} characters"
    return errors


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _name_taken(name: str, exclude_id: Optional[int] = None) -> bool:
    name = name.lower()
    return any(
        pid != exclude_id and p["name"].lower() == name
        for pid, p in PRODUCTS.items()
    )


def _newest_first(products) -> List[Dict[str, Any]]:
    # ids grow with creation time, so they break ties between equal timestamps
    return sorted(products, key=lambda p: (p["createdAt"], p["id"]), reverse=True)


def _require(product_id: int) -> Dict[str, Any]:
    p = PRODUCTS.get(product_id)
    if not p:
        raise HTTPException(status_code=404, detail=f"Product not found with id: {product_id}")
    return p


def list_products_logic():
    return _newest_first(PRODUCTS.values())


def get_product_logic(product_id: int):
    return _require(product_id)


def create_product_logic(payload: ProductIn):
    errors = validate_product(payload)
    if errors:
        raise ProductValidationError(errors)
    if _name_taken(payload.name):
        raise HTTPException(status_code=400, detail=f"Product with name '{payload.name}' already exists")

    pid = next_id()
    now = _now()
    PRODUCTS[pid] = {
        "id": pid,
        "name": payload.name,
        "description": payload.description,
        "price": payload.price,
        "quantity": payload.quantity,
        "category": payload.category,
        "createdAt": now,
        "updatedAt": now,
    }
    return PRODUCTS[pid]


def update_product_logic(product_id: int, payload: ProductIn):
    errors = validate_product(payload)
    if errors:
        raise ProductValidationError(errors)
    p = _require(product_id)
    if p["name"].lower() != payload.name.lower() and _name_taken(payload.name, exclude_id=product_id):
        raise HTTPException(status_code=400, detail=f"Product with name '{payload.name}' already exists")

    p.update(
        name=payload.name,
        description=payload.description,
        price=payload.price,
        quantity=payload.quantity,
        category=payload.category,
        updatedAt=_now(),
    )
    return p


def delete_product_logic(product_id: int):
    _require(product_id)
    del PRODUCTS[product_id]


def search_products_logic(q: Optional[str]):
    if not q or not q.strip():
        return list_products_logic()
    term = q.strip().lower()
    return [
        p for p in list_products_logic()
        if term in p["name"].lower() or term in (p["description"] or "").lower()
    ]


def products_by_category_logic(category: str):
    term = category.lower()
    return [p for p in list_products_logic() if term in (p["category"] or "").lower()]


def low_stock_logic(threshold: int):
    return [p for p in list_products_logic() if p["quantity"] <= threshold]


def reset_all_logic():
    reset_store()
    return {"status": "reset"}
