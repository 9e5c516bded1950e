# app/models.py
from pydantic import BaseModel
from typing import Optional


class ProductIn(BaseModel):
    # loose types so field rules are reported by validate_product, not by FastAPI
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    quantity: Optional[int] = None
    category: Optional[str] = None
