# sdk/models.py
from datetime import datetime
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

ProductId = Union[int, str]


class Product(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: ProductId
    name: str
    description: Optional[str] = None
    price: Optional[float] = None
    quantity: Optional[int] = None
    category: Optional[str] = None
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")


class ProductPayload(BaseModel):
    """Body of a create or update request."""
    name: str
    description: str = ""
    price: float
    quantity: int
    category: str = ""


class ApiResponse(BaseModel):
    success: bool = False
    data: Any = None
    message: Optional[str] = None
    errors: Optional[Dict[str, str]] = None
