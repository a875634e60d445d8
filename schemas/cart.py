# schemas/cart.py
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional

from core.cart_utils import normalize_value


class CartItem(BaseModel):
    product_id: str
    name: str = ""
    image: str = ""
    price: float = Field(0, ge=0)
    size: str = ""
    color: str = ""
    quantity: int = 1
    variant_stock: Optional[int] = Field(None, ge=0)
    available_stock: Optional[int] = Field(None, ge=0)

    @field_validator("size", "color", mode="before")
    @classmethod
    def _empty_if_missing(cls, v):
        return normalize_value(v)


class CartReplace(BaseModel):
    items: List[CartItem] = Field(default_factory=list)


class CartItemUpdate(BaseModel):
    product_id: str
    quantity: int
    size: Optional[str] = ""
    color: Optional[str] = ""


class CartItemRemove(BaseModel):
    size: Optional[str] = ""
    color: Optional[str] = ""
