from pydantic import BaseModel, Field
from typing import Optional, List


class ProductSummary(BaseModel):
    id: str
    name: str = ""
    price: float = 0
    original_price: Optional[float] = None
    rating: Optional[float] = Field(None, ge=0, le=5)
    stock: Optional[int] = None
    image: str = ""
    images: List[str] = Field(default_factory=list)
    category: Optional[str] = None
    brand: Optional[str] = None
    status: Optional[str] = None


class ProductOut(ProductSummary):
    description: str = ""
    discount: Optional[float] = Field(None, ge=0, le=100)
    sizes: List[str] = Field(default_factory=list)
    colors: List[str] = Field(default_factory=list)
