from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from schemas.product import ProductSummary


class FavoriteOut(BaseModel):
    id: str
    product_id: str
    product: Optional[ProductSummary] = None
    created_at: Optional[datetime] = None
