from pydantic import BaseModel, Field
from typing import Literal


class CategoryOut(BaseModel):
    id: str
    name: str
    slug: str = ""
    image: str = ""
    description: str = ""
    status: Literal["Active", "Inactive"] = "Active"
    products_count: int = Field(0, ge=0)
