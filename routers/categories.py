from typing import Literal, Optional

from fastapi import APIRouter, HTTPException

from schemas.category import CategoryOut
from db import db

router = APIRouter(prefix="/categories", tags=["Categories"])


async def _products_count(category: dict) -> int:
    # inactive categories always report zero
    if category.get("status", "Active") != "Active":
        return 0
    return await db.products.count_documents({"category": category.get("slug"), "hidden": {"$ne": True}})


async def category_out(doc: dict) -> dict:
    return CategoryOut(
        id=str(doc["_id"]),
        **{k: v for k, v in doc.items() if k in ("name", "slug", "image", "description", "status")},
        products_count=await _products_count(doc),
    ).model_dump()


# GET /categories?status=Active - newest first
@router.get("")
async def get_categories(status: Optional[Literal["Active", "Inactive"]] = None):
    query = {"status": status} if status else {}
    docs = await db.categories.find(query).sort("created_at", -1).to_list(length=None)
    data = [await category_out(d) for d in docs]
    return {"success": True, "count": len(data), "data": data}


@router.get("/{category_id}")
async def get_category(category_id: str):
    if not (doc := await db.categories.find_one({"_id": category_id})):
        raise HTTPException(status_code=404, detail="Category not found")
    return {"success": True, "data": await category_out(doc)}
