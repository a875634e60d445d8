import math
import re
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from schemas.product import ProductOut, ProductSummary
from db import db

router = APIRouter(prefix="/products", tags=["Products"])

SEARCH_FIELDS = {"_id": 1, "name": 1, "price": 1, "image": 1, "images": 1, "category": 1}


def to_out(doc: dict) -> dict:
    return {"id": str(doc["_id"]), **{k: v for k, v in doc.items() if k != "_id"}}


def summary_out(doc: dict) -> dict:
    return ProductSummary(**to_out(doc)).model_dump()


def _match(category: Optional[str], search: Optional[str]) -> dict:
    # visibility: exclude hidden
    match: dict = {"hidden": {"$ne": True}}
    if category:
        match["category"] = category
    if search:
        pattern = re.escape(search)
        match["$or"] = [
            {"name": {"$regex": pattern, "$options": "i"}},
            {"description": {"$regex": pattern, "$options": "i"}},
        ]
    return match


# GET /products - paginated catalog
@router.get("")
async def get_products(
    category: Optional[str] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
):
    match = _match(category, search)
    skip = (page - 1) * limit

    docs = await db.products.find(match).sort("created_at", -1).skip(skip).limit(limit).to_list(length=limit)
    total = await db.products.count_documents(match)
    return {
        "success": True,
        "count": len(docs),
        "total": total,
        "page": page,
        "total_pages": math.ceil(total / limit),
        "data": [ProductOut(**to_out(d)).model_dump() for d in docs],
    }


# GET /products/search - typeahead, minimal fields
@router.get("/search")
async def search_products(
    q: str = Query("", description="Keyword matched against the product name"),
    limit: int = Query(8, ge=1, le=50),
):
    q = q.strip()
    if not q:
        return {"success": True, "data": []}

    match = {"hidden": {"$ne": True}, "name": {"$regex": re.escape(q), "$options": "i"}}
    docs = await db.products.find(match, SEARCH_FIELDS).limit(limit).to_list(length=limit)
    return {"success": True, "data": [summary_out(d) for d in docs]}


@router.get("/{product_id}")
async def get_product(product_id: str):
    if not (doc := await db.products.find_one({"_id": product_id, "hidden": {"$ne": True}})):
        # hidden products look missing to the public
        raise HTTPException(status_code=404, detail="Product not found")
    return {"success": True, "data": ProductOut(**to_out(doc)).model_dump()}
