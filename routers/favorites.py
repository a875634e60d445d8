from datetime import datetime, timezone
from typing import Optional
import uuid

from fastapi import APIRouter, Depends, HTTPException

from core.dependencies import get_current_user
from routers.products import to_out
from schemas.favorite import FavoriteOut
from schemas.product import ProductSummary
from db import db

router = APIRouter(prefix="/favorites", tags=["Favorites"])


async def _visible_product(product_id: str) -> Optional[dict]:
    return await db.products.find_one({"_id": product_id, "hidden": {"$ne": True}})


def _favorite_out(fav: dict, product: Optional[dict]) -> dict:
    return FavoriteOut(
        id=str(fav["_id"]),
        product_id=fav["product_id"],
        product=ProductSummary(**to_out(product)) if product else None,
        created_at=fav.get("created_at"),
    ).model_dump()


# GET /favorites - newest first, hidden products dropped
@router.get("")
async def get_favorites(current_user: dict = Depends(get_current_user)):
    favorites = await db.favorites.find(
        {"user_id": str(current_user["_id"])}
    ).sort("created_at", -1).to_list(length=None)

    data = []
    for fav in favorites:
        product = await _visible_product(fav["product_id"])
        if product:
            data.append(_favorite_out(fav, product))
    return {"success": True, "data": data}


# POST /favorites/{product_id} - idempotent add
@router.post("/{product_id}", status_code=201)
async def add_favorite(product_id: str, current_user: dict = Depends(get_current_user)):
    product = await _visible_product(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    user_id = str(current_user["_id"])
    await db.favorites.update_one(
        {"user_id": user_id, "product_id": product_id},
        {"$setOnInsert": {
            "_id": str(uuid.uuid4()),
            "user_id": user_id,
            "product_id": product_id,
            "created_at": datetime.now(timezone.utc),
        }},
        upsert=True,
    )
    fav = await db.favorites.find_one({"user_id": user_id, "product_id": product_id})
    return {"success": True, "data": _favorite_out(fav, product)}


# DELETE /favorites/{product_id}
@router.delete("/{product_id}")
async def remove_favorite(product_id: str, current_user: dict = Depends(get_current_user)):
    await db.favorites.delete_one({"user_id": str(current_user["_id"]), "product_id": product_id})
    return {"success": True, "message": "Removed from favorites"}
