import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from core.cart_utils import clamp_quantity, item_key, max_stock, merge_items
from core.dependencies import get_current_user
from schemas.cart import CartItem, CartItemRemove, CartItemUpdate, CartReplace
from db import db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cart", tags=["Cart"])


def _clamped(item: CartItem) -> CartItem:
    limit = max_stock(item.variant_stock, item.available_stock)
    return item.model_copy(update={"quantity": clamp_quantity(item.quantity, limit)})


async def _load_items(user_id: str) -> List[CartItem]:
    cart = await db.carts.find_one({"user_id": user_id})
    if not cart:
        return []
    return [CartItem(**it) for it in cart.get("items", []) if it.get("product_id")]


async def _save_items(user_id: str, items: List[CartItem]) -> List[dict]:
    docs = [it.model_dump() for it in items]
    await db.carts.update_one(
        {"user_id": user_id},
        {"$set": {"items": docs}},
        upsert=True,
    )
    return docs


# GET /cart - current cart
@router.get("")
async def get_cart(current_user: dict = Depends(get_current_user)):
    items = await _load_items(str(current_user["_id"]))
    return {"success": True, "data": [it.model_dump() for it in items]}


# PUT /cart - replace every item
@router.put("")
async def replace_cart(payload: CartReplace, current_user: dict = Depends(get_current_user)):
    # duplicates in the payload collapse onto one line
    items = merge_items([_clamped(it) for it in payload.items])
    docs = await _save_items(str(current_user["_id"]), items)
    return {"success": True, "data": docs}


# POST /cart/item - add or merge one item
@router.post("/item")
async def add_item(item: CartItem, current_user: dict = Depends(get_current_user)):
    if item.quantity <= 0:
        raise HTTPException(status_code=400, detail="Invalid item payload")

    user_id = str(current_user["_id"])
    items = await _load_items(user_id)
    merged = merge_items(items, [item])
    docs = await _save_items(user_id, merged)
    return {"success": True, "data": docs}


# PATCH /cart/item - set quantity of one line
@router.patch("/item")
async def update_item(data: CartItemUpdate, current_user: dict = Depends(get_current_user)):
    if not data.product_id or not data.quantity:
        raise HTTPException(status_code=400, detail="Invalid item payload")

    user_id = str(current_user["_id"])
    items = await _load_items(user_id)
    if not items:
        return {"success": True, "data": []}

    target = item_key(data.product_id, data.size, data.color)
    updated = []
    for it in items:
        if item_key(it.product_id, it.size, it.color) == target:
            limit = max_stock(it.variant_stock, it.available_stock)
            it = it.model_copy(update={"quantity": clamp_quantity(data.quantity, limit)})
        updated.append(it)

    docs = await _save_items(user_id, updated)
    return {"success": True, "data": docs}


# DELETE /cart/item/{product_id} - remove one variant
@router.delete("/item/{product_id}")
async def remove_item(
    product_id: str,
    data: CartItemRemove = CartItemRemove(),
    current_user: dict = Depends(get_current_user),
):
    user_id = str(current_user["_id"])
    items = await _load_items(user_id)
    if not items:
        return {"success": True, "data": []}

    target = item_key(product_id, data.size, data.color)
    remaining = [it for it in items if item_key(it.product_id, it.size, it.color) != target]
    logger.debug("Removed %d cart line(s) for user %s", len(items) - len(remaining), user_id)

    docs = await _save_items(user_id, remaining)
    return {"success": True, "data": docs}
