"""Key and stock helpers shared by the cart router and the client cart."""
import math
from typing import Iterable, List, Optional


def normalize_value(val) -> str:
    """Normalize null/undefined values to empty string"""
    return "" if val is None else str(val)


def item_key(product_id, size=None, color=None) -> str:
    return f"{product_id}|{normalize_value(size)}|{normalize_value(color)}"


def max_stock(variant_stock: Optional[int], available_stock: Optional[int]) -> float:
    if variant_stock is not None:
        return variant_stock
    if available_stock is not None:
        return available_stock
    return math.inf


def clamp_quantity(quantity: int, limit: float) -> int:
    """Clamp into [1, limit]; an unknown stock leaves the upper side open."""
    return int(max(1, min(quantity, limit)))


def merge_items(*sources: Iterable) -> List:
    """Merge cart item lists by product/size/color key.

    Sources are applied in order. A duplicate key sums the quantities and
    clamps to the incoming entry's stock, and the incoming entry's other
    fields replace the earlier ones. Works on CartItem models.
    """
    merged = {}
    for items in sources:
        for it in items:
            key = item_key(it.product_id, it.size, it.color)
            limit = max_stock(it.variant_stock, it.available_stock)
            existing = merged.get(key)
            if existing is not None:
                qty = clamp_quantity((existing.quantity or 0) + (it.quantity or 0), limit)
                merged[key] = it.model_copy(update={"quantity": qty})
            else:
                merged[key] = it.model_copy(update={"quantity": clamp_quantity(it.quantity or 1, limit)})
    return list(merged.values())
