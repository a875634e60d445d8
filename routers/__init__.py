from fastapi import APIRouter
from .auth import auth_router
from . import cart, categories, favorites, products
router = APIRouter(prefix="/api")
router.include_router(auth_router)
router.include_router(categories.router)
router.include_router(products.router)
router.include_router(cart.router)
router.include_router(favorites.router)
