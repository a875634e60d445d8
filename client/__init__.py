"""Shopper-side services for the storefront API."""
from client.api import ApiClient, ApiError
from client.app import StorefrontApp
from client.auth import AuthResult, AuthService
from client.cart import CartService, CartState, cart_reducer
from client.catalog import CategoryService, ProductService
from client.favorites import FavoriteEntry, FavoriteService
from client.search import ProductSearch

__all__ = [
    "ApiClient",
    "ApiError",
    "AuthResult",
    "AuthService",
    "CartService",
    "CartState",
    "CategoryService",
    "FavoriteEntry",
    "FavoriteService",
    "ProductSearch",
    "ProductService",
    "StorefrontApp",
    "cart_reducer",
]
