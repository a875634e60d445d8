from client.api.base import ApiClient, ApiError, json_headers
from client.api.auth import AuthApi
from client.api.cart import CartApi
from client.api.categories import CategoryApi
from client.api.favorites import FavoriteApi
from client.api.products import ProductApi

__all__ = [
    "ApiClient",
    "ApiError",
    "AuthApi",
    "CartApi",
    "CategoryApi",
    "FavoriteApi",
    "ProductApi",
    "json_headers",
]
