import asyncio
from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

import core.dependencies
import routers.auth.login
import routers.auth.register
import routers.cart
import routers.categories
import routers.favorites
import routers.products
from main import app

DB_MODULES = [
    core.dependencies,
    routers.auth.login,
    routers.auth.register,
    routers.cart,
    routers.categories,
    routers.favorites,
    routers.products,
]

PRODUCTS = [
    {"_id": "p1", "name": "Oak Chair", "price": 100.0, "category": "chairs", "stock": 5,
     "image": "/img/oak.jpg", "description": "Solid oak"},
    {"_id": "p2", "name": "Oak Table", "price": 50.0, "category": "tables", "stock": 2},
    {"_id": "p3", "name": "Pine Shelf", "price": 30.0, "category": "shelves", "stock": 9},
    {"_id": "p4", "name": "Oak Stool", "price": 20.0, "category": "chairs", "hidden": True},
]

CATEGORIES = [
    {"_id": "c1", "name": "Shelves", "slug": "shelves", "status": "Inactive", "created_at": datetime(2024, 1, 1)},
    {"_id": "c2", "name": "Tables", "slug": "tables", "status": "Active", "created_at": datetime(2024, 1, 2)},
    {"_id": "c3", "name": "Chairs", "slug": "chairs", "status": "Active", "image": "/uploads/categories/chairs.jpg",
     "created_at": datetime(2024, 1, 3)},
]


def run_sync(coro):
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@pytest.fixture
def mock_db(monkeypatch):
    database = AsyncMongoMockClient()["storefront_test"]
    for module in DB_MODULES:
        monkeypatch.setattr(module, "db", database)
    run_sync(database.products.insert_many([dict(p) for p in PRODUCTS]))
    run_sync(database.categories.insert_many([dict(c) for c in CATEGORIES]))
    return database


@pytest.fixture
def client(mock_db):
    with TestClient(app) as c:
        yield c


def register(client, email="ana@example.com", password="secret123"):
    response = client.post("/api/auth/register", json={
        "email": email, "password": password, "first_name": "Ana", "last_name": "Lopez",
    })
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.fixture
def auth_headers(client):
    token = register(client)["token"]
    return {"Authorization": f"Bearer {token}"}
