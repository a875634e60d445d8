def test_categories_newest_first_with_visible_product_counts(client):
    body = client.get("/api/categories").json()
    assert body["success"] is True
    assert body["count"] == 3
    assert [(c["slug"], c["products_count"]) for c in body["data"]] == [
        ("chairs", 1), ("tables", 1), ("shelves", 0),
    ]


def test_categories_filter_by_status(client):
    data = client.get("/api/categories", params={"status": "Active"}).json()["data"]
    assert [c["name"] for c in data] == ["Chairs", "Tables"]
    assert all(c["status"] == "Active" for c in data)


def test_unknown_status_is_rejected(client):
    response = client.get("/api/categories", params={"status": "Archived"})
    assert response.status_code == 422
    assert response.json()["success"] is False


def test_get_category(client):
    data = client.get("/api/categories/c3").json()["data"]
    assert data["image"] == "/uploads/categories/chairs.jpg"
    assert data["products_count"] == 1

    response = client.get("/api/categories/missing")
    assert response.status_code == 404
    assert response.json()["message"] == "Category not found"
