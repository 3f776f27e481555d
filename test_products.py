import pytest

from catalog_api.database import SessionLocal
from catalog_api.seed import MOCK_PRODUCTS, seed_products


def _product(**overrides):
    payload = {
        "id": "gym-100",
        "name": "Racerback Training Tank",
        "category": "gym-wear",
        "subcategory": "Tank Tops",
        "description": "Lightweight racerback tank with mesh back panel for heavy sessions.",
        "colours": ["Black", " Charcoal "],
        "printing_method": "Screen Print",
        "sizes": ["S", "M", "L"],
        "minimum_quantity": 40,
        "tags": ["Gym", "Training"],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def created(client, auth_headers):
    res = client.post("/api/create-product-json", json=_product(), headers=auth_headers)
    assert res.status_code == 201, res.text
    return res.json()


def test_create_product(created):
    assert created["id"] == "gym-100"
    assert created["colours"] == ["Black", "Charcoal"]
    assert created["tags"] == ["gym", "training"]
    assert created["status"] == "active"
    assert created["featured"] is False


def test_create_requires_auth(client):
    res = client.post("/api/create-product-json", json=_product())
    assert res.status_code == 401


def test_duplicate_id_conflicts(client, auth_headers, created):
    res = client.post("/api/create-product-json", json=_product(name="Another Tank"), headers=auth_headers)
    assert res.status_code == 409


@pytest.mark.parametrize("overrides", [
    {"id": "x"},
    {"id": "bad id!"},
    {"category": "shoes"},
    {"subcategory": "Jackets"},
    {"description": "too short"},
    {"colours": []},
    {"colours": ["  "]},
    {"sizes": ["XXXXL"]},
    {"minimum_quantity": 0},
    {"minimum_quantity": 1001},
    {"status": "archived"},
])
def test_create_validation(client, auth_headers, overrides):
    res = client.post("/api/create-product-json", json=_product(**overrides), headers=auth_headers)
    assert res.status_code == 422, overrides


def test_tags_accept_comma_separated_string(client, auth_headers):
    res = client.post("/api/create-product-json", json=_product(tags="Gym, Summer ,"), headers=auth_headers)
    assert res.status_code == 201, res.text
    assert res.json()["tags"] == ["gym", "summer"]


def test_listings(client, created):
    res = client.get("/api/products-json")
    assert res.json()["count"] == 1

    res = client.get("/api/products/category/GYM-WEAR")
    assert res.status_code == 200
    assert res.json()["category"] == "gym-wear"
    assert [p["id"] for p in res.json()["products"]] == ["gym-100"]

    res = client.get("/api/products/category/streetwear")
    assert res.json()["count"] == 0


def test_unknown_category_is_400(client):
    res = client.get("/api/products/category/shoes")
    assert res.status_code == 400
    assert "sports-wear" in res.json()["detail"]


def test_management_listing_truncates_description(client, created):
    res = client.get("/api/products/category/gym-wear/manage")
    body = res.json()
    assert body["category_display"] == "Gym Wear"
    item = body["products"][0]
    assert item["description"].endswith("...")
    assert len(item["description"]) <= 103


def test_subcategory_listings(client, created):
    res = client.get("/api/products/subcategory/gym-wear/Tank Tops")
    assert res.status_code == 200
    assert res.json()["count"] == 1

    res = client.get("/api/products/subcategory/gym-wear/Jackets")
    assert res.status_code == 400

    res = client.get("/api/products/gym-wear/Tank%20Tops")
    assert res.status_code == 200
    assert res.json()["subcategory"] == "Tank Tops"

    res = client.get("/api/products/gym-wear/Leggings")
    assert res.status_code == 404


def test_update_product(client, auth_headers, created):
    res = client.put("/api/products/category/gym-wear/gym-100", headers=auth_headers, json={
        "name": "Racerback Tank v2",
        "featured": True,
        "tags": "new, drop",
        "subcategory": "Hoodies",
    })
    assert res.status_code == 200, res.text
    product = res.json()["product"]
    assert product["name"] == "Racerback Tank v2"
    assert product["featured"] is True
    assert product["tags"] == ["new", "drop"]
    assert product["subcategory"] == "Hoodies"
    assert product["minimum_quantity"] == 40


def test_update_rejects_foreign_subcategory(client, auth_headers, created):
    res = client.put("/api/products/category/gym-wear/gym-100", headers=auth_headers,
                     json={"subcategory": "MMA Shorts"})
    assert res.status_code == 400


def test_update_missing_product_is_404(client, auth_headers):
    res = client.put("/api/products/category/gym-wear/nope", headers=auth_headers, json={"name": "Whatever"})
    assert res.status_code == 404


def test_delete_product(client, auth_headers, created):
    res = client.delete("/api/products/category/gym-wear/gym-100")
    assert res.status_code == 401

    res = client.delete("/api/products/category/gym-wear/gym-100", headers=auth_headers)
    assert res.status_code == 200
    assert res.json()["deleted_id"] == "gym-100"

    res = client.delete("/api/products/category/gym-wear/gym-100", headers=auth_headers)
    assert res.status_code == 404


def test_categories(client):
    res = client.get("/api/categories")
    categories = res.json()["categories"]
    assert len(categories) == 7
    assert categories[0] == {
        "name": "sports-wear",
        "display_name": "Sports Wear",
        "subcategories": ["T-Shirts", "Shorts", "Jerseys", "Uniforms", "Tank Tops", "Hoodies", "Track Suits"],
    }

    res = client.get("/api/categories-structure")
    assert res.json()["total_categories"] == 7
    assert res.json()["total_subcategories"] == 39

    res = client.get("/api/subcategories/accessories")
    assert res.json()["subcategories"] == ["Bags", "Caps", "Socks", "Gloves", "Belts"]

    res = client.get("/api/subcategories/shoes")
    assert res.status_code == 400


def test_categories_summary_counts(client, created):
    res = client.get("/api/categories/summary")
    summary = {c["category"]: c for c in res.json()["categories"]}
    assert summary["gym-wear"]["count"] == 1
    assert summary["gym-wear"]["endpoint"] == "/api/products/category/gym-wear"
    assert summary["streetwear"]["count"] == 0


def test_seed_products_is_idempotent(client):
    db = SessionLocal()
    try:
        assert seed_products(db) == len(MOCK_PRODUCTS)
        assert seed_products(db) == 0
        assert seed_products(db, reset=True) == len(MOCK_PRODUCTS)
    finally:
        db.close()

    res = client.get("/api/products-json")
    assert res.json()["count"] == len(MOCK_PRODUCTS)


def test_health(client):
    res = client.get("/api/health")
    assert res.status_code == 200
    assert res.json()["database"] == "connected"

    res = client.get("/api/test")
    assert res.json()["environment"] == "test"
