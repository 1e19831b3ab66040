from tests.test_products import _create_product


def test_list_categories_with_limit(client):
    _create_product(client, categories=["Lighting", "Office", "Garden"])

    everything = client.get("/api/categories").json()
    limited = client.get("/api/categories", params={"limit": 2}).json()

    assert everything["message"] == "Success"
    assert [category["name"] for category in everything["categories"]] == ["Lighting", "Office", "Garden"]
    assert len(limited["categories"]) == 2


def test_category_listing_sees_categories_created_by_updates(client):
    created = _create_product(client, categories=["Lighting"])
    assert len(client.get("/api/categories").json()["categories"]) == 1

    client.put(f"/api/products/{created['id']}", json={"categories": ["Lighting", "Desk"]})

    names = [category["name"] for category in client.get("/api/categories").json()["categories"]]
    # "Lighting" is a name here, not an id, so it resolves to a second category.
    assert names == ["Lighting", "Lighting", "Desk"]


def test_show_category_lists_linked_products(client):
    lamp = _create_product(client, name="Desk Lamp", categories=["Lighting"])
    lighting_id = lamp["categories"][0]["id"]
    _create_product(client, name="Floor Lamp", categories=[str(lighting_id)])

    response = client.get(f"/api/categories/{lighting_id}")

    assert response.status_code == 200
    category = response.json()["category"]
    assert category["name"] == "Lighting"
    assert [product["name"] for product in category["products"]] == ["Desk Lamp", "Floor Lamp"]


def test_show_unknown_category(client):
    response = client.get("/api/categories/4242")

    assert response.status_code == 400
    assert response.json() == {"message": "Could not find category with requested id"}


def test_rename_category(client):
    lamp = _create_product(client, categories=["Lightning"])
    category_id = lamp["categories"][0]["id"]

    response = client.put(f"/api/categories/{category_id}", json={"name": "Lighting"})

    assert response.status_code == 200
    assert response.json()["category"]["name"] == "Lighting"
    product = client.get(f"/api/products/{lamp['id']}").json()["product"]
    assert product["categories"][0]["name"] == "Lighting"
    assert client.get("/api/categories").json()["categories"][0]["name"] == "Lighting"


def test_delete_category_unlinks_products(client):
    lamp = _create_product(client, categories=["Lighting", "Office"])
    lighting_id = lamp["categories"][0]["id"]

    response = client.delete(f"/api/categories/{lighting_id}")

    assert response.status_code == 200
    assert response.json() == {"message": "Category deleted"}
    product = client.get(f"/api/products/{lamp['id']}").json()["product"]
    assert [category["name"] for category in product["categories"]] == ["Office"]


def test_products_in_categories_are_distinct(client):
    lamp = _create_product(client, name="Desk Lamp", categories=["Lighting", "Office"])
    lighting_id, office_id = (category["id"] for category in lamp["categories"])
    chair = _create_product(client, name="Chair", categories=[str(office_id)])
    _create_product(client, name="Rake", categories=["Garden"])

    response = client.post("/api/categories/products", json={"ids": [lighting_id, office_id]})

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Returning 2 products"
    assert [product["id"] for product in body["products"]] == [lamp["id"], chair["id"]]
