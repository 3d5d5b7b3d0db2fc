"""
API tests: /api/products (multipart/form endpoints)
"""
import json
from decimal import Decimal

import pytest

from conftest import make_product


@pytest.fixture
def as_admin(client, admin, login_as):
    login_as(admin)
    return client


def form(**overrides) -> dict:
    data = {
        "name": "Nurofen",
        "price": "9.99",
        "available_quantity": "10",
        "description": "Pain relief tablets",
        "is_prescription_required": "false",
    }
    data.update(overrides)
    return data


class TestProductsApi:

    def test_create_returns_expanded_category_ids(self, as_admin, category_tree):
        root, mid, leaf = category_tree

        response = as_admin.post("/api/products/", data=form(category_ids=[str(leaf)]))

        assert response.status_code == 201
        body = response.json()
        assert body["category_ids"] == sorted([root, mid, leaf])
        assert Decimal(body["price"]) == Decimal("9.99")
        assert body["available_quantity"] == 10

    def test_create_with_unknown_category(self, as_admin, category_tree):
        response = as_admin.post("/api/products/", data=form(category_ids=["999"]))

        assert response.status_code == 400
        assert response.json()["detail"] == "One or more categories were not found"

    def test_create_with_brand_and_ingredients(self, as_admin, brand, ingredient):
        ingredients = json.dumps([{"ingredientId": ingredient.id, "amount": 200, "unit": "mg"}])

        response = as_admin.post(
            "/api/products/",
            data=form(brand_id=str(brand.id), ingredients_json=ingredients, image_url="https://cdn/x.jpg"),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["brand_name"] == "Bayer"
        assert body["photo_url"] == "https://cdn/x.jpg"
        assert body["ingredients"][0]["name"] == "Ibuprofen"
        assert Decimal(body["ingredients"][0]["amount"]) == Decimal("200")

    def test_create_with_bad_ingredients_json(self, as_admin):
        response = as_admin.post("/api/products/", data=form(ingredients_json="[{oops"))

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid ingredients format."

    def test_create_with_unknown_brand(self, as_admin):
        response = as_admin.post("/api/products/", data=form(brand_id="5"))

        assert response.status_code == 400
        assert response.json()["detail"] == "Brand not found."

    @pytest.mark.parametrize("overrides", [
        {"price": "0"},
        {"available_quantity": "-1"},
        {"name": ""},
    ])
    def test_create_validation(self, as_admin, overrides):
        response = as_admin.post("/api/products/", data=form(**overrides))
        assert response.status_code == 422

    def test_create_requires_admin(self, client, customer, login_as):
        login_as(customer)
        assert client.post("/api/products/", data=form()).status_code == 403

    def test_update(self, as_admin, category_tree):
        root, mid, leaf = category_tree
        created = as_admin.post("/api/products/", data=form(category_ids=[str(root)])).json()

        response = as_admin.put(
            f"/api/products/{created['id']}",
            data=form(name="Nurofen Forte", category_ids=[str(leaf)]),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Nurofen Forte"
        assert body["category_ids"] == sorted([root, mid, leaf])

    def test_update_missing(self, as_admin):
        assert as_admin.put("/api/products/321", data=form()).status_code == 404

    def test_list_and_filter_by_ancestor(self, as_admin, category_tree):
        root, mid, leaf = category_tree
        tagged = as_admin.post("/api/products/", data=form(category_ids=[str(leaf)])).json()
        as_admin.post("/api/products/", data=form(name="Shampoo"))

        response = as_admin.get("/api/products/", params={"category_id": root})
        assert [p["id"] for p in response.json()] == [tagged["id"]]

        response = as_admin.get("/api/products/", params={"search": "sham"})
        assert [p["name"] for p in response.json()] == ["Shampoo"]

        assert len(as_admin.get("/api/products/").json()) == 2

    def test_get_one(self, client, session):
        product = make_product(session)

        response = client.get(f"/api/products/{product.id}")
        assert response.status_code == 200
        assert response.json()["name"] == "Nurofen"
        assert client.get("/api/products/999").status_code == 404

    def test_set_quantity(self, as_admin, session):
        product = make_product(session, quantity=1)

        response = as_admin.patch(f"/api/products/{product.id}/quantity", json={"quantity": 7})
        assert response.status_code == 200
        assert response.json()["available_quantity"] == 7

        response = as_admin.patch(f"/api/products/{product.id}/quantity", json={"quantity": -2})
        assert response.status_code == 400

    def test_set_quantity_prescription(self, as_admin, session):
        product = make_product(session, quantity=0, prescription=True)

        response = as_admin.patch(f"/api/products/{product.id}/quantity", json={"quantity": 3})
        assert response.status_code == 400
        assert response.json()["detail"] == "Cannot set quantity for prescription products."

    def test_delete(self, as_admin, session):
        product_id = make_product(session).id

        assert as_admin.delete(f"/api/products/{product_id}").status_code == 204
        assert as_admin.get(f"/api/products/{product_id}").status_code == 404
