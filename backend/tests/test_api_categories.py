"""
API tests: /api/categories
"""
from decimal import Decimal

import pytest
from sqlmodel import select

from epharmacy.models import Category, Product
from epharmacy.schemas.product import ProductWrite
from epharmacy.services.products import create_product


class TestCategoriesApi:

    def test_list_is_public(self, client, category_tree):
        root, mid, leaf = category_tree
        response = client.get("/api/categories/")

        assert response.status_code == 200
        body = {c["id"]: c for c in response.json()}
        assert body[root] == {"id": root, "name": "Category", "parent_category_id": None, "subcategory_ids": [mid]}
        assert body[leaf]["subcategory_ids"] == []

    def test_get_one(self, client, category_tree):
        _, mid, leaf = category_tree
        response = client.get(f"/api/categories/{mid}")

        assert response.status_code == 200
        assert response.json()["subcategory_ids"] == [leaf]
        assert client.get("/api/categories/999").status_code == 404

    def test_mutations_require_login(self, client):
        response = client.post("/api/categories/", json={"name": "Vitamins"})
        assert response.status_code == 401

    def test_mutations_require_admin(self, client, customer, login_as):
        login_as(customer)
        response = client.post("/api/categories/", json={"name": "Vitamins"})
        assert response.status_code == 403

    def test_create(self, client, admin, login_as, category_tree):
        root, _, _ = category_tree
        login_as(admin)

        response = client.post("/api/categories/", json={"name": "Vitamins", "parent_category_id": root})

        assert response.status_code == 201
        body = response.json()
        assert body["name"] == "Vitamins"
        assert body["parent_category_id"] == root

    def test_create_with_missing_parent(self, client, admin, login_as):
        login_as(admin)
        response = client.post("/api/categories/", json={"name": "Vitamins", "parent_category_id": 42})

        assert response.status_code == 400
        assert response.json()["detail"] == "Parent category not found"

    def test_create_with_empty_name(self, client, admin, login_as):
        login_as(admin)
        response = client.post("/api/categories/", json={"name": ""})
        assert response.status_code == 422

    @pytest.mark.parametrize("name", ["   ", "\t"])
    def test_create_with_blank_name(self, client, session, admin, login_as, name):
        login_as(admin)
        response = client.post("/api/categories/", json={"name": name})

        assert response.status_code == 422
        assert session.exec(select(Category)).all() == []

    def test_name_is_trimmed(self, client, admin, login_as):
        login_as(admin)
        response = client.post("/api/categories/", json={"name": "  Vitamins "})

        assert response.status_code == 201
        assert response.json()["name"] == "Vitamins"

    def test_update(self, client, session, admin, login_as, category_tree):
        root, mid, leaf = category_tree
        login_as(admin)

        response = client.put(f"/api/categories/{leaf}", json={"name": "Analgesics", "parent_category_id": root})

        assert response.status_code == 200
        assert response.json()["parent_category_id"] == root
        assert session.get(Category, leaf).name == "Analgesics"

    def test_update_rejects_cycles(self, client, admin, login_as, category_tree):
        root, mid, leaf = category_tree
        login_as(admin)

        response = client.put(f"/api/categories/{root}", json={"name": "Category", "parent_category_id": leaf})
        assert response.status_code == 400

        response = client.put(f"/api/categories/{mid}", json={"name": "Medicine", "parent_category_id": mid})
        assert response.status_code == 400

    def test_update_missing(self, client, admin, login_as):
        login_as(admin)
        response = client.put("/api/categories/5", json={"name": "Ghost"})
        assert response.status_code == 404

    def test_delete(self, client, session, admin, login_as, category_tree):
        root, mid, leaf = category_tree
        product = create_product(session, ProductWrite(name="Nurofen", price=Decimal("5"), category_ids=[leaf]))
        login_as(admin)

        response = client.delete(f"/api/categories/{mid}")

        assert response.status_code == 204
        assert session.get(Category, mid) is None
        assert session.get(Category, leaf).parent_category_id is None
        stored = session.get(Product, product.id)
        session.refresh(stored)
        assert sorted(c.id for c in stored.categories) == sorted([root, leaf])

    def test_delete_missing(self, client, admin, login_as):
        login_as(admin)
        assert client.delete("/api/categories/999").status_code == 404
