"""
Unit tests: category deletion (detach products, orphan children, one transaction).
"""
from decimal import Decimal

import pytest

from epharmacy.core.exceptions import NotFoundError
from epharmacy.models import Category, Product
from epharmacy.schemas.product import ProductWrite
from epharmacy.services.categories import delete_category
from epharmacy.services.products import create_product


def category_ids_of(session, product_id: int) -> set[int]:
    product = session.get(Product, product_id)
    session.refresh(product)
    return {c.id for c in product.categories}


class TestDeleteCategory:

    @pytest.fixture
    def tagged_product(self, session, category_tree):
        _, _, leaf = category_tree
        product = create_product(
            session, ProductWrite(name="Nurofen", price=Decimal("9.99"), category_ids=[leaf])
        )
        return product.id

    def test_scenario_delete_middle(self, session, category_tree, tagged_product):
        root, mid, leaf = category_tree
        assert category_ids_of(session, tagged_product) == {root, mid, leaf}

        delete_category(session, mid)

        assert session.get(Category, mid) is None
        # Child goes to root, not to the grandparent
        assert session.get(Category, leaf).parent_category_id is None
        assert session.get(Category, root).parent_category_id is None
        # Only the deleted tag is lost
        assert category_ids_of(session, tagged_product) == {root, leaf}

    def test_children_and_products_survive(self, session, category_tree, tagged_product):
        root, mid, leaf = category_tree
        sibling = Category(name="Vitamins", parent_category_id=root)
        session.add(sibling)
        session.commit()

        delete_category(session, root)

        assert session.get(Product, tagged_product) is not None
        assert session.get(Category, mid).parent_category_id is None
        assert session.get(Category, sibling.id).parent_category_id is None
        # Grandchild keeps its own parent
        assert session.get(Category, leaf).parent_category_id == mid
        assert category_ids_of(session, tagged_product) == {mid, leaf}

    def test_delete_leaf_keeps_inherited_tags(self, session, category_tree, tagged_product):
        root, mid, leaf = category_tree

        delete_category(session, leaf)

        # Ancestor tags inherited through the leaf stay as they were
        assert category_ids_of(session, tagged_product) == {root, mid}

    def test_missing_category(self, session, category_tree):
        with pytest.raises(NotFoundError) as exc_info:
            delete_category(session, 999)
        assert exc_info.value.entity_id == 999

    def test_failure_rolls_back_everything(self, session, category_tree, tagged_product, monkeypatch):
        root, mid, leaf = category_tree

        def failing_delete(obj):
            raise RuntimeError("storage failure")

        monkeypatch.setattr(session, "delete", failing_delete)
        with pytest.raises(RuntimeError):
            delete_category(session, mid)
        monkeypatch.undo()

        assert session.get(Category, mid) is not None
        assert session.get(Category, leaf).parent_category_id == mid
        assert category_ids_of(session, tagged_product) == {root, mid, leaf}
