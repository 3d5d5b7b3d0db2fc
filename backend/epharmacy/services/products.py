import json
import logging
from datetime import datetime, timezone
from typing import List, Optional, Set
from pydantic import TypeAdapter, ValidationError
from sqlmodel import Session, select, col, or_
from epharmacy.core.exceptions import BadRequestError, InvalidReferenceError, NotFoundError
from epharmacy.models.brand import Brand
from epharmacy.models.category import Category, ProductCategoryLink
from epharmacy.models.ingredient import Ingredient
from epharmacy.models.product import Product, ProductIngredient
from epharmacy.schemas.product import IngredientLine, IngredientLineResponse, ProductResponse, ProductWrite
from epharmacy.services.categories import expand_category_ids

logger = logging.getLogger(__name__)

_ingredient_lines = TypeAdapter(List[IngredientLine])


def parse_ingredients(raw: Optional[str]) -> List[IngredientLine]:
    """Разбор ingredients_json из multipart-формы; пусто = без состава"""
    if raw is None or not raw.strip():
        return []
    
    try:
        data = json.loads(raw)
        if data is None:
            return []
        return _ingredient_lines.validate_python(data)
    except (ValueError, ValidationError):
        raise BadRequestError("Invalid ingredients format.")


def build_product_response(product: Product) -> ProductResponse:
    ingredients = [
        IngredientLineResponse(
            ingredient_id=line.ingredient_id,
            name=line.ingredient.name if line.ingredient else "",
            amount=line.amount,
            unit=line.unit
        )
        for line in product.ingredients
    ]
    
    return ProductResponse(
        id=product.id,
        name=product.name,
        photo_url=product.photo_url,
        price=product.price,
        available_quantity=product.available_quantity,
        description=product.description,
        is_prescription_required=product.is_prescription_required,
        brand_id=product.brand_id,
        brand_name=product.brand.name if product.brand else None,
        category_ids=sorted(c.id for c in product.categories),
        ingredients=ingredients
    )


def get_product(db: Session, product_id: int) -> Product:
    product = db.get(Product, product_id)
    if not product:
        raise NotFoundError("Product", product_id)
    return product


def search_products(db: Session, search: Optional[str] = None, category_id: Optional[int] = None) -> List[Product]:
    """Поиск по названию/описанию и фильтр по категории (с учётом замыкания)"""
    stmt = select(Product)
    
    if search:
        pattern = f"%{search}%"
        stmt = stmt.where(
            or_(col(Product.name).ilike(pattern), col(Product.description).ilike(pattern))
        )
    
    # Товар помечен всеми предками своих категорий, поэтому хватает прямой связи
    if category_id is not None:
        stmt = stmt.join(ProductCategoryLink).where(ProductCategoryLink.category_id == category_id)
    
    stmt = stmt.order_by(Product.id)
    return list(db.exec(stmt).all())


def resolve_categories(db: Session, requested_ids: Set[int]) -> List[Category]:
    """Проверка выбранных id и загрузка полного замыкания по предкам"""
    closure = expand_category_ids(db, requested_ids)
    if not closure:
        return []
    
    categories = db.exec(select(Category).where(col(Category.id).in_(list(closure)))).all()
    return list(categories)


def _validate_stock(is_prescription_required: bool, quantity: int) -> None:
    if quantity < 0:
        raise BadRequestError("Quantity cannot be negative.")
    if is_prescription_required and quantity != 0:
        raise BadRequestError("Prescription products cannot have available quantity.")


def _check_references(db: Session, data: ProductWrite) -> None:
    if data.brand_id is not None and not db.get(Brand, data.brand_id):
        raise InvalidReferenceError("Brand not found.", [data.brand_id])
    
    ingredient_ids = {line.ingredient_id for line in data.ingredients}
    if ingredient_ids:
        found = set(db.exec(select(Ingredient.id).where(col(Ingredient.id).in_(list(ingredient_ids)))).all())
        missing = sorted(ingredient_ids - found)
        if missing:
            raise InvalidReferenceError("One or more ingredients were not found", missing)


def _apply(db: Session, product: Product, data: ProductWrite) -> None:
    _validate_stock(data.is_prescription_required, data.available_quantity)
    _check_references(db, data)
    categories = resolve_categories(db, set(data.category_ids))
    
    product.name = data.name
    product.photo_url = data.photo_url
    product.price = data.price
    product.available_quantity = data.available_quantity
    product.description = data.description
    product.is_prescription_required = data.is_prescription_required
    product.brand_id = data.brand_id
    product.categories = categories
    product.ingredients = [
        ProductIngredient(ingredient_id=line.ingredient_id, amount=line.amount, unit=line.unit)
        for line in data.ingredients
    ]


def create_product(db: Session, data: ProductWrite) -> Product:
    product = Product(name=data.name, price=data.price)
    _apply(db, product, data)
    
    db.add(product)
    db.commit()
    db.refresh(product)
    
    logger.info(
        f"Product {product.id} created with categories {sorted(c.id for c in product.categories)} "
        f"(requested {sorted(set(data.category_ids))})"
    )
    return product


def update_product(db: Session, product_id: int, data: ProductWrite) -> Product:
    product = get_product(db, product_id)
    _apply(db, product, data)
    
    product.updated_at = datetime.now(timezone.utc)
    db.add(product)
    db.commit()
    db.refresh(product)
    
    logger.info(
        f"Product {product_id} updated with categories {sorted(c.id for c in product.categories)} "
        f"(requested {sorted(set(data.category_ids))})"
    )
    return product


def set_quantity(db: Session, product_id: int, quantity: int) -> Product:
    product = get_product(db, product_id)
    
    if product.is_prescription_required:
        raise BadRequestError("Cannot set quantity for prescription products.")
    _validate_stock(False, quantity)
    
    product.available_quantity = quantity
    product.updated_at = datetime.now(timezone.utc)
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


def delete_product(db: Session, product_id: int) -> None:
    product = get_product(db, product_id)
    if product.order_items:
        raise BadRequestError("Product is part of existing orders and cannot be deleted.")
    
    # Связи с категориями и состав уходят вместе с товаром
    product.categories = []
    db.delete(product)
    db.commit()
    logger.info(f"Product {product_id} deleted")
