from fastapi import APIRouter, Depends, Form, Query, status
from sqlmodel import Session
from typing import List, Optional
from decimal import Decimal
from epharmacy.api.deps import get_db, admin_required
from epharmacy.models.user import User
from epharmacy.schemas.product import ProductResponse, ProductWrite, ProductQuantityUpdate
from epharmacy.services import products as product_service

router = APIRouter(prefix="/api/products", tags=["products"])


def product_form(
    name: str = Form(..., min_length=1, max_length=200),
    price: Decimal = Form(..., gt=0),
    available_quantity: int = Form(0, ge=0),
    description: Optional[str] = Form(None, max_length=2000),
    is_prescription_required: bool = Form(False),
    brand_id: Optional[int] = Form(None),
    category_ids: Optional[List[int]] = Form(None),
    ingredients_json: Optional[str] = Form(None),
    image_url: Optional[str] = Form(None),
) -> ProductWrite:
    """multipart-форма товара -> ProductWrite"""
    return ProductWrite(
        name=name,
        price=price,
        available_quantity=available_quantity,
        description=description or "",
        is_prescription_required=is_prescription_required,
        brand_id=brand_id,
        category_ids=category_ids or [],
        ingredients=product_service.parse_ingredients(ingredients_json),
        photo_url=image_url or "",
    )


@router.get("/", response_model=List[ProductResponse])
def list_products(
    search: Optional[str] = Query(None, description="Search query"),
    category_id: Optional[int] = Query(None),
    db: Session = Depends(get_db)
):
    """Список товаров; фильтр по категории включает все вложенные"""
    products = product_service.search_products(db, search, category_id)
    return [product_service.build_product_response(p) for p in products]


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(product_id: int, db: Session = Depends(get_db)):
    product = product_service.get_product(db, product_id)
    return product_service.build_product_response(product)


@router.post("/", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(
    data: ProductWrite = Depends(product_form),
    db: Session = Depends(get_db),
    _: User = Depends(admin_required)
):
    """Создать товар; в ответе category_ids уже с предками"""
    product = product_service.create_product(db, data)
    return product_service.build_product_response(product)


@router.put("/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: int,
    data: ProductWrite = Depends(product_form),
    db: Session = Depends(get_db),
    _: User = Depends(admin_required)
):
    product = product_service.update_product(db, product_id, data)
    return product_service.build_product_response(product)


@router.patch("/{product_id}/quantity", response_model=ProductResponse)
def set_quantity(
    product_id: int,
    data: ProductQuantityUpdate,
    db: Session = Depends(get_db),
    _: User = Depends(admin_required)
):
    """Обновить остаток (не для рецептурных товаров)"""
    product = product_service.set_quantity(db, product_id, data.quantity)
    return product_service.build_product_response(product)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(admin_required)
):
    product_service.delete_product(db, product_id)
