from fastapi import APIRouter, Depends, status
from sqlmodel import Session
from typing import List
from epharmacy.api.deps import get_db, admin_required
from epharmacy.models.user import User
from epharmacy.schemas.category import CategoryResponse, CategoryCreate, CategoryUpdate
from epharmacy.services import categories as category_service

router = APIRouter(prefix="/api/categories", tags=["categories"])


@router.get("/", response_model=List[CategoryResponse])
def list_categories(db: Session = Depends(get_db)):
    """Все категории с id прямых подкатегорий"""
    return category_service.list_categories(db)


@router.get("/{category_id}", response_model=CategoryResponse)
def get_category(category_id: int, db: Session = Depends(get_db)):
    return category_service.get_category(db, category_id)


@router.post("/", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    data: CategoryCreate,
    db: Session = Depends(get_db),
    _: User = Depends(admin_required)
):
    category = category_service.create_category(db, data)
    return category_service.build_category_response(category, [])


@router.put("/{category_id}", response_model=CategoryResponse)
def update_category(
    category_id: int,
    data: CategoryUpdate,
    db: Session = Depends(get_db),
    _: User = Depends(admin_required)
):
    category_service.update_category(db, category_id, data)
    return category_service.get_category(db, category_id)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(admin_required)
):
    """Удалить категорию: товары отвязываются, подкатегории становятся корневыми"""
    category_service.delete_category(db, category_id)
