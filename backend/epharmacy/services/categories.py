"""
Иерархия категорий.

Товар хранит не только выбранные категории, но и всех их предков
(замыкание), поэтому фильтр по верхней категории находит товары
из любых вложенных. Все функции принимают явную сессию БД.
"""
import logging
from typing import Dict, Iterable, List, Optional, Set
from sqlmodel import Session, select
from epharmacy.core.exceptions import BadRequestError, InvalidReferenceError, NotFoundError
from epharmacy.models.category import Category
from epharmacy.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate

logger = logging.getLogger(__name__)

CATEGORIES_NOT_FOUND = "One or more categories were not found"


def load_parent_map(db: Session) -> Dict[int, Optional[int]]:
    """Плоская карта id -> parent_category_id по всему дереву"""
    rows = db.exec(select(Category.id, Category.parent_category_id)).all()
    return {category_id: parent_id for category_id, parent_id in rows}


def expand_category_ids(db: Session, requested_ids: Iterable[int]) -> Set[int]:
    """
    Замыкание по предкам: выбранные категории + все их родители до корня.

    Подъём по parent_category_id останавливается на корне или на id,
    который уже есть в результате (общий предок или цикл в данных).
    Несуществующий id -> InvalidReferenceError.
    """
    requested = set(requested_ids)
    if not requested:
        return set()
    
    parents = load_parent_map(db)
    
    missing = sorted(category_id for category_id in requested if category_id not in parents)
    if missing:
        raise InvalidReferenceError(CATEGORIES_NOT_FOUND, missing)
    
    result = set(requested)
    for category_id in requested:
        path = {category_id}
        parent_id = parents[category_id]
        
        while parent_id is not None:
            if parent_id in result:
                if parent_id in path:
                    logger.warning(f"Category cycle detected at {parent_id} while expanding {category_id}")
                break
            if parent_id not in parents:
                raise InvalidReferenceError(CATEGORIES_NOT_FOUND, [parent_id])
            
            result.add(parent_id)
            path.add(parent_id)
            parent_id = parents[parent_id]
    
    return result


def validate_parent(db: Session, parent_id: Optional[int], category_id: Optional[int] = None) -> None:
    """
    Проверка родителя при создании (category_id=None) и редактировании.
    Родитель должен существовать и не может быть самой категорией или её потомком.
    """
    if parent_id is None:
        return
    
    if category_id is not None and parent_id == category_id:
        raise BadRequestError("Category cannot be its own parent")
    
    parents = load_parent_map(db)
    if parent_id not in parents:
        raise InvalidReferenceError("Parent category not found", [parent_id])
    
    if category_id is None:
        return
    
    # Поднимаемся от нового родителя: если встретим category_id, это потомок
    seen = set()
    current = parent_id
    while current is not None and current not in seen:
        if current == category_id:
            raise BadRequestError("Cannot set a descendant category as parent")
        seen.add(current)
        current = parents.get(current)


def build_category_response(category: Category, subcategory_ids: List[int]) -> CategoryResponse:
    return CategoryResponse(
        id=category.id,
        name=category.name,
        parent_category_id=category.parent_category_id,
        subcategory_ids=subcategory_ids
    )


def list_categories(db: Session) -> List[CategoryResponse]:
    """Все категории с id прямых подкатегорий"""
    categories = db.exec(select(Category).order_by(Category.id)).all()
    
    children: Dict[int, List[int]] = {}
    for category in categories:
        if category.parent_category_id is not None:
            children.setdefault(category.parent_category_id, []).append(category.id)
    
    return [build_category_response(c, children.get(c.id, [])) for c in categories]


def get_category(db: Session, category_id: int) -> CategoryResponse:
    category = db.get(Category, category_id)
    if not category:
        raise NotFoundError("Category", category_id)
    
    subcategory_ids = db.exec(
        select(Category.id).where(Category.parent_category_id == category_id).order_by(Category.id)
    ).all()
    return build_category_response(category, list(subcategory_ids))


def create_category(db: Session, data: CategoryCreate) -> Category:
    validate_parent(db, data.parent_category_id)
    
    category = Category(name=data.name, parent_category_id=data.parent_category_id)
    db.add(category)
    db.commit()
    db.refresh(category)
    
    logger.info(f"Category {category.id} '{category.name}' created (parent={category.parent_category_id})")
    return category


def update_category(db: Session, category_id: int, data: CategoryUpdate) -> Category:
    category = db.get(Category, category_id)
    if not category:
        raise NotFoundError("Category", category_id)
    
    validate_parent(db, data.parent_category_id, category_id)
    
    category.name = data.name
    category.parent_category_id = data.parent_category_id
    db.add(category)
    db.commit()
    db.refresh(category)
    
    logger.info(f"Category {category_id} updated (parent={category.parent_category_id})")
    return category


def delete_category(db: Session, category_id: int) -> None:
    """
    Удаление категории одной транзакцией:
    1. товары отвязываются от неё (сами товары и другие их категории не трогаем)
    2. прямые подкатегории становятся корневыми (не удаляются и не переезжают к деду)
    3. удаляется сама категория

    Унаследованные через неё теги предков у товаров остаются как есть.
    """
    category = db.get(Category, category_id)
    if not category:
        raise NotFoundError("Category", category_id)
    
    try:
        detached = len(category.products)
        category.products.clear()
        
        children = db.exec(select(Category).where(Category.parent_category_id == category_id)).all()
        for child in children:
            child.parent_category_id = None
            db.add(child)
        
        db.delete(category)
        db.commit()
    except Exception:
        db.rollback()
        raise
    
    logger.info(
        f"Category {category_id} deleted: {detached} products detached, "
        f"{len(children)} subcategories moved to root"
    )
