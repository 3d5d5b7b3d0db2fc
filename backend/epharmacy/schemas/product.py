from pydantic import BaseModel, Field
from typing import Optional, List
from decimal import Decimal


class IngredientLine(BaseModel):
    """Строка состава из формы (ingredients_json)"""
    ingredient_id: int = Field(alias="ingredientId", gt=0)
    amount: Decimal = Field(gt=0)
    unit: str = Field(min_length=1, max_length=50)

    class Config:
        populate_by_name = True


class IngredientLineResponse(BaseModel):
    ingredient_id: int
    name: str
    amount: Decimal
    unit: str


class ProductWrite(BaseModel):
    """Данные формы создания/редактирования товара"""
    name: str
    price: Decimal
    available_quantity: int = 0
    description: str = ""
    is_prescription_required: bool = False
    brand_id: Optional[int] = None
    category_ids: List[int] = []
    ingredients: List[IngredientLine] = []
    photo_url: str = ""


class ProductResponse(BaseModel):
    id: int
    name: str
    photo_url: str
    price: Decimal
    available_quantity: int
    description: str
    is_prescription_required: bool
    brand_id: Optional[int] = None
    brand_name: Optional[str] = None
    # Полное замыкание: выбранные категории + все их предки
    category_ids: List[int] = []
    ingredients: List[IngredientLineResponse] = []


class ProductQuantityUpdate(BaseModel):
    quantity: int
