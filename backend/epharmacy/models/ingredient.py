from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List, TYPE_CHECKING

if TYPE_CHECKING:
    from .product import ProductIngredient


class Ingredient(SQLModel, table=True):
    __tablename__ = "ingredients"
    
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, max_length=100)
    description: str = Field(default="", max_length=500)
    is_active_substance: bool = Field(default=False)
    
    # Relationships
    product_ingredients: List["ProductIngredient"] = Relationship(back_populates="ingredient")
