from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime, timezone
from decimal import Decimal
from .category import ProductCategoryLink

if TYPE_CHECKING:
    from .brand import Brand
    from .category import Category
    from .ingredient import Ingredient
    from .order import OrderItem


class Product(SQLModel, table=True):
    __tablename__ = "products"
    
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, max_length=200)
    photo_url: str = ""
    description: str = ""
    
    price: Decimal = Field(max_digits=10, decimal_places=2)
    available_quantity: int = Field(default=0)
    is_prescription_required: bool = Field(default=False)
    
    brand_id: Optional[int] = Field(default=None, foreign_key="brands.id")
    
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), sa_type=DateTime(timezone=True))
    
    # Relationships
    brand: Optional["Brand"] = Relationship(back_populates="products")
    categories: List["Category"] = Relationship(back_populates="products", link_model=ProductCategoryLink)
    ingredients: List["ProductIngredient"] = Relationship(
        back_populates="product",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"}
    )
    order_items: List["OrderItem"] = Relationship(back_populates="product")


class ProductIngredient(SQLModel, table=True):
    """Состав товара: ингредиент + количество и единица измерения"""
    __tablename__ = "product_ingredients"
    
    id: Optional[int] = Field(default=None, primary_key=True)
    product_id: int = Field(foreign_key="products.id", index=True)
    ingredient_id: int = Field(foreign_key="ingredients.id")
    
    amount: Decimal = Field(max_digits=10, decimal_places=3)
    unit: str = Field(max_length=50)
    
    # Relationships
    product: Optional["Product"] = Relationship(back_populates="ingredients")
    ingredient: Optional["Ingredient"] = Relationship(back_populates="product_ingredients")
