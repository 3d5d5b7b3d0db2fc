from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List, TYPE_CHECKING

if TYPE_CHECKING:
    from .product import Product


class ProductCategoryLink(SQLModel, table=True):
    """Связь товар ↔ категория (хранится полное замыкание предков)"""
    __tablename__ = "product_categories"
    
    product_id: int = Field(foreign_key="products.id", primary_key=True)
    category_id: int = Field(foreign_key="categories.id", primary_key=True, index=True)


class Category(SQLModel, table=True):
    __tablename__ = "categories"
    
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, max_length=100)
    
    # None = корневая категория
    parent_category_id: Optional[int] = Field(default=None, foreign_key="categories.id", index=True)
    
    # Relationships
    parent: Optional["Category"] = Relationship(
        back_populates="subcategories",
        sa_relationship_kwargs={"remote_side": "Category.id"}
    )
    subcategories: List["Category"] = Relationship(back_populates="parent")
    products: List["Product"] = Relationship(back_populates="categories", link_model=ProductCategoryLink)
