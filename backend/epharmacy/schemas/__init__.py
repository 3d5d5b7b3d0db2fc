from .category import CategoryResponse, CategoryCreate, CategoryUpdate
from .brand import BrandResponse
from .ingredient import IngredientResponse
from .product import ProductResponse, ProductWrite, IngredientLine

__all__ = [
    "CategoryResponse", "CategoryCreate", "CategoryUpdate",
    "BrandResponse",
    "IngredientResponse",
    "ProductResponse", "ProductWrite", "IngredientLine",
]
