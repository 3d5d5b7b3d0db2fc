from .user import User, UserRole
from .brand import Brand
from .ingredient import Ingredient
from .category import Category, ProductCategoryLink
from .product import Product, ProductIngredient
from .order import Order, OrderItem, OrderStatus

__all__ = [
    "User", "UserRole",
    "Brand",
    "Ingredient",
    "Category", "ProductCategoryLink",
    "Product", "ProductIngredient",
    "Order", "OrderItem", "OrderStatus",
]
