from .base import Base
from .category import Category, product_categories
from .product import Product, ProductImage

__all__ = [
    "Base",
    "Category",
    "Product",
    "ProductImage",
    "product_categories",
]
