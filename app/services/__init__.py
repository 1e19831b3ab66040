from .catalog_reset import reset_catalog
from .category_resolver import CategoryResolver, CategoryStore, CategorySync, SqlCategoryStore
from .category_service import CategoryService
from .product_service import ProductService

__all__ = [
    "CategoryResolver",
    "CategoryService",
    "CategoryStore",
    "CategorySync",
    "ProductService",
    "SqlCategoryStore",
    "reset_catalog",
]
