from .catalog import (
    CategoryDetail,
    CategoryListResponse,
    CategoryRead,
    CategoryResponse,
    CategoryUpdate,
    IdsRequest,
    MessageResponse,
    ProductCreate,
    ProductImageRead,
    ProductListResponse,
    ProductRead,
    ProductResponse,
    ProductUpdate,
    SearchResponse,
)
from .common import HealthResponse, ValidationFailedResponse

__all__ = [
    "CategoryDetail",
    "CategoryListResponse",
    "CategoryRead",
    "CategoryResponse",
    "CategoryUpdate",
    "HealthResponse",
    "IdsRequest",
    "MessageResponse",
    "ProductCreate",
    "ProductImageRead",
    "ProductListResponse",
    "ProductRead",
    "ProductResponse",
    "ProductUpdate",
    "SearchResponse",
    "ValidationFailedResponse",
]
