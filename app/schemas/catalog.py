from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _category_refs(value: Any) -> list[str]:
    if value is None or isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
        raise ValueError("The categories field must be an array.")
    refs: list[str] = []
    for item in value:
        # bool is an int subclass; "true" is not a category reference.
        if isinstance(item, bool) or not isinstance(item, (str, int)):
            raise ValueError("Each category must be a string.")
        refs.append(str(item))
    if len(set(refs)) != len(refs):
        raise ValueError("The categories field has a duplicate value.")
    return refs


class ProductCreate(BaseModel):
    seller_id: int
    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    quantity: int = Field(..., ge=0)
    categories: Optional[list[str]] = None

    @field_validator("categories", mode="before")
    @classmethod
    def validate_categories(cls, value: Any) -> list[str]:
        return _category_refs(value)


class ProductUpdate(BaseModel):
    seller_id: Optional[int] = None
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, min_length=1)
    price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    quantity: Optional[int] = Field(default=None, ge=0)
    categories: Optional[list[str]] = None

    @field_validator("seller_id", "name", "description", "price", "quantity", mode="before")
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("This field may not be null.")
        return value

    @field_validator("categories", mode="before")
    @classmethod
    def validate_categories(cls, value: Any) -> list[str]:
        return _category_refs(value)


class ProductImageRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    url: str
    is_thumbnail: bool


class CategoryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    product_id: Optional[int] = None


class ProductRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    seller_id: int
    name: str
    description: str
    price: Decimal
    quantity: int
    created_at: datetime
    updated_at: datetime
    images: list[ProductImageRead] = Field(default_factory=list)
    categories: list[CategoryRead] = Field(default_factory=list)


class CategoryDetail(CategoryRead):
    products: list[ProductRead] = Field(default_factory=list)


class CategoryUpdate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)


class IdsRequest(BaseModel):
    ids: list[int]


class MessageResponse(BaseModel):
    message: str


class ProductResponse(MessageResponse):
    product: ProductRead


class ProductListResponse(MessageResponse):
    products: list[ProductRead]


class CategoryResponse(MessageResponse):
    category: CategoryDetail


class CategoryListResponse(MessageResponse):
    categories: list[CategoryRead]


class SearchResponse(MessageResponse):
    products: Optional[list[ProductRead]] = None
    categories: Optional[list[CategoryRead]] = None
