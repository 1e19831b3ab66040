from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.core.dependencies import get_db
from app.schemas import (
    CategoryDetail,
    CategoryListResponse,
    CategoryRead,
    CategoryResponse,
    CategoryUpdate,
    IdsRequest,
    MessageResponse,
    ProductListResponse,
    ProductRead,
)
from app.services import CategoryService
from app.services import exceptions as service_exceptions

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=CategoryListResponse)
def list_categories(
    limit: Optional[int] = Query(default=None, ge=1),
    db: Session = Depends(get_db),
):
    service = CategoryService(db)
    data = service.get_cached_categories(limit=limit)
    return CategoryListResponse(message="Success", categories=[CategoryRead(**item) for item in data])


@router.post("/products", response_model=ProductListResponse)
def category_products(payload: IdsRequest, db: Session = Depends(get_db)):
    service = CategoryService(db)
    products = service.products_in_categories(payload.ids)
    return ProductListResponse(
        message=f"Returning {len(products)} products",
        products=[ProductRead.model_validate(product) for product in products],
    )


@router.get("/{category_id}", response_model=CategoryResponse)
def get_category(category_id: int, db: Session = Depends(get_db)):
    service = CategoryService(db)
    try:
        category = service.get_category(category_id)
    except service_exceptions.NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return CategoryResponse(message="Success", category=CategoryDetail.model_validate(category))


@router.api_route("/{category_id}", methods=["PUT", "PATCH"], response_model=CategoryResponse)
def update_category(
    category_id: int,
    payload: CategoryUpdate,
    db: Session = Depends(get_db),
):
    service = CategoryService(db)
    try:
        category = service.update_category(category_id, payload.model_dump())
    except service_exceptions.NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return CategoryResponse(
        message=f"Updated category id: {category.id}",
        category=CategoryDetail.model_validate(category),
    )


@router.delete("/{category_id}", response_model=MessageResponse)
def delete_category(category_id: int, db: Session = Depends(get_db)):
    service = CategoryService(db)
    try:
        service.delete_category(category_id)
    except service_exceptions.NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return MessageResponse(message="Category deleted")
