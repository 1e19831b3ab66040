from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Request, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.dependencies import get_db, get_storage
from app.core.forms import read_images, read_payload
from app.core.storage import ImageUpload, ProductImageStorage, image_upload_error
from app.schemas import (
    CategoryRead,
    IdsRequest,
    MessageResponse,
    ProductCreate,
    ProductListResponse,
    ProductRead,
    ProductResponse,
    ProductUpdate,
    SearchResponse,
)
from app.services import ProductService
from app.services import exceptions as service_exceptions

router = APIRouter(tags=["products"])


def _image_errors(images: list[ImageUpload]) -> list[dict[str, Any]]:
    max_size_kb = get_settings().MAX_IMAGE_SIZE_KB
    errors = []
    for index, image in enumerate(images):
        message = image_upload_error(image, max_size_kb)
        if message:
            errors.append({"loc": ("images", index), "msg": message, "type": "value_error"})
    return errors


def _validate(model, fields: dict[str, Any], errors: list[dict[str, Any]]):
    try:
        return model.model_validate(fields)
    except PydanticValidationError as exc:
        errors.extend(exc.errors())
        return None


def _product_list(message: str, products) -> ProductListResponse:
    return ProductListResponse(
        message=message,
        products=[ProductRead.model_validate(product) for product in products],
    )


@router.get("/products", response_model=ProductListResponse)
def list_products(db: Session = Depends(get_db)):
    service = ProductService(db)
    return _product_list("Success", service.list_products())


@router.post("/products", response_model=ProductResponse)
async def create_product(
    request: Request,
    db: Session = Depends(get_db),
    storage: ProductImageStorage = Depends(get_storage),
):
    payload = await read_payload(request)
    images = await read_images(payload.uploads)

    errors: list[dict[str, Any]] = []
    data = _validate(ProductCreate, payload.fields, errors)
    if not images:
        errors.append({"loc": ("images",), "msg": "The images field is required.", "type": "missing"})
    errors.extend(_image_errors(images))
    if errors:
        raise RequestValidationError(errors)

    service = ProductService(db, storage)
    product = service.create_product(data.model_dump(exclude_unset=True), images)
    return ProductResponse(message="Success", product=ProductRead.model_validate(product))


@router.post("/products/ids", response_model=ProductListResponse)
def products_by_ids(payload: IdsRequest, db: Session = Depends(get_db)):
    service = ProductService(db)
    return _product_list("Success", service.products_by_ids(payload.ids))


@router.post("/products/purchase", response_model=MessageResponse)
def purchase_products(payload: IdsRequest, db: Session = Depends(get_db)):
    service = ProductService(db)
    try:
        service.purchase(payload.ids)
    except service_exceptions.ConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return MessageResponse(message="Success")


@router.get(
    "/products/search/{query}",
    response_model=SearchResponse,
    response_model_exclude_none=True,
)
def search_products(
    query: str,
    products: bool = False,
    categories: bool = False,
    limit: Optional[int] = Query(default=None, ge=1),
    db: Session = Depends(get_db),
):
    return _search(db, query, products, categories, limit)


# Older clients put the flags and limit in the path: /search/{query}/{products}/{categories}/{limit}.
@router.get(
    "/products/search/{query}/{products}",
    response_model=SearchResponse,
    response_model_exclude_none=True,
)
@router.get(
    "/products/search/{query}/{products}/{categories}",
    response_model=SearchResponse,
    response_model_exclude_none=True,
)
def search_products_by_path(
    query: str,
    products: bool,
    categories: bool = False,
    db: Session = Depends(get_db),
):
    return _search(db, query, products, categories, None)


@router.get(
    "/products/search/{query}/{products}/{categories}/{limit}",
    response_model=SearchResponse,
    response_model_exclude_none=True,
)
def search_products_by_path_with_limit(
    query: str,
    products: bool,
    categories: bool,
    limit: int = Path(..., ge=1),
    db: Session = Depends(get_db),
):
    return _search(db, query, products, categories, limit)


def _search(
    db: Session,
    query: str,
    products: bool,
    categories: bool,
    limit: Optional[int],
) -> SearchResponse:
    service = ProductService(db)
    try:
        result = service.search(
            query,
            include_products=products,
            include_categories=categories,
            limit=limit,
        )
    except service_exceptions.ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    response = SearchResponse(message="Returning search results")
    if "products" in result:
        response.products = [ProductRead.model_validate(item) for item in result["products"]]
    if "categories" in result:
        response.categories = [CategoryRead.model_validate(item) for item in result["categories"]]
    return response


@router.get("/products/{product_id}", response_model=ProductResponse)
def get_product(product_id: int, db: Session = Depends(get_db)):
    service = ProductService(db)
    try:
        product = service.get_product(product_id)
    except service_exceptions.NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return ProductResponse(message="Success", product=ProductRead.model_validate(product))


@router.api_route("/products/{product_id}", methods=["PUT", "PATCH"], response_model=ProductResponse)
async def update_product(
    product_id: int,
    request: Request,
    db: Session = Depends(get_db),
    storage: ProductImageStorage = Depends(get_storage),
):
    payload = await read_payload(request)
    images = await read_images(payload.uploads)

    errors: list[dict[str, Any]] = []
    data = _validate(ProductUpdate, payload.fields, errors)
    errors.extend(_image_errors(images))
    if errors:
        raise RequestValidationError(errors)

    service = ProductService(db, storage)
    try:
        product = service.update_product(
            product_id,
            data.model_dump(exclude_unset=True),
            images or None,
        )
    except service_exceptions.NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return ProductResponse(
        message=f"Updated product id: {product.id}",
        product=ProductRead.model_validate(product),
    )


@router.delete("/products/{product_id}", response_model=MessageResponse)
def delete_product(
    product_id: int,
    db: Session = Depends(get_db),
    storage: ProductImageStorage = Depends(get_storage),
):
    service = ProductService(db, storage)
    service.delete_product(product_id)
    return MessageResponse(message="Product deleted")


@router.get("/user/{seller_id}/products", response_model=ProductListResponse)
def seller_products(seller_id: int, db: Session = Depends(get_db)):
    service = ProductService(db)
    products = service.products_for_seller(seller_id)
    return _product_list(f"Returning {len(products)} products", products)
