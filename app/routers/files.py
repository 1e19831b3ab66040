from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import FileResponse

from app.core.dependencies import get_storage
from app.core.storage import ProductImageStorage

router = APIRouter(prefix="/files", tags=["files"])


@router.get("/products/{product_id}/{file_name}")
def get_product_image(
    product_id: int,
    file_name: str,
    storage: ProductImageStorage = Depends(get_storage),
):
    file_path = storage.image_path(product_id, Path(file_name).name)
    if not file_path.is_file():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")
    return FileResponse(file_path)
