from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

from app.core.config import get_settings

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_EXTENSIONS = {".jpeg", ".png", ".jpg", ".gif", ".svg"}
PRODUCT_IMAGE_SUBDIR = "products"


@dataclass(frozen=True)
class ImageUpload:
    filename: str
    content: bytes


@dataclass(frozen=True)
class StoredImage:
    url: str
    is_thumbnail: bool


def image_upload_error(upload: ImageUpload, max_size_kb: int) -> str | None:
    """Return a validation message for an unacceptable upload, or None."""

    ext = Path(upload.filename or "").suffix.lower()
    if ext not in ALLOWED_IMAGE_EXTENSIONS:
        return "The image must be a file of type: jpeg, png, jpg, gif, svg."
    if not upload.content:
        return "The image must not be empty."
    if len(upload.content) > max_size_kb * 1024:
        return f"The image must not be greater than {max_size_kb} kilobytes."
    return None


class ProductImageStorage:
    """Stores product images on the local filesystem under one directory per product."""

    def __init__(self, root: Path, url_prefix: str):
        self.root = root / PRODUCT_IMAGE_SUBDIR
        self.url_prefix = url_prefix.rstrip("/")

    def product_dir(self, product_id: int) -> Path:
        return self.root / str(product_id)

    def image_path(self, product_id: int, file_name: str) -> Path:
        safe_name = Path(file_name).name
        return self.product_dir(product_id) / safe_name

    def store_images(self, product_id: int, uploads: list[ImageUpload]) -> list[StoredImage]:
        directory = self.product_dir(product_id)
        directory.mkdir(parents=True, exist_ok=True)
        stored: list[StoredImage] = []
        for index, upload in enumerate(uploads):
            ext = Path(upload.filename).suffix.lower()
            file_name = f"image_{index}{ext}"
            with (directory / file_name).open("wb") as buffer:
                buffer.write(upload.content)
            stored.append(
                StoredImage(
                    url=f"{self.url_prefix}/{product_id}/{file_name}",
                    is_thumbnail=index == 0,
                )
            )
        logger.info("Stored %d image(s) for product %s", len(stored), product_id)
        return stored

    def delete_images(self, product_id: int) -> None:
        directory = self.product_dir(product_id)
        if directory.exists():
            shutil.rmtree(directory, ignore_errors=True)

    def clear(self) -> None:
        if self.root.exists():
            shutil.rmtree(self.root, ignore_errors=True)


def get_image_storage() -> ProductImageStorage:
    settings = get_settings()
    return ProductImageStorage(
        root=settings.media_root_path,
        url_prefix=f"{settings.API_V1_PREFIX}/files/{PRODUCT_IMAGE_SUBDIR}",
    )
