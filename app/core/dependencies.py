from typing import Generator

from sqlalchemy.orm import Session

from app.core.db import get_db_session
from app.core.storage import ProductImageStorage, get_image_storage


def get_db() -> Generator[Session, None, None]:
    yield from get_db_session()


def get_storage() -> ProductImageStorage:
    return get_image_storage()
