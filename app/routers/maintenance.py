from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.dependencies import get_db, get_storage
from app.core.storage import ProductImageStorage
from app.schemas import MessageResponse
from app.services import reset_catalog

router = APIRouter(tags=["maintenance"])


@router.post("/reset", response_model=MessageResponse)
def reset(
    db: Session = Depends(get_db),
    storage: ProductImageStorage = Depends(get_storage),
):
    reset_catalog(db, storage)
    return MessageResponse(message="Success")
