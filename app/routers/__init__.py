from fastapi import APIRouter

from . import categories, files, health, maintenance, products


def get_api_router() -> APIRouter:
    router = APIRouter()
    router.include_router(health.router)
    router.include_router(products.router)
    router.include_router(categories.router)
    router.include_router(files.router)
    router.include_router(maintenance.router)
    return router
