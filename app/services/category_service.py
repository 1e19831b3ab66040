from sqlalchemy.orm import Session, selectinload

from app.core.cache import cache, invalidate_cache
from app.core.config import get_settings
from app.models import Category, Product

from . import exceptions

CATEGORY_NAMESPACE = "categories"


def _category_cache_ttl() -> int:
    return get_settings().CATEGORY_CACHE_TTL


class CategoryService:
    def __init__(self, db: Session):
        self.db = db

    @cache(
        namespace=CATEGORY_NAMESPACE,
        key_builder=lambda self, limit=None: f"limit:{limit or 'all'}",
        ttl=_category_cache_ttl,
    )
    def get_cached_categories(self, limit: int | None = None) -> list[dict]:
        query = self.db.query(Category).order_by(Category.id)
        if limit:
            query = query.limit(limit)
        return [self._serialize_category(category) for category in query.all()]

    def get_category(self, category_id: int) -> Category:
        category = (
            self.db.query(Category)
            .options(
                selectinload(Category.products).selectinload(Product.images),
                selectinload(Category.products).selectinload(Product.categories),
            )
            .filter(Category.id == category_id)
            .first()
        )
        if not category:
            raise exceptions.NotFoundError("Could not find category with requested id")
        return category

    def update_category(self, category_id: int, data: dict) -> Category:
        category = self._get(category_id)
        for key, value in data.items():
            setattr(category, key, value)
        self.db.add(category)
        self.db.commit()
        invalidate_cache(CATEGORY_NAMESPACE)
        self.db.expire_all()
        return self.get_category(category_id)

    def delete_category(self, category_id: int) -> None:
        category = self._get(category_id)
        self.db.delete(category)
        self.db.commit()
        invalidate_cache(CATEGORY_NAMESPACE)

    def products_in_categories(self, category_ids: list[int]) -> list[Product]:
        wanted = set(category_ids)
        if not wanted:
            return []
        return (
            self.db.query(Product)
            .options(selectinload(Product.images), selectinload(Product.categories))
            .filter(Product.categories.any(Category.id.in_(wanted)))
            .order_by(Product.id)
            .all()
        )

    def _get(self, category_id: int) -> Category:
        category = self.db.query(Category).filter(Category.id == category_id).first()
        if not category:
            raise exceptions.NotFoundError("Could not find category with requested id")
        return category

    @staticmethod
    def _serialize_category(category: Category) -> dict:
        return {
            "id": category.id,
            "name": category.name,
            "product_id": category.product_id,
        }
