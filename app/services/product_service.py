import logging
from typing import Iterable

from sqlalchemy import update
from sqlalchemy.orm import Query, Session, selectinload

from app.core.cache import invalidate_cache
from app.core.storage import ImageUpload, ProductImageStorage, get_image_storage
from app.models import Category, Product, ProductImage

from . import exceptions
from .category_resolver import CategoryResolver, SqlCategoryStore
from .category_service import CATEGORY_NAMESPACE

logger = logging.getLogger(__name__)


def like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class ProductService:
    def __init__(self, db: Session, storage: ProductImageStorage | None = None):
        self.db = db
        self.storage = storage or get_image_storage()
        self.resolver = CategoryResolver(SqlCategoryStore(db))

    def list_products(self) -> list[Product]:
        return self._query().all()

    def get_product(self, product_id: int) -> Product:
        product = self._query().filter(Product.id == product_id).first()
        if not product:
            raise exceptions.NotFoundError("Could not find product with requested id")
        return product

    def products_by_ids(self, ids: Iterable[int]) -> list[Product]:
        wanted = set(ids)
        if not wanted:
            return []
        return self._query().filter(Product.id.in_(wanted)).all()

    def products_for_seller(self, seller_id: int) -> list[Product]:
        return self._query().filter(Product.seller_id == seller_id).all()

    def search(
        self,
        query: str,
        *,
        include_products: bool,
        include_categories: bool,
        limit: int | None = None,
    ) -> dict[str, list]:
        if not include_products and not include_categories:
            raise exceptions.ValidationError("Must include either categories or products")

        pattern = like_pattern(query)
        result: dict[str, list] = {}
        if include_products:
            products = self._query().filter(
                Product.name.ilike(pattern, escape="\\")
                | Product.description.ilike(pattern, escape="\\")
            )
            if limit is not None:
                products = products.limit(limit)
            result["products"] = products.all()
        if include_categories:
            categories = (
                self.db.query(Category)
                .filter(Category.name.ilike(pattern, escape="\\"))
                .order_by(Category.id)
            )
            if limit is not None:
                categories = categories.limit(limit)
            result["categories"] = categories.all()
        return result

    def create_product(self, data: dict, images: list[ImageUpload]) -> Product:
        attributes = dict(data)
        categories = attributes.pop("categories", None)

        product = Product(**attributes)
        self.db.add(product)
        self.db.commit()
        logger.info("Created product %s for seller %s", product.id, product.seller_id)

        if images:
            self._store_images(product.id, images)
            self.db.commit()

        if categories is not None:
            self.resolver.attach_on_create(product.id, categories)
            self.db.commit()
            invalidate_cache(CATEGORY_NAMESPACE)

        return self._reload(product.id)

    def update_product(
        self,
        product_id: int,
        data: dict,
        images: list[ImageUpload] | None = None,
    ) -> Product:
        product = self._get(product_id)
        attributes = dict(data)
        # Presence of the key, not its value, decides whether links are touched.
        sync_categories = "categories" in attributes
        categories = attributes.pop("categories", None) or []

        for key, value in attributes.items():
            setattr(product, key, value)
        self.db.add(product)
        self.db.commit()

        if sync_categories:
            self.resolver.reconcile_on_update(product.id, categories)
            self.db.commit()
            invalidate_cache(CATEGORY_NAMESPACE)

        if images:
            self.storage.delete_images(product.id)
            self.db.query(ProductImage).filter(ProductImage.product_id == product.id).delete()
            self._store_images(product.id, images)
            self.db.commit()

        return self._reload(product.id)

    def delete_product(self, product_id: int) -> None:
        product = self.db.get(Product, product_id)
        if product is not None:
            self.db.execute(
                update(Category).where(Category.product_id == product_id).values(product_id=None)
            )
            self.db.delete(product)
            self.db.commit()
            invalidate_cache(CATEGORY_NAMESPACE)
            logger.info("Deleted product %s", product_id)
        self.storage.delete_images(product_id)

    def purchase(self, ids: Iterable[int]) -> list[Product]:
        wanted = set(ids)
        if not wanted:
            return []
        products = (
            self.db.query(Product)
            .filter(Product.id.in_(wanted))
            .order_by(Product.id)
            .with_for_update()
            .all()
        )
        sold_out = [product.id for product in products if product.quantity < 1]
        if sold_out:
            self.db.rollback()
            raise exceptions.ConflictError(
                "Products out of stock: " + ", ".join(str(pid) for pid in sold_out)
            )
        for product in products:
            product.quantity -= 1
        self.db.commit()
        return products

    def _store_images(self, product_id: int, images: list[ImageUpload]) -> None:
        for stored in self.storage.store_images(product_id, images):
            self.db.add(
                ProductImage(product_id=product_id, url=stored.url, is_thumbnail=stored.is_thumbnail)
            )

    def _query(self) -> Query:
        return (
            self.db.query(Product)
            .options(selectinload(Product.images), selectinload(Product.categories))
            .order_by(Product.id)
        )

    def _get(self, product_id: int) -> Product:
        product = self.db.query(Product).filter(Product.id == product_id).first()
        if not product:
            raise exceptions.NotFoundError("Could not find product with requested id")
        return product

    def _reload(self, product_id: int) -> Product:
        # Links are written through Core statements, so cached collections are stale.
        self.db.expire_all()
        return self.get_product(product_id)
