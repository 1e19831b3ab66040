import logging
from decimal import Decimal

from sqlalchemy import delete
from sqlalchemy.orm import Session

from app.core.cache import invalidate_cache
from app.core.storage import ProductImageStorage
from app.models import Category, Product, ProductImage, product_categories

from .category_service import CATEGORY_NAMESPACE

logger = logging.getLogger(__name__)

SEED_CATEGORIES = ["Electronics", "Audio", "Home", "Kitchen", "Outdoors"]

SEED_PRODUCTS = [
    {
        "seller_id": 1,
        "name": "Wireless Headphones",
        "description": "Over-ear bluetooth headphones with active noise cancelling.",
        "price": Decimal("129.99"),
        "quantity": 25,
        "categories": ["Electronics", "Audio"],
        "images": 2,
    },
    {
        "seller_id": 1,
        "name": "Portable Speaker",
        "description": "Waterproof speaker with twelve hours of battery life.",
        "price": Decimal("59.50"),
        "quantity": 40,
        "categories": ["Electronics", "Audio", "Outdoors"],
        "images": 1,
    },
    {
        "seller_id": 2,
        "name": "Cast Iron Skillet",
        "description": "Pre-seasoned 12 inch skillet for stovetop and oven.",
        "price": Decimal("34.00"),
        "quantity": 15,
        "categories": ["Home", "Kitchen"],
        "images": 2,
    },
    {
        "seller_id": 2,
        "name": "French Press",
        "description": "Borosilicate glass coffee maker, one litre.",
        "price": Decimal("24.75"),
        "quantity": 30,
        "categories": ["Kitchen"],
        "images": 1,
    },
    {
        "seller_id": 3,
        "name": "Camping Lantern",
        "description": "Rechargeable LED lantern with three brightness levels.",
        "price": Decimal("19.99"),
        "quantity": 0,
        "categories": ["Outdoors"],
        "images": 1,
    },
]


def _seed_image_url(product_name: str, index: int) -> str:
    slug = product_name.lower().replace(" ", "-")
    return f"https://picsum.photos/seed/{slug}-{index}/640/480"


def seed_catalog(db: Session) -> list[Product]:
    categories = {name: Category(name=name) for name in SEED_CATEGORIES}
    db.add_all(categories.values())

    products: list[Product] = []
    for entry in SEED_PRODUCTS:
        product = Product(
            seller_id=entry["seller_id"],
            name=entry["name"],
            description=entry["description"],
            price=entry["price"],
            quantity=entry["quantity"],
        )
        product.categories = [categories[name] for name in entry["categories"]]
        product.images = [
            ProductImage(url=_seed_image_url(entry["name"], index), is_thumbnail=index == 0)
            for index in range(entry["images"])
        ]
        db.add(product)
        products.append(product)

    db.flush()
    return products


def reset_catalog(db: Session, storage: ProductImageStorage) -> None:
    """Wipe every product, category, link and image, then reseed the demo catalog."""

    db.execute(delete(product_categories))
    db.execute(delete(ProductImage))
    db.execute(delete(Category))
    db.execute(delete(Product))
    db.expunge_all()

    products = seed_catalog(db)
    db.commit()

    storage.clear()
    invalidate_cache(CATEGORY_NAMESPACE)
    logger.info("Catalog reset with %d seeded products", len(products))
