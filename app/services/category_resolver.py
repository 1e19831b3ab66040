"""Category reference resolution and product/category link reconciliation.

Clients send categories as plain strings. Each string is either the id of an
existing category or the name of a category to create. The string is first
looked up as an id; only when that lookup misses is it treated as a name, and
a new category carrying that name is created (names are never compared, so
the same name resolved twice yields two categories).

On product creation every resolved id is linked in input order. On update the
resolved ids are collapsed to a set and the product's links are synced to it:
stale links are removed, missing ones added, and links that are already in
place are left alone.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Protocol, Sequence

from sqlalchemy import delete, insert, select
from sqlalchemy.orm import Session

from app.models import Category, product_categories

logger = logging.getLogger(__name__)

MAX_CATEGORY_ID = 2**63 - 1


def parse_category_id(ref: str) -> int | None:
    """Return ``ref`` as an integer id if it can be one, otherwise None."""

    if not (ref.isascii() and ref.isdigit()):
        return None
    category_id = int(ref)
    if category_id > MAX_CATEGORY_ID:
        return None
    return category_id


class CategoryStore(Protocol):
    def find_category_id(self, ref: str) -> int | None:
        ...

    def create_category(self, *, name: str, product_id: int) -> int:
        ...

    def linked_category_ids(self, product_id: int) -> set[int]:
        ...

    def link(self, product_id: int, category_id: int) -> None:
        ...

    def unlink(self, product_id: int, category_ids: Iterable[int]) -> None:
        ...


class SqlCategoryStore:
    """CategoryStore backed by the request's SQLAlchemy session.

    Writes are flushed/executed immediately but never committed here; the
    caller owns the transaction.
    """

    def __init__(self, db: Session):
        self.db = db

    def find_category_id(self, ref: str) -> int | None:
        category_id = parse_category_id(ref)
        if category_id is None:
            return None
        return self.db.scalar(select(Category.id).where(Category.id == category_id))

    def create_category(self, *, name: str, product_id: int) -> int:
        category = Category(name=name, product_id=product_id)
        self.db.add(category)
        self.db.flush()
        return category.id

    def linked_category_ids(self, product_id: int) -> set[int]:
        rows = self.db.scalars(
            select(product_categories.c.category_id).where(
                product_categories.c.product_id == product_id
            )
        )
        return set(rows)

    def link(self, product_id: int, category_id: int) -> None:
        self.db.execute(
            insert(product_categories).values(product_id=product_id, category_id=category_id)
        )

    def unlink(self, product_id: int, category_ids: Iterable[int]) -> None:
        ids = list(category_ids)
        if not ids:
            return
        self.db.execute(
            delete(product_categories).where(
                product_categories.c.product_id == product_id,
                product_categories.c.category_id.in_(ids),
            )
        )


@dataclass
class CategorySync:
    attached: list[int] = field(default_factory=list)
    detached: list[int] = field(default_factory=list)


class CategoryResolver:
    def __init__(self, store: CategoryStore):
        self.store = store

    def resolve_reference(self, product_id: int, ref: str) -> int:
        category_id = self.store.find_category_id(ref)
        if category_id is not None:
            return category_id

        created_id = self.store.create_category(name=ref, product_id=product_id)
        logger.info("Created category %s (%r) for product %s", created_id, ref, product_id)
        return created_id

    def attach_on_create(self, product_id: int, refs: Sequence[str]) -> None:
        # Repeated ids are not collapsed; the store decides what a second link means.
        for ref in refs:
            category_id = self.resolve_reference(product_id, ref)
            self.store.link(product_id, category_id)

    def reconcile_on_update(self, product_id: int, refs: Sequence[str]) -> CategorySync:
        resolved = [self.resolve_reference(product_id, ref) for ref in refs]
        current = self.store.linked_category_ids(product_id)

        target = set(resolved)
        detached = sorted(current - target)
        attached: list[int] = []
        for category_id in resolved:
            if category_id not in current and category_id not in attached:
                attached.append(category_id)

        if detached:
            self.store.unlink(product_id, detached)
        for category_id in attached:
            self.store.link(product_id, category_id)

        logger.info(
            "Synced categories for product %s: attached=%s detached=%s",
            product_id,
            attached,
            detached,
        )
        return CategorySync(attached=attached, detached=detached)
