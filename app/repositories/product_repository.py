from datetime import datetime, timezone
from typing import List, NoReturn
import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.errors import ProductNotFoundError, ProductValidationError, StorageError
from app.models.product import Product
from app.schemas.product import ProductCreate, ProductPatch

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    # SQLite DATETIME columns are naive; rows are stored as UTC
    return datetime.now(timezone.utc).replace(tzinfo=None)


class ProductRepository:
    """
    Data-access layer for the products table.

    This repository is the only writer of persisted product state and
    handles:
    - Lookups by ID, full listing and name search
    - Creating single products and all-or-nothing batches
    - Full and partial updates
    - Physical deletes

    A missing row is reported as ProductNotFoundError. Any other failure
    coming from SQLAlchemy is rolled back and re-raised as StorageError
    with the driver's message.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, product_id: int) -> Product:
        """
        Get a product by ID.

        Raises:
            ProductNotFoundError: If no row has this ID
        """
        try:
            product = self.db.get(Product, product_id)
        except SQLAlchemyError as e:
            self._fail("reading product", e)

        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    def get_all(self) -> List[Product]:
        """Get every product, ordered by ascending ID."""
        try:
            return list(self.db.scalars(select(Product).order_by(Product.id.asc())))
        except SQLAlchemyError as e:
            self._fail("listing products", e)

    def search(self, name: str) -> List[Product]:
        """
        Get products whose name contains the given substring.

        LIKE wildcards in the term are escaped, so '%' and '_' match literally.
        An empty list means nothing matched.
        """
        query = (
            select(Product)
            .where(Product.name.contains(name, autoescape=True))
            .order_by(Product.id.asc())
        )
        try:
            return list(self.db.scalars(query))
        except SQLAlchemyError as e:
            self._fail("searching products", e)

    def create(self, draft: ProductCreate) -> Product:
        """
        Create a new product.

        Args:
            draft: Validated product payload

        Returns:
            The stored product with its assigned ID and timestamps
        """
        now = _utcnow()
        product = Product(
            name=draft.name,
            price=draft.price,
            stock=draft.stock,
            created_at=now,
            updated_at=now,
        )
        try:
            self.db.add(product)
            self.db.commit()
            self.db.refresh(product)
        except SQLAlchemyError as e:
            self._fail("creating product", e)

        logger.info(f"Product #{product.id} created")
        return product

    def update(self, product_id: int, draft: ProductCreate) -> Product:
        """
        Replace name, price and stock of an existing product.

        The ID and created_at are never touched; updated_at is refreshed.
        The row is re-read after the write, so the returned object reflects
        what is stored.
        See "Update re-reads the row" in DESIGN.md.

        Raises:
            ProductNotFoundError: If no row has this ID
        """
        return self._apply(
            product_id,
            {"name": draft.name, "price": draft.price, "stock": draft.stock},
        )

    def partial_update(self, product_id: int, patch: ProductPatch) -> Product:
        """
        Apply only the fields present in the patch.

        Raises:
            ProductValidationError: If the patch carries no fields
            ProductNotFoundError: If no row has this ID
        """
        changes = patch.changes()
        if not changes:
            raise ProductValidationError("no fields to update")
        return self._apply(product_id, changes)

    def delete(self, product_id: int) -> None:
        """
        Delete a product.

        Raises:
            ProductNotFoundError: If no row has this ID
        """
        product = self.get_by_id(product_id)
        try:
            self.db.delete(product)
            self.db.commit()
        except SQLAlchemyError as e:
            self._fail(f"deleting product #{product_id}", e)

        logger.info(f"Product #{product_id} deleted")

    def bulk_create(self, drafts: List[ProductCreate]) -> List[Product]:
        """
        Create several products in a single transaction.

        Every draft has already passed schema validation. The inserts are
        flushed inside one transaction: if any of them fails, the whole batch
        is rolled back and no row is persisted.

        Raises:
            ProductValidationError: If the batch is empty
            StorageError: If any insert fails
        """
        if not drafts:
            raise ProductValidationError("products is empty")

        now = _utcnow()
        products = [
            Product(
                name=draft.name,
                price=draft.price,
                stock=draft.stock,
                created_at=now,
                updated_at=now,
            )
            for draft in drafts
        ]
        try:
            self.db.add_all(products)
            self.db.flush()
            self.db.commit()
            for product in products:
                self.db.refresh(product)
        except SQLAlchemyError as e:
            self._fail("bulk creating products", e)

        logger.info(f"Bulk created {len(products)} products")
        return products

    def _apply(self, product_id: int, changes: dict) -> Product:
        product = self.get_by_id(product_id)

        for field, value in changes.items():
            setattr(product, field, value)
        product.updated_at = _utcnow()

        try:
            self.db.commit()
            self.db.refresh(product)
        except SQLAlchemyError as e:
            self._fail(f"updating product #{product_id}", e)

        logger.info(f"Product #{product_id} updated: {', '.join(sorted(changes))}")
        return product

    def _fail(self, action: str, error: SQLAlchemyError) -> NoReturn:
        self.db.rollback()
        logger.error(f"Error {action}: {error}")
        raise StorageError(str(error)) from error
