from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import List
import logging

from app.models.product import Product
from app.schemas.product import ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)

# Largest id a signed 64-bit INTEGER column can hold
MAX_PRODUCT_ID = 2**63 - 1


class ProductNotFoundError(Exception):
    """Exception raised when the requested product doesn't exist."""
    pass


class ProductIdMismatchError(Exception):
    """Exception raised when the path id and the payload id of an update differ."""
    pass


class ProductService:
    """
    Service class for Product CRUD operations.

    Every mutation commits before returning. Concurrent updates to the same
    product are not coordinated: the last committed write wins.
    """

    def __init__(self, db: Session):
        self.db = db

    def list(self) -> List[Product]:
        """Return all products in storage order (ascending id)."""
        return self.db.query(Product).order_by(Product.id).all()

    def get(self, product_id: int) -> Product:
        """
        Get a product by ID.

        Raises:
            ProductNotFoundError: If no product has this id
        """
        if not 1 <= product_id <= MAX_PRODUCT_ID:
            raise ProductNotFoundError(f"Product with ID {product_id} not found")

        product = self.db.query(Product).filter(Product.id == product_id).first()
        if not product:
            raise ProductNotFoundError(f"Product with ID {product_id} not found")
        return product

    def create(self, product_data: ProductCreate) -> Product:
        """
        Create a new product. Any id in the payload is ignored.

        Args:
            product_data: Product creation data

        Returns:
            Created product instance with its assigned id
        """
        product = Product(name=product_data.name, price=product_data.price)
        self.db.add(product)
        self._commit()
        self.db.refresh(product)

        logger.info(f"Product #{product.id} created")
        return product

    def update(self, product_id: int, product_data: ProductUpdate) -> Product:
        """
        Replace the name and price of an existing product.

        Args:
            product_id: ID from the request path
            product_data: Full product payload, including its id

        Returns:
            Updated product instance

        Raises:
            ProductIdMismatchError: If product_data.id differs from product_id
            ProductNotFoundError: If no product has this id
        """
        if product_data.id != product_id:
            raise ProductIdMismatchError(
                f"Path ID {product_id} does not match payload ID {product_data.id}"
            )

        product = self.get(product_id)
        product.name = product_data.name
        product.price = product_data.price
        self._commit()
        self.db.refresh(product)

        logger.info(f"Product #{product_id} updated")
        return product

    def delete(self, product_id: int) -> None:
        """
        Delete a product.

        Raises:
            ProductNotFoundError: If no product has this id
        """
        product = self.get(product_id)
        self.db.delete(product)
        self._commit()

        logger.info(f"Product #{product_id} deleted")

    def _commit(self) -> None:
        """Commit the session, rolling back and re-raising on store errors."""
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error committing product change: {e}")
            raise
