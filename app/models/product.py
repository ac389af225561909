from sqlalchemy import Column, Integer, String, Numeric

from app.database import Base


class Product(Base):
    """
    Product model, the single entity of the catalog.

    Attributes:
        id: Server-assigned identifier, never reused after deletion
        name: Product name
        price: Product price, stored as a fixed-point decimal
    """
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    price = Column(Numeric(18, 2), nullable=False)

    # SQLite otherwise hands out max(id) + 1, which reuses a deleted tail id
    __table_args__ = {"sqlite_autoincrement": True}

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', price={self.price})>"
