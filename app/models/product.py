from sqlalchemy import Column, Integer, String, Float, DateTime

from app.database import Base


class Product(Base):
    """
    Product model representing items in the catalog.

    Attributes:
        id: Unique identifier for the product
        name: Product name
        price: Product price (must be positive)
        stock: Available quantity (must be non-negative)
        created_at: Timestamp when product was created
        updated_at: Timestamp when product was last updated

    Price and stock bounds are checked by the request schemas before a row
    ever reaches this table.
    """
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, index=True)
    price = Column(Float, nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    __table_args__ = {"sqlite_autoincrement": True}

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', stock={self.stock})>"
