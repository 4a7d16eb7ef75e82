from pydantic import BaseModel, Field, ConfigDict, field_validator
from datetime import datetime
from typing import Optional

# SQLite INTEGER columns are signed 64-bit
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


def _check_name(value):
    if value is None or value == "":
        raise ValueError("name is required")
    return value


def _check_price(value: float) -> float:
    if value <= 0:
        raise ValueError("price must be greater than 0")
    return value


def _check_stock(value: int) -> int:
    if value < 0:
        raise ValueError("stock cannot be negative")
    if value > INT64_MAX:
        raise ValueError(f"stock must be at most {INT64_MAX}")
    return value


class ProductBase(BaseModel):
    """Base schema for Product with common attributes."""
    name: str = Field(..., description="Product name")
    price: float = Field(..., allow_inf_nan=False, description="Product price (must be positive)")
    stock: int = Field(..., description="Available stock (must be non-negative)")

    @field_validator("name", mode="before")
    @classmethod
    def name_not_empty(cls, value):
        return _check_name(value)

    @field_validator("price")
    @classmethod
    def price_positive(cls, value: float) -> float:
        return _check_price(value)

    @field_validator("stock")
    @classmethod
    def stock_non_negative(cls, value: int) -> int:
        return _check_stock(value)


class ProductCreate(ProductBase):
    """
    Schema for a product draft: the payload of a create, a full update
    (PUT) or one element of a bulk create.
    """
    pass


class ProductPatch(BaseModel):
    """Schema for partially updating a product. Only fields sent are applied."""
    name: Optional[str] = Field(None, description="Product name")
    price: Optional[float] = Field(None, allow_inf_nan=False, description="Product price")
    stock: Optional[int] = Field(None, description="Available stock")

    @field_validator("name", "price", "stock", mode="before")
    @classmethod
    def not_null(cls, value, info):
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, value: str) -> str:
        if value == "":
            raise ValueError("name cannot be empty")
        return value

    @field_validator("price")
    @classmethod
    def price_positive(cls, value: float) -> float:
        return _check_price(value)

    @field_validator("stock")
    @classmethod
    def stock_non_negative(cls, value: int) -> int:
        return _check_stock(value)

    def changes(self) -> dict:
        """Fields explicitly present in the request body."""
        return self.model_dump(exclude_unset=True)


class ProductResponse(ProductBase):
    """Schema for product response including all fields."""
    id: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
