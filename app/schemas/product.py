from decimal import Decimal
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

# Matches the NUMERIC(18, 2) column so nothing is rounded on storage.
# Prices travel as JSON numbers rather than pydantic's default decimal strings
Price = Annotated[
    Decimal,
    Field(max_digits=18, decimal_places=2),
    PlainSerializer(float, return_type=float, when_used="json"),
]


class ProductBase(BaseModel):
    """Base schema for Product with common attributes."""
    name: str = Field(..., min_length=1, max_length=255, description="Product name")
    price: Price = Field(..., description="Product price (sign is not checked)")


class ProductCreate(ProductBase):
    """Schema for creating a new product. A client-sent id is ignored."""
    id: Optional[int] = Field(None, description="Ignored; the server assigns ids")


class ProductUpdate(ProductBase):
    """Schema for a full replacement of an existing product."""
    id: int = Field(..., description="Must match the id in the request path")


class ProductResponse(ProductBase):
    """Schema for product response including the assigned id."""
    id: int

    model_config = ConfigDict(from_attributes=True)
