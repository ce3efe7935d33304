# storefront/models/product.py
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, Field
from .base import TimeStampedModel, Money

class Product(TimeStampedModel):
    """Product held in the inventory"""
    product_id: UUID
    name: str
    description: Optional[str] = None
    price: Money
    stock: int = 0
    category: str

class ProductCreate(BaseModel):
    """Body of POST /api/inventory/products"""
    name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    price: Money = Field(ge=0)
    stock: int = Field(ge=0)
    category: str = Field(min_length=1)

class StockUpdate(BaseModel):
    """Body of PATCH /api/inventory/products/{id}/stock"""
    stock: int = Field(ge=0)
