# storefront/models/order.py
from pydantic import BaseModel, Field
from enum import Enum
from typing import List, Optional
from uuid import UUID
from .base import TimeStampedModel, Money
from .product import Product
from .user import User

class OrderStatus(str, Enum):
    CREATED = "CREATED"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"

class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"

ORDER_STATUS_VALUES = frozenset(s.value for s in OrderStatus)

# Statuses from which an order can no longer be cancelled
TERMINAL_STATUSES = (OrderStatus.CANCELLED, OrderStatus.DELIVERED)

class OrderItem(BaseModel):
    """Individual item in an order, priced at order time"""
    product_id: UUID
    quantity: int = Field(ge=1)
    price: Money
    product: Optional[Product] = None

class Order(TimeStampedModel):
    """Order model for purchases"""
    id: UUID
    order_id: str
    user_id: UUID
    items: List[OrderItem]
    total_amount: Money
    status: OrderStatus = OrderStatus.CREATED
    payment_status: PaymentStatus = PaymentStatus.PENDING
    user: Optional[User] = None

class OrderItemRequest(BaseModel):
    product: str = Field(min_length=1)
    quantity: int = Field(ge=1)

class OrderCreate(BaseModel):
    """Body of POST /api/orders"""
    items: List[OrderItemRequest] = Field(min_length=1)
