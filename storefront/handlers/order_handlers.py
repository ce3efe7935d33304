# storefront/handlers/order_handlers.py
from typing import Optional
from fastapi import APIRouter, Depends
from .base_handler import get_services, get_current_user, enforce_rate_limit
from ..models.order import OrderCreate
from ..models.user import User

# Every order route needs a user and counts against the rate limit
router = APIRouter(
    prefix="/api/orders",
    tags=["orders"],
    dependencies=[Depends(get_current_user), Depends(enforce_rate_limit)]
)

@router.post("", status_code=201)
async def create_order(body: OrderCreate, user: User = Depends(get_current_user),
                       services=Depends(get_services)):
    return await services.order_service.create_order(user, body.items)

@router.get("/my-orders")
async def my_orders(page: Optional[str] = None, limit: Optional[str] = None,
                    status: Optional[str] = None,
                    user: User = Depends(get_current_user),
                    services=Depends(get_services)):
    return await services.order_service.get_customer_orders(user, page, limit, status)

@router.get("/all")
async def all_orders(page: Optional[str] = None, limit: Optional[str] = None,
                     status: Optional[str] = None,
                     user: User = Depends(get_current_user),
                     services=Depends(get_services)):
    return await services.order_service.get_all_orders(user, page, limit, status)

@router.get("/{order_id}")
async def get_order(order_id: str, user: User = Depends(get_current_user),
                    services=Depends(get_services)):
    return await services.order_service.get_order(user, order_id)

@router.get("/{order_id}/cancel")
async def cancel_order(order_id: str, user: User = Depends(get_current_user),
                       services=Depends(get_services)):
    return await services.order_service.cancel_order(user, order_id)
