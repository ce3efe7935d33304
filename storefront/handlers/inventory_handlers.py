# storefront/handlers/inventory_handlers.py
from typing import Optional
from fastapi import APIRouter, Depends
from .base_handler import get_services, get_current_user
from ..models.product import ProductCreate, StockUpdate
from ..models.user import User

router = APIRouter(prefix="/api/inventory", tags=["inventory"])

@router.get("/products")
async def list_products(page: Optional[str] = None, limit: Optional[str] = None,
                        services=Depends(get_services)):
    return await services.product_service.list_products(page, limit)

@router.get("/products/{product_id}")
async def get_product(product_id: str, services=Depends(get_services)):
    return await services.product_service.get_product(product_id)

@router.post("/products", status_code=201)
async def create_product(body: ProductCreate, user: User = Depends(get_current_user),
                         services=Depends(get_services)):
    return await services.product_service.create_product(user, body)

@router.patch("/products/{product_id}/stock")
async def update_stock(product_id: str, body: StockUpdate,
                       user: User = Depends(get_current_user),
                       services=Depends(get_services)):
    return await services.product_service.update_stock(user, product_id, body.stock)
