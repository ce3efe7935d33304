# storefront/handlers/auth_handlers.py
from fastapi import APIRouter, Depends
from .base_handler import get_services, get_current_user
from ..models.user import User, RegisterRequest, LoginRequest

router = APIRouter(prefix="/api/auth", tags=["auth"])

@router.post("/register", status_code=201)
async def register(body: RegisterRequest, services=Depends(get_services)):
    return await services.user_service.register_user(body)

@router.post("/login")
async def login(body: LoginRequest, services=Depends(get_services)):
    return await services.user_service.login(body.email, body.password)

@router.get("/profile")
async def profile(user: User = Depends(get_current_user), services=Depends(get_services)):
    return await services.user_service.get_profile(user)
