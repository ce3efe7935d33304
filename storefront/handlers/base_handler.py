# storefront/handlers/base_handler.py
from typing import Optional
from fastapi import Depends, Header, Request
from ..errors import AuthError, RateLimitError
from ..models.user import User

def get_services(request: Request):
    """Service container attached to the app at startup"""
    return request.app.state.services

async def get_current_user(request: Request,
                           authorization: Optional[str] = Header(None)) -> User:
    """Resolve the bearer token to a user, or fail with 401"""
    if not authorization or not authorization.startswith("Bearer "):
        raise AuthError("Authentication required")

    token = authorization[len("Bearer "):].strip()
    user = await get_services(request).user_service.authenticate(token)
    request.state.user = user
    return user

def get_client_ip(request: Request) -> str:
    """Extract client IP from request."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"

async def enforce_rate_limit(request: Request):
    """Throttle per authenticated user, falling back to the client IP"""
    user = getattr(request.state, "user", None)
    key = f"user:{user.user_id}" if user else f"ip:{get_client_ip(request)}"

    if not get_services(request).rate_limiter.check(key):
        raise RateLimitError()
