# storefront/app.py
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from .config import Config
from .database.database import Database
from .database.repositories import (
    PostgresOrderRepository,
    PostgresProductRepository,
    PostgresUserRepository,
)
from .errors import StorefrontError, ValidationError
from .handlers import auth_router, inventory_router, order_router
from .services.order_service import OrderService
from .services.payment_service import PaymentSimulator
from .services.product_service import ProductService
from .services.user_service import UserService
from .utils.cache import ResponseCache, init_cache
from .utils.rate_limit import RateLimiter

logger = logging.getLogger(__name__)

@dataclass
class Services:
    user_service: UserService
    product_service: ProductService
    order_service: OrderService
    rate_limiter: RateLimiter

def build_services(products, orders, users,
                   payment_service: Optional[PaymentSimulator] = None,
                   cache: Optional[ResponseCache] = None,
                   rate_limiter: Optional[RateLimiter] = None) -> Services:
    """Wire the services on top of a set of repositories"""
    cache = cache or init_cache(Config.PRODUCT_CACHE_TTL)
    return Services(
        user_service=UserService(users),
        product_service=ProductService(products, cache),
        order_service=OrderService(
            orders, products, users,
            payment_service or PaymentSimulator(),
            cache
        ),
        rate_limiter=rate_limiter or RateLimiter()
    )

def _validation_details(exc: RequestValidationError):
    details = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"] if part != "body")
        details.append(f"{location}: {error['msg']}" if location else error["msg"])
    return details

def register_error_handlers(app: FastAPI):
    @app.exception_handler(StorefrontError)
    async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
        """Map StorefrontError subclasses to their HTTP status"""
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        error = ValidationError(_validation_details(exc))
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        message = "Route not found" if exc.status_code == 404 else str(exc.detail)
        return JSONResponse(status_code=exc.status_code, content={"error": message})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

def create_app(services: Optional[Services] = None) -> FastAPI:
    """Build the API; without explicit services it runs on PostgreSQL"""
    database = None
    if services is None:
        database = Database()
        services = build_services(
            PostgresProductRepository(database),
            PostgresOrderRepository(database),
            PostgresUserRepository(database)
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if database:
            await database.connect()
        try:
            yield
        finally:
            if database:
                await database.close()

    app = FastAPI(title="Storefront API", lifespan=lifespan)
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"]
    )

    app.include_router(auth_router)
    app.include_router(inventory_router)
    app.include_router(order_router)

    register_error_handlers(app)
    return app
