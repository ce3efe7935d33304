# storefront/services/product_service.py
import logging
import uuid
from typing import Any, Dict, Optional
from ..config import Config
from ..database.repositories import ProductRepository
from ..errors import ForbiddenError, NotFoundError
from ..models.product import Product, ProductCreate
from ..models.user import User
from ..utils.cache import ResponseCache, MUTATION_PREFIXES, PRODUCT_PREFIX, PRODUCT_LIST_PREFIX
from ..utils.identifiers import parse_uuid
from ..utils.pagination import parse_pagination, offset, pagination_info

def serialize_product(row: Dict[str, Any]) -> Dict[str, Any]:
    return Product.model_validate(row).model_dump(mode="json")

class ProductService:
    def __init__(self, products: ProductRepository, cache: ResponseCache):
        self.products = products
        self.cache = cache
        self.logger = logging.getLogger(__name__)

    async def list_products(self, page: Optional[Any] = None, limit: Optional[Any] = None) -> Dict[str, Any]:
        """Paginated product listing, newest first"""
        page, limit = parse_pagination(page, limit)

        cache_key = f"{PRODUCT_LIST_PREFIX}p{page}_l{limit}"
        cached = self.cache.get(cache_key)
        if cached:
            return cached

        products = await self.products.list(offset(page, limit), limit)
        total = await self.products.count()

        response = {
            "products": [serialize_product(p) for p in products],
            "pagination": pagination_info(page, limit, total)
        }
        self.cache.set(cache_key, response, Config.PRODUCT_CACHE_TTL)
        return response

    async def get_product(self, product_id: str) -> Dict[str, Any]:
        """Single product lookup"""
        parsed_id = parse_uuid(product_id, "product")

        cache_key = f"{PRODUCT_PREFIX}{parsed_id}"
        cached = self.cache.get(cache_key)
        if cached:
            return cached

        product = await self.products.get(parsed_id)
        if not product:
            raise NotFoundError("Product")

        response = {"product": serialize_product(product)}
        self.cache.set(cache_key, response, Config.PRODUCT_CACHE_TTL)
        return response

    async def create_product(self, requester: User, product_data: ProductCreate) -> Dict[str, Any]:
        """Add a product to the catalogue (Admin only)"""
        self._require_admin(requester)

        product = await self.products.create({
            'product_id': uuid.uuid4(),
            **product_data.model_dump()
        })
        self.logger.info(f"Product {product['product_id']} created by {requester.user_id}")

        self.cache.invalidate(*MUTATION_PREFIXES)

        return {
            "message": "Product created successfully",
            "product": serialize_product(product)
        }

    async def update_stock(self, requester: User, product_id: str, stock: int) -> Dict[str, Any]:
        """Overwrite a product's stock level (Admin only)"""
        self._require_admin(requester)
        parsed_id = parse_uuid(product_id, "product")

        product = await self.products.set_stock(parsed_id, stock)
        if not product:
            raise NotFoundError("Product")
        self.logger.info(f"Stock of product {parsed_id} set to {stock} by {requester.user_id}")

        # Listings and outstanding order views may show the old stock
        self.cache.invalidate(*MUTATION_PREFIXES)

        return {
            "message": "Stock updated successfully",
            "product": serialize_product(product)
        }

    @staticmethod
    def _require_admin(requester: User):
        if not requester.is_admin:
            raise ForbiddenError("Admin access required")
