# storefront/services/order_service.py
import logging
import uuid
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID
from ..config import Config
from ..database.repositories import OrderRepository, ProductRepository, UserRepository
from ..errors import (
    ForbiddenError,
    InsufficientStockError,
    InvalidStateError,
    NotFoundError,
)
from ..models.order import Order, OrderItemRequest, OrderStatus, PaymentStatus, ORDER_STATUS_VALUES
from ..models.product import Product
from ..models.user import User
from ..services.payment_service import PaymentSimulator
from ..utils.cache import ResponseCache, MUTATION_PREFIXES, ORDER_PREFIX, USER_ORDERS_PREFIX, ALL_ORDERS_PREFIX
from ..utils.identifiers import parse_uuid, generate_order_code
from ..utils.pagination import parse_pagination, offset, pagination_info

class OrderService:
    """Order creation, payment settlement, cancellation and order queries.

    Stock is reserved when an order is created, before the payment outcome
    is known. A declined payment or a cancellation gives the reserved units
    back. Both of those go through a conditional status update on the
    order first, so the units are returned at most once even when requests
    race each other.
    """

    def __init__(self, orders: OrderRepository, products: ProductRepository,
                 users: UserRepository, payment_service: PaymentSimulator,
                 cache: ResponseCache):
        self.orders = orders
        self.products = products
        self.users = users
        self.payment_service = payment_service
        self.cache = cache
        self.logger = logging.getLogger(__name__)

    async def create_order(self, user: User, items: List[OrderItemRequest]) -> Dict[str, Any]:
        """Reserve stock, persist the order and settle its payment"""
        requested = [(parse_uuid(item.product, "product"), item.quantity) for item in items]

        reserved: List[Tuple[UUID, int]] = []
        order_items = []
        total_amount = Decimal(0)

        try:
            for product_id, quantity in requested:
                reserved_ok, product = await self.products.reserve_stock(product_id, quantity)
                if product is None:
                    raise NotFoundError("Product")
                if not reserved_ok:
                    # Report the stock level the failed reservation was checked against
                    raise InsufficientStockError(product['name'], product['stock'])

                reserved.append((product_id, quantity))

                price = Decimal(product['price'])
                order_items.append({
                    'product_id': product_id,
                    'quantity': quantity,
                    'price': price
                })
                total_amount += price * quantity

            order = await self.orders.create({
                'id': uuid.uuid4(),
                'order_id': generate_order_code(),
                'user_id': user.user_id,
                'items': order_items,
                'total_amount': total_amount
            })
        except Exception:
            # All-or-nothing: hand back whatever was reserved before the failure
            await self._release_stock(reserved)
            raise

        self.logger.info(
            f"Order {order['order_id']} created for user {user.user_id} "
            f"({len(order_items)} items, total {total_amount})"
        )
        self._invalidate()

        await self.settle_payment(order['id'])

        settled = await self.orders.get(order['id'])
        return {
            "message": "Order created successfully",
            "order": (await self._expand([settled]))[0]
        }

    async def settle_payment(self, order_id: UUID):
        """Charge the order and confirm it, or mark it failed and restore stock.

        Never raises: a failure here is logged and the order stays as it was.
        """
        try:
            row = await self.orders.get(order_id)
            if not row:
                self.logger.warning(f"Settlement skipped, order {order_id} not found")
                return

            order = Order.model_validate(row)
            if await self.payment_service.process_payment(order):
                updated = await self.orders.record_payment(
                    order.id, PaymentStatus.SUCCESS, OrderStatus.CONFIRMED
                )
            else:
                updated = await self.orders.record_payment(
                    order.id, PaymentStatus.FAILED, OrderStatus.CREATED
                )
                if updated:
                    await self._release_stock(
                        [(item.product_id, item.quantity) for item in order.items]
                    )

            if not updated:
                self.logger.warning(
                    f"Order {order.order_id} left CREATED/PENDING before settlement finished"
                )
        except Exception as e:
            self.logger.error(f"Payment processing error for order {order_id}: {e}", exc_info=True)
        finally:
            self._invalidate()

    async def cancel_order(self, requester: User, order_code: str) -> Dict[str, Any]:
        """Cancel an order and give its stock back"""
        row = await self.orders.get_by_code(order_code)
        if not row:
            raise NotFoundError("Order")

        order = Order.model_validate(row)
        self._check_access(requester, order)

        if order.payment_status == PaymentStatus.FAILED:
            raise InvalidStateError("Payment failed and cannot be cancelled.")
        if order.status == OrderStatus.CANCELLED:
            raise InvalidStateError("Order already cancelled")
        if order.status == OrderStatus.DELIVERED:
            raise InvalidStateError("Cannot cancel delivered order")

        cancelled = await self.orders.cancel(order.id)
        if cancelled is None:
            # Another request moved the order between the read and the update
            raise InvalidStateError("Order can no longer be cancelled")

        await self._release_stock([(item.product_id, item.quantity) for item in order.items])
        self.logger.info(f"Order {order.order_id} cancelled by {requester.user_id}")

        self._invalidate()

        return {
            "message": "Order cancelled successfully",
            "order": (await self._expand([cancelled]))[0]
        }

    async def get_order(self, requester: User, order_code: str) -> Dict[str, Any]:
        """Single order, visible to its owner and to admins"""
        cache_key = f"{ORDER_PREFIX}{order_code}_{requester.user_id}"
        cached = self.cache.get(cache_key)
        if cached:
            return cached

        row = await self.orders.get_by_code(order_code)
        if not row:
            raise NotFoundError("Order")

        self._check_access(requester, Order.model_validate(row))

        response = {"order": (await self._expand([row]))[0]}
        self.cache.set(cache_key, response, Config.ORDER_CACHE_TTL)
        return response

    async def get_customer_orders(self, requester: User, page: Optional[Any] = None,
                                  limit: Optional[Any] = None,
                                  status: Optional[str] = None) -> Dict[str, Any]:
        """The requester's own orders"""
        page, limit = parse_pagination(page, limit)
        status = self._normalize_status(status)

        cache_key = f"{USER_ORDERS_PREFIX}_{requester.user_id}_p{page}_l{limit}_{status or 'all'}"
        return await self._list_orders(cache_key, requester.user_id, status, page, limit)

    async def get_all_orders(self, requester: User, page: Optional[Any] = None,
                             limit: Optional[Any] = None,
                             status: Optional[str] = None) -> Dict[str, Any]:
        """Every order in the store (Admin only)"""
        if not requester.is_admin:
            raise ForbiddenError("Admin access required")

        page, limit = parse_pagination(page, limit)
        status = self._normalize_status(status)

        cache_key = f"{ALL_ORDERS_PREFIX}_p{page}_l{limit}_{status or 'all'}"
        return await self._list_orders(cache_key, None, status, page, limit)

    async def _list_orders(self, cache_key: str, user_id: Optional[UUID],
                           status: Optional[str], page: int, limit: int) -> Dict[str, Any]:
        cached = self.cache.get(cache_key)
        if cached:
            return cached

        if status is None or status in ORDER_STATUS_VALUES:
            status_filter = OrderStatus(status) if status else None
            rows = await self.orders.list(user_id, status_filter, offset(page, limit), limit)
            total = await self.orders.count(user_id, status_filter)
        else:
            # No order can carry a status outside the enum
            rows, total = [], 0

        response = {
            "orders": await self._expand(rows),
            "pagination": pagination_info(page, limit, total)
        }
        self.cache.set(cache_key, response, Config.ORDER_CACHE_TTL)
        return response

    async def _expand(self, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Attach product documents and the owning user to each order"""
        orders = [Order.model_validate(row) for row in rows]

        products = await self.products.get_many(
            item.product_id for order in orders for item in order.items
        )
        users = await self.users.get_many(order.user_id for order in orders)

        expanded = []
        for order in orders:
            items = [
                item.model_copy(update={
                    'product': Product.model_validate(products[item.product_id])
                    if item.product_id in products else None
                })
                for item in order.items
            ]
            owner = users.get(order.user_id)
            order = order.model_copy(update={
                'items': items,
                'user': User.model_validate(owner) if owner else None
            })
            expanded.append(order.model_dump(mode="json"))
        return expanded

    async def _release_stock(self, items: List[Tuple[UUID, int]]):
        """Return reserved units to inventory, one product at a time"""
        for product_id, quantity in items:
            try:
                if not await self.products.release_stock(product_id, quantity):
                    self.logger.warning(f"Could not restore {quantity} units of missing product {product_id}")
            except Exception as e:
                self.logger.error(
                    f"Failed to restore {quantity} units of product {product_id}: {e}",
                    exc_info=True
                )

    def _invalidate(self):
        self.cache.invalidate(*MUTATION_PREFIXES)

    @staticmethod
    def _check_access(requester: User, order: Order):
        if not requester.is_admin and order.user_id != requester.user_id:
            raise ForbiddenError("Access denied")

    @staticmethod
    def _normalize_status(status: Optional[str]) -> Optional[str]:
        status = (status or "").strip().upper()
        return status or None
