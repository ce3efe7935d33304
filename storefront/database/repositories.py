# storefront/database/repositories.py
import logging
import asyncpg
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Protocol, Tuple
from uuid import UUID
from ..errors import DuplicateKeyError
from ..models.order import OrderStatus, PaymentStatus, TERMINAL_STATUSES

# Services only talk to the protocols below. Every stock and status mutation
# in the Postgres stores is checked and applied under a row lock so concurrent
# requests can't lose updates or apply a compensation twice.

class ProductRepository(Protocol):
    async def create(self, product_data: Dict[str, Any]) -> Dict[str, Any]: ...

    async def get(self, product_id: UUID) -> Optional[Dict[str, Any]]: ...

    async def get_many(self, product_ids: Iterable[UUID]) -> Dict[UUID, Dict[str, Any]]: ...

    async def list(self, skip: int, limit: int) -> List[Dict[str, Any]]: ...

    async def count(self) -> int: ...

    async def set_stock(self, product_id: UUID, stock: int) -> Optional[Dict[str, Any]]: ...

    async def reserve_stock(self, product_id: UUID, quantity: int) -> Tuple[bool, Optional[Dict[str, Any]]]:
        """Decrement stock only if enough units remain.

        Returns ``(True, row after the decrement)`` on success, ``(False, row
        the check saw)`` when stock is short and ``(False, None)`` when the
        product doesn't exist.
        """
        ...

    async def release_stock(self, product_id: UUID, quantity: int) -> bool: ...

class OrderRepository(Protocol):
    async def create(self, order_data: Dict[str, Any]) -> Dict[str, Any]: ...

    async def get(self, id: UUID) -> Optional[Dict[str, Any]]: ...

    async def get_by_code(self, order_code: str) -> Optional[Dict[str, Any]]: ...

    async def list(self, user_id: Optional[UUID], status: Optional[OrderStatus],
                   skip: int, limit: int) -> List[Dict[str, Any]]: ...

    async def count(self, user_id: Optional[UUID], status: Optional[OrderStatus]) -> int: ...

    async def record_payment(self, id: UUID, payment_status: PaymentStatus,
                             status: OrderStatus) -> Optional[Dict[str, Any]]:
        """Move a CREATED/PENDING order to its settled state; None if it already moved."""
        ...

    async def cancel(self, id: UUID) -> Optional[Dict[str, Any]]:
        """Move a cancellable order to CANCELLED; None if it isn't cancellable."""
        ...

class UserRepository(Protocol):
    async def create(self, user_data: Dict[str, Any]) -> Dict[str, Any]: ...

    async def get(self, user_id: UUID) -> Optional[Dict[str, Any]]: ...

    async def get_many(self, user_ids: Iterable[UUID]) -> Dict[UUID, Dict[str, Any]]: ...

    async def get_by_email(self, email: str) -> Optional[Dict[str, Any]]: ...

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)

class PostgresProductRepository:
    def __init__(self, db):
        self.db = db

    async def create(self, product_data: Dict[str, Any]) -> Dict[str, Any]:
        async with self.db.pool.acquire() as conn:
            product = await conn.fetchrow("""
                INSERT INTO products (
                    product_id, name, description, price, stock, category, created_at
                ) VALUES ($1, $2, $3, $4, $5, $6, $7)
                RETURNING *
            """,
                product_data['product_id'],
                product_data['name'],
                product_data.get('description'),
                Decimal(product_data['price']),
                product_data['stock'],
                product_data['category'],
                _utcnow()
            )
            return dict(product)

    async def get(self, product_id: UUID) -> Optional[Dict[str, Any]]:
        async with self.db.pool.acquire() as conn:
            product = await conn.fetchrow(
                "SELECT * FROM products WHERE product_id = $1", product_id
            )
            return dict(product) if product else None

    async def get_many(self, product_ids: Iterable[UUID]) -> Dict[UUID, Dict[str, Any]]:
        ids = list(set(product_ids))
        if not ids:
            return {}
        async with self.db.pool.acquire() as conn:
            products = await conn.fetch(
                "SELECT * FROM products WHERE product_id = ANY($1::uuid[])", ids
            )
            return {p['product_id']: dict(p) for p in products}

    async def list(self, skip: int, limit: int) -> List[Dict[str, Any]]:
        async with self.db.pool.acquire() as conn:
            products = await conn.fetch("""
                SELECT *
                FROM products
                ORDER BY created_at DESC
                OFFSET $1
                LIMIT $2
            """, skip, limit)
            return [dict(p) for p in products]

    async def count(self) -> int:
        async with self.db.pool.acquire() as conn:
            count = await conn.fetchval("SELECT COUNT(*) FROM products")
            return count or 0

    async def set_stock(self, product_id: UUID, stock: int) -> Optional[Dict[str, Any]]:
        async with self.db.pool.acquire() as conn:
            product = await conn.fetchrow("""
                UPDATE products
                SET stock = $1,
                    updated_at = CURRENT_TIMESTAMP
                WHERE product_id = $2
                RETURNING *
            """, stock, product_id)
            return dict(product) if product else None

    async def reserve_stock(self, product_id: UUID, quantity: int) -> Tuple[bool, Optional[Dict[str, Any]]]:
        async with self.db.pool.acquire() as conn:
            async with conn.transaction():
                # The lock makes the reading below the one the decrement is checked against
                current = await conn.fetchrow(
                    "SELECT * FROM products WHERE product_id = $1 FOR UPDATE", product_id
                )
                if not current:
                    return False, None
                if current['stock'] < quantity:
                    return False, dict(current)

                product = await conn.fetchrow("""
                    UPDATE products
                    SET stock = stock - $1,
                        updated_at = CURRENT_TIMESTAMP
                    WHERE product_id = $2 AND stock >= $1
                    RETURNING *
                """, quantity, product_id)
                return True, dict(product)

    async def release_stock(self, product_id: UUID, quantity: int) -> bool:
        async with self.db.pool.acquire() as conn:
            result = await conn.execute("""
                UPDATE products
                SET stock = stock + $1,
                    updated_at = CURRENT_TIMESTAMP
                WHERE product_id = $2
            """, quantity, product_id)
            return result == "UPDATE 1"

class PostgresOrderRepository:
    def __init__(self, db):
        self.db = db

    @staticmethod
    def _serialize_items(items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return [
            {
                'product_id': str(item['product_id']),
                'quantity': item['quantity'],
                'price': str(item['price'])
            }
            for item in items
        ]

    async def create(self, order_data: Dict[str, Any]) -> Dict[str, Any]:
        async with self.db.pool.acquire() as conn:
            order = await conn.fetchrow("""
                INSERT INTO orders (
                    id, order_id, user_id, items, total_amount,
                    status, payment_status, created_at
                ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
                RETURNING *
            """,
                order_data['id'],
                order_data['order_id'],
                order_data['user_id'],
                self._serialize_items(order_data['items']),
                order_data['total_amount'],
                OrderStatus.CREATED.value,
                PaymentStatus.PENDING.value,
                _utcnow()
            )
            return dict(order)

    async def get(self, id: UUID) -> Optional[Dict[str, Any]]:
        async with self.db.pool.acquire() as conn:
            order = await conn.fetchrow("SELECT * FROM orders WHERE id = $1", id)
            return dict(order) if order else None

    async def get_by_code(self, order_code: str) -> Optional[Dict[str, Any]]:
        async with self.db.pool.acquire() as conn:
            order = await conn.fetchrow("SELECT * FROM orders WHERE order_id = $1", order_code)
            return dict(order) if order else None

    @staticmethod
    def _where(user_id: Optional[UUID], status: Optional[OrderStatus]):
        clauses = ["1=1"]
        params: List[Any] = []

        if user_id is not None:
            params.append(user_id)
            clauses.append(f"user_id = ${len(params)}")

        if status is not None:
            params.append(status.value)
            clauses.append(f"status = ${len(params)}")

        return " AND ".join(clauses), params

    async def list(self, user_id: Optional[UUID], status: Optional[OrderStatus],
                   skip: int, limit: int) -> List[Dict[str, Any]]:
        where, params = self._where(user_id, status)
        query = f"""
            SELECT *
            FROM orders
            WHERE {where}
            ORDER BY created_at DESC
            OFFSET ${len(params) + 1}
            LIMIT ${len(params) + 2}
        """
        async with self.db.pool.acquire() as conn:
            orders = await conn.fetch(query, *params, skip, limit)
            return [dict(order) for order in orders]

    async def count(self, user_id: Optional[UUID], status: Optional[OrderStatus]) -> int:
        where, params = self._where(user_id, status)
        async with self.db.pool.acquire() as conn:
            count = await conn.fetchval(f"SELECT COUNT(*) FROM orders WHERE {where}", *params)
            return count or 0

    async def record_payment(self, id: UUID, payment_status: PaymentStatus,
                             status: OrderStatus) -> Optional[Dict[str, Any]]:
        async with self.db.pool.acquire() as conn:
            order = await conn.fetchrow("""
                UPDATE orders
                SET payment_status = $1,
                    status = $2,
                    updated_at = CURRENT_TIMESTAMP
                WHERE id = $3 AND status = $4 AND payment_status = $5
                RETURNING *
            """,
                payment_status.value,
                status.value,
                id,
                OrderStatus.CREATED.value,
                PaymentStatus.PENDING.value
            )
            return dict(order) if order else None

    async def cancel(self, id: UUID) -> Optional[Dict[str, Any]]:
        async with self.db.pool.acquire() as conn:
            order = await conn.fetchrow("""
                UPDATE orders
                SET status = $1,
                    updated_at = CURRENT_TIMESTAMP
                WHERE id = $2
                    AND payment_status <> $3
                    AND NOT (status = ANY($4::text[]))
                RETURNING *
            """,
                OrderStatus.CANCELLED.value,
                id,
                PaymentStatus.FAILED.value,
                [s.value for s in TERMINAL_STATUSES]
            )
            return dict(order) if order else None

class PostgresUserRepository:
    def __init__(self, db):
        self.db = db
        self.logger = logging.getLogger(__name__)

    async def create(self, user_data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            async with self.db.pool.acquire() as conn:
                user = await conn.fetchrow("""
                    INSERT INTO users (
                        user_id, name, email, password_hash, role, created_at
                    ) VALUES ($1, $2, $3, $4, $5, $6)
                    RETURNING *
                """,
                    user_data['user_id'],
                    user_data['name'],
                    user_data['email'],
                    user_data['password_hash'],
                    user_data['role'],
                    _utcnow()
                )
                return dict(user)
        except asyncpg.UniqueViolationError as e:
            self.logger.info(f"Duplicate user rejected: {e.constraint_name}")
            raise DuplicateKeyError("Email already registered") from e

    async def get(self, user_id: UUID) -> Optional[Dict[str, Any]]:
        async with self.db.pool.acquire() as conn:
            user = await conn.fetchrow("SELECT * FROM users WHERE user_id = $1", user_id)
            return dict(user) if user else None

    async def get_many(self, user_ids: Iterable[UUID]) -> Dict[UUID, Dict[str, Any]]:
        ids = list(set(user_ids))
        if not ids:
            return {}
        async with self.db.pool.acquire() as conn:
            users = await conn.fetch(
                "SELECT * FROM users WHERE user_id = ANY($1::uuid[])", ids
            )
            return {u['user_id']: dict(u) for u in users}

    async def get_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        async with self.db.pool.acquire() as conn:
            user = await conn.fetchrow("SELECT * FROM users WHERE email = $1", email)
            return dict(user) if user else None
