# storefront/utils/identifiers.py
import secrets
import time
from typing import Any
from uuid import UUID
from ..errors import InvalidReferenceError

def parse_uuid(value: Any, entity: str) -> UUID:
    """Parse a path/body identifier, raising InvalidReferenceError if malformed"""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (TypeError, ValueError):
        raise InvalidReferenceError(entity, str(value)) from None

def generate_order_code() -> str:
    """Externally visible order code, e.g. ORD-1714000000000-3FA2C1"""
    return f"ORD-{int(time.time() * 1000)}-{secrets.token_hex(3).upper()}"
