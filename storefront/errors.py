# storefront/errors.py
from typing import List, Optional

class StorefrontError(Exception):
    """Base exception for all storefront errors; carries its HTTP status"""

    status_code = 500

    def __init__(self, message: str, details: Optional[List[str]] = None):
        self.message = message
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body

class ValidationError(StorefrontError):
    """Raised when request fields are missing or malformed"""

    status_code = 400

    def __init__(self, details: List[str], message: str = "Validation failed"):
        super().__init__(message, details)

class InvalidReferenceError(StorefrontError):
    """Raised when an identifier cannot be parsed"""

    status_code = 400

    def __init__(self, entity: str, value: str):
        self.entity = entity
        self.value = value
        super().__init__(f"Invalid {entity} ID format")

class NotFoundError(StorefrontError):
    """Raised when a product, order or user doesn't exist"""

    status_code = 404

    def __init__(self, entity: str):
        self.entity = entity
        super().__init__(f"{entity} not found")

class ForbiddenError(StorefrontError):
    status_code = 403

    def __init__(self, message: str = "Access denied"):
        super().__init__(message)

class InsufficientStockError(StorefrontError):
    """Raised when an order asks for more units than a product has"""

    status_code = 400

    def __init__(self, product_name: str, available: int):
        self.product_name = product_name
        self.available = available
        super().__init__(f"Insufficient stock for {product_name}. Available: {available}")

class DuplicateKeyError(StorefrontError):
    status_code = 409

    def __init__(self, message: str = "Duplicate entry"):
        super().__init__(message)

class InvalidStateError(StorefrontError):
    """Raised when an order can't make the requested transition"""

    status_code = 400

class AuthError(StorefrontError):
    status_code = 401

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)

class RateLimitError(StorefrontError):
    status_code = 429

    def __init__(self, message: str = "Too many requests, please try again later"):
        super().__init__(message)
