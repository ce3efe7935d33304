# storefront/utils/pagination.py
import math
from typing import Any, Dict, Optional, Tuple

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10

def _safe_int(value: Optional[Any], default: int) -> int:
    """Parse a query value, falling back to the default instead of failing"""
    if value is None:
        return default
    try:
        parsed = int(str(value).strip())
    except (TypeError, ValueError):
        return default
    return parsed if parsed >= 1 else default

def parse_pagination(page: Optional[Any], limit: Optional[Any]) -> Tuple[int, int]:
    """Return a 1-indexed (page, limit) pair"""
    return _safe_int(page, DEFAULT_PAGE), _safe_int(limit, DEFAULT_LIMIT)

def offset(page: int, limit: int) -> int:
    return (page - 1) * limit

def pagination_info(page: int, limit: int, total: int) -> Dict[str, int]:
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit)
    }
