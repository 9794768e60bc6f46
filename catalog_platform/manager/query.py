"""
List query construction for GET /products.

Turns raw query-string values into a validated `ListQuery`: a name filter,
optional price bounds and pagination. Nothing here touches storage; the
manager runs the query against whatever store it was given.

Parsing rules:
    - page / limit: leading integer of the value ("2.7" -> 2, "3abc" -> 3);
      anything unparseable falls back to the default; then floored to >= 1.
    - name: empty or missing means "no name filter"; otherwise a literal,
      case-insensitive substring.
    - minPrice / maxPrice: optional floats; a non-numeric value is an error;
      minPrice > maxPrice is an error.
"""

import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..errors import ValidationError

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class ProductFilter:
    """Record filter: name substring (case-insensitive) and inclusive price bounds."""
    name_contains: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None

    def matches(self, name: str, price: float) -> bool:
        if self.name_contains and self.name_contains.lower() not in name.lower():
            return False
        if self.min_price is not None and price < self.min_price:
            return False
        if self.max_price is not None and price > self.max_price:
            return False
        return True


@dataclass(frozen=True)
class ListQuery:
    """Request-scoped filter + pagination window. Never persisted."""
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    filter: ProductFilter = field(default_factory=ProductFilter)

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    def total_pages(self, total_count: int) -> int:
        return math.ceil(total_count / self.limit)

    def envelope(self, total_count: int, data: list) -> Dict[str, Any]:
        return {
            "totalProducts": total_count,
            "page": self.page,
            "limit": self.limit,
            "totalPages": self.total_pages(total_count),
            "data": data,
        }


def _parse_int(raw: Any, default: int) -> int:
    if raw is None:
        return default
    if isinstance(raw, bool):
        return default
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if math.isfinite(raw) else default
    match = _LEADING_INT.match(str(raw))
    return int(match.group(1)) if match else default


def _parse_price(name: str, raw: Any) -> Optional[float]:
    if raw is None:
        return None
    if isinstance(raw, str) and not raw.strip():
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f"{name} must be a number")
    if math.isnan(value):
        raise ValidationError(f"{name} must be a number")
    return value


def build_list_query(
    page: Any = None,
    limit: Any = None,
    name: Optional[str] = None,
    min_price: Any = None,
    max_price: Any = None,
    default_limit: int = DEFAULT_LIMIT,
) -> ListQuery:
    """
    Build a `ListQuery` from raw request parameters.

    Raises:
        ValidationError: If a price bound is not numeric, or minPrice > maxPrice.
    """
    low = _parse_price("minPrice", min_price)
    high = _parse_price("maxPrice", max_price)
    if low is not None and high is not None and low > high:
        raise ValidationError("minPrice cannot be greater than maxPrice")

    return ListQuery(
        page=max(1, _parse_int(page, DEFAULT_PAGE)),
        limit=max(1, _parse_int(limit, max(1, default_limit))),
        filter=ProductFilter(
            name_contains=name if name else None,
            min_price=low,
            max_price=high,
        ),
    )
