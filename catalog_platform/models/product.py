"""
Product model and explicit validation.

Validation is done up front, when a product is built from request data,
instead of relying on implicit coercion by the web framework or the store.
`validate_product()` returns a `ValidationResult`; callers decide what to do
with a failure (the manager turns it into a `ValidationError`).

Rules:
    - name      required string, trimmed, non-empty after trimming
    - price     required number >= 0 (numeric strings like "9.99" accepted)
    - quantity  required integer, 0 <= quantity <= MAX_QUANTITY (a Postgres
                BIGINT); "5" and 5.0 accepted, 2.5 rejected
    - booleans are never accepted as numbers
    - unknown keys are ignored
"""

import math
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, Generic, List, Mapping, Optional, Tuple, TypeVar

from .identifiers import DocumentId

PRODUCT_FIELDS = ("name", "price", "quantity")
MAX_QUANTITY = 2**63 - 1

T = TypeVar("T")


@dataclass(frozen=True)
class ValidationResult(Generic[T]):
    """Outcome of a validation step: a value, or a list of error messages."""
    value: Optional[T] = None
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def message(self) -> str:
        return "; ".join(self.errors)


@dataclass(frozen=True)
class ProductFields:
    """The user-editable part of a product, already validated."""
    name: str
    price: float
    quantity: int


@dataclass(frozen=True)
class Product:
    """A stored product record."""
    id: DocumentId
    name: str
    price: float
    quantity: int
    created_at: datetime
    updated_at: datetime

    @property
    def fields(self) -> ProductFields:
        return ProductFields(name=self.name, price=self.price, quantity=self.quantity)

    def with_fields(self, fields: ProductFields, updated_at: datetime) -> "Product":
        return replace(
            self,
            name=fields.name,
            price=fields.price,
            quantity=fields.quantity,
            updated_at=updated_at,
        )

    def to_public(self) -> Dict[str, Any]:
        """Shaped record: only public fields, numbers as numbers, id as string."""
        return {
            "id": str(self.id),
            "name": self.name,
            "price": float(self.price),
            "quantity": int(self.quantity),
        }


# ---------------------------------------------------------------------
# Field validators
# ---------------------------------------------------------------------

def _number(name: str, value: Any) -> Tuple[Optional[float], Optional[str]]:
    if value is None:
        return None, f"{name} is required"
    if isinstance(value, bool):
        return None, f"{name} must be a number"
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None, f"{name} must be a number"
    elif isinstance(value, str) and value.strip():
        try:
            number = float(value.strip())
        except ValueError:
            return None, f"{name} must be a number"
    else:
        return None, f"{name} must be a number"
    if not math.isfinite(number):
        return None, f"{name} must be a number"
    if number < 0:
        return None, f"{name} must be greater than or equal to 0"
    return number, None


def _validate_name(value: Any) -> Tuple[Optional[str], Optional[str]]:
    if value is None:
        return None, "name is required"
    if not isinstance(value, str):
        return None, "name must be a string"
    trimmed = value.strip()
    if not trimmed:
        return None, "name is required"
    return trimmed, None


def _validate_price(value: Any) -> Tuple[Optional[float], Optional[str]]:
    return _number("price", value)


def _validate_quantity(value: Any) -> Tuple[Optional[int], Optional[str]]:
    number, error = _number("quantity", value)
    if error:
        return None, error
    if not float(number).is_integer():
        return None, "quantity must be an integer"
    quantity = value if isinstance(value, int) else int(number)
    if quantity > MAX_QUANTITY:
        return None, f"quantity must be less than or equal to {MAX_QUANTITY}"
    return quantity, None


# ---------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------

def validate_product(data: Any) -> ValidationResult[ProductFields]:
    """
    Validate a full product payload.

    Args:
        data: Decoded JSON body (expected to be an object).

    Returns:
        ValidationResult[ProductFields]: `value` set when every field is valid,
        otherwise `errors` lists one message per failing field.
    """
    if not isinstance(data, Mapping):
        return ValidationResult(errors=["Product payload must be a JSON object"])

    name, name_error = _validate_name(data.get("name"))
    price, price_error = _validate_price(data.get("price"))
    quantity, quantity_error = _validate_quantity(data.get("quantity"))

    errors = [e for e in (name_error, price_error, quantity_error) if e]
    if errors:
        return ValidationResult(errors=errors)
    return ValidationResult(value=ProductFields(name=name, price=price, quantity=quantity))


def validate_product_update(existing: ProductFields, changes: Any) -> ValidationResult[ProductFields]:
    """
    Merge a partial update into an existing product and re-validate the result.

    Only known fields present in `changes` replace the existing values;
    everything else is preserved.
    """
    if not isinstance(changes, Mapping):
        return ValidationResult(errors=["Product payload must be a JSON object"])

    merged: Dict[str, Any] = {
        "name": existing.name,
        "price": existing.price,
        "quantity": existing.quantity,
    }
    for key in PRODUCT_FIELDS:
        if key in changes:
            merged[key] = changes[key]
    return validate_product(merged)
