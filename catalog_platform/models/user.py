"""
User model and credential validation.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Tuple

from .identifiers import DocumentId
from .product import ValidationResult


@dataclass(frozen=True)
class Credentials:
    """Validated registration/login input. `password` is the plain text."""
    username: str
    password: str


@dataclass(frozen=True)
class User:
    """A stored user. Only the password hash is ever kept."""
    id: DocumentId
    username: str
    password_hash: str
    created_at: datetime
    updated_at: datetime

    def to_public(self) -> Dict[str, Any]:
        return {"id": str(self.id), "username": self.username}


def _validate_username(value: Any) -> Tuple[Optional[str], Optional[str]]:
    if not isinstance(value, str) or not value.strip():
        return None, "username is required"
    return value.strip(), None


def _validate_password(value: Any) -> Tuple[Optional[str], Optional[str]]:
    if not isinstance(value, str) or not value:
        return None, "password is required"
    return value, None


def validate_credentials(data: Any) -> ValidationResult[Credentials]:
    """Validate a `{username, password}` payload (username is trimmed)."""
    if not isinstance(data, Mapping):
        return ValidationResult(errors=["Credentials payload must be a JSON object"])

    username, username_error = _validate_username(data.get("username"))
    password, password_error = _validate_password(data.get("password"))
    errors = [e for e in (username_error, password_error) if e]
    if errors:
        return ValidationResult(errors=errors)
    return ValidationResult(value=Credentials(username=username, password=password))
