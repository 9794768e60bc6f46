"""
Storage module for the Catalog Platform (in-memory implementation).

Responsibilities:
    - Keep product records and user credentials in process memory
    - Answer filtered, paginated product queries in insertion order
    - Enforce username uniqueness

Design:
    - In-memory reference implementation of the `BaseCatalogStore` and
      `BaseCredentialStore` contracts.
    - Dicts preserve insertion order, which is the store's natural order.
    - Route handlers run in a threadpool, so every access goes through a lock.
      `delete_products` holds the lock for the whole batch and is therefore
      all-or-nothing with respect to concurrent readers. `update_product`
      runs its merge under the lock too, so partial updates never interleave.
    - For production, use the Postgres backend (`db_storage.py`); the manager
      and API code do not change.
"""

import threading
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Sequence

from ..errors import DuplicateUsername
from ..manager.query import ProductFilter
from ..models.identifiers import DocumentId, new_document_id
from ..models.product import Product, ProductFields
from ..models.user import User
from .base import BaseCatalogStore, BaseCredentialStore


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Storage(BaseCatalogStore):
    def __init__(self, id_factory: Callable[[], DocumentId] = new_document_id):
        """
        Initialize an empty product store.

        Internal schema:
            self.products = { product_id: Product }
        """
        self.products: Dict[DocumentId, Product] = {}
        self._id_factory = id_factory
        self._lock = threading.Lock()

    def create_product(self, fields: ProductFields) -> Product:
        now = _utcnow()
        product = Product(
            id=self._id_factory(),
            name=fields.name,
            price=fields.price,
            quantity=fields.quantity,
            created_at=now,
            updated_at=now,
        )
        with self._lock:
            self.products[product.id] = product
        return product

    def get_product(self, product_id: DocumentId) -> Optional[Product]:
        with self._lock:
            return self.products.get(product_id)

    def update_product(
        self,
        product_id: DocumentId,
        merge: Callable[[ProductFields], ProductFields],
    ) -> Optional[Product]:
        with self._lock:
            existing = self.products.get(product_id)
            if existing is None:
                return None
            updated = existing.with_fields(merge(existing.fields), updated_at=_utcnow())
            self.products[product_id] = updated
            return updated

    def delete_product(self, product_id: DocumentId) -> bool:
        with self._lock:
            return self.products.pop(product_id, None) is not None

    def delete_products(self, product_ids: Sequence[DocumentId]) -> int:
        deleted = 0
        with self._lock:
            for product_id in set(product_ids):
                if self.products.pop(product_id, None) is not None:
                    deleted += 1
        return deleted

    def count_products(self, product_filter: ProductFilter) -> int:
        with self._lock:
            return sum(1 for p in self.products.values() if product_filter.matches(p.name, p.price))

    def find_products(self, product_filter: ProductFilter, skip: int, limit: int) -> List[Product]:
        with self._lock:
            matching = [p for p in self.products.values() if product_filter.matches(p.name, p.price)]
        return matching[skip:skip + limit]


class CredentialStorage(BaseCredentialStore):
    def __init__(self, id_factory: Callable[[], DocumentId] = new_document_id):
        """
        Initialize an empty credential store.

        Internal schema:
            self.users = { username: User }
        """
        self.users: Dict[str, User] = {}
        self._id_factory = id_factory
        self._lock = threading.Lock()

    def create_user(self, username: str, password_hash: str) -> User:
        now = _utcnow()
        with self._lock:
            if username in self.users:
                raise DuplicateUsername("Username already exists")
            user = User(
                id=self._id_factory(),
                username=username,
                password_hash=password_hash,
                created_at=now,
                updated_at=now,
            )
            self.users[username] = user
        return user

    def get_user_by_username(self, username: str) -> Optional[User]:
        with self._lock:
            return self.users.get(username)
