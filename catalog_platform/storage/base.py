"""
Base storage interfaces for the Catalog Platform.

Purpose:
    Define two small, stable contracts (products and user credentials) that
    multiple backends (in-memory, Postgres) implement without requiring
    changes to the manager or API code.

Conventions:
    - Ids passed in are already validated `DocumentId`s; stores never parse
      untrusted input.
    - "Not found" is signalled with None / False / 0, never an exception.
    - Backend failures are raised as `StoreError`; a taken username as
      `DuplicateUsername`.

Testing & Coverage:
    These are abstract methods and are not executed directly in tests.
    We annotate them with `# pragma: no cover` so coverage tools don't
    penalize the project for un-runnable abstract declarations.
"""

from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Sequence

from ..manager.query import ProductFilter
from ..models.identifiers import DocumentId
from ..models.product import Product, ProductFields
from ..models.user import User


class BaseCatalogStore(ABC):
    """Abstract base class for product storage backends."""

    @abstractmethod  # pragma: no cover
    def create_product(self, fields: ProductFields) -> Product:
        """Persist a new product and return the stored record (with id and timestamps)."""
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def get_product(self, product_id: DocumentId) -> Optional[Product]:
        """Return the product with this id, or None."""
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def update_product(
        self,
        product_id: DocumentId,
        merge: Callable[[ProductFields], ProductFields],
    ) -> Optional[Product]:
        """
        Atomically read-merge-write one product and refresh `updated_at`.

        `merge` receives the current fields and returns the new ones. It runs
        while the record is locked, so concurrent partial updates never lose
        each other's changes. Exceptions raised by `merge` abort the update
        and propagate unchanged.

        Returns:
            Optional[Product]: The updated record, or None if the id is unknown
            (`merge` is not called).
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def delete_product(self, product_id: DocumentId) -> bool:
        """Delete one product. Returns False if nothing was deleted."""
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def delete_products(self, product_ids: Sequence[DocumentId]) -> int:
        """
        Delete every product whose id is in `product_ids`.

        Returns:
            int: Number of records actually deleted (unknown ids are skipped).
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def count_products(self, product_filter: ProductFilter) -> int:
        """Count products matching the filter."""
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def find_products(self, product_filter: ProductFilter, skip: int, limit: int) -> List[Product]:
        """Return matching products in natural (creation) order, paginated."""
        raise NotImplementedError


class BaseCredentialStore(ABC):
    """Abstract base class for user credential storage backends."""

    @abstractmethod  # pragma: no cover
    def create_user(self, username: str, password_hash: str) -> User:
        """
        Persist a new user.

        Raises:
            DuplicateUsername: If the username is already taken.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def get_user_by_username(self, username: str) -> Optional[User]:
        """Return the user with this username, or None."""
        raise NotImplementedError
