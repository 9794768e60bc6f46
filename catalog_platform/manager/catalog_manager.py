"""
CatalogManager module for the Catalog Platform.

Responsibilities:
    - Translate request parameters into a validated filter + pagination query
    - Validate identifiers and product payloads before touching storage
    - Run the operation against the injected catalog store
    - Shape records for the API (`{id, name, price, quantity}`)

Design notes:
    - Storage is an injected dependency; the manager never knows which
      backend it talks to.
    - Every failure is raised as a `CatalogError` subclass carrying its HTTP
      status, so the API layer needs a single exception handler.
    - Bulk delete validates every id before any deletion starts.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from ..errors import NotFound, OutOfRange, ValidationError
from ..models.identifiers import DocumentId, is_valid, parse_document_id
from ..models.product import Product, ProductFields, validate_product, validate_product_update
from ..storage.base import BaseCatalogStore
from .query import DEFAULT_LIMIT, ListQuery, build_list_query

log = logging.getLogger("catalog.manager")

PRODUCT_NOT_FOUND = "Product not found"


class CatalogManager:
    """Coordinates validation, querying and shaping for product operations."""

    def __init__(self, storage: BaseCatalogStore, default_limit: int = DEFAULT_LIMIT):
        """
        Initialize CatalogManager with a storage backend.

        Args:
            storage (BaseCatalogStore): Backend product store.
            default_limit (int): Page size used when the request gives none.
        """
        self.storage = storage
        self.default_limit = max(1, default_limit)

    # ---------------------------------------------------------------------
    # Helpers
    # ---------------------------------------------------------------------
    @staticmethod
    def shape(product: Product) -> Dict[str, Any]:
        return product.to_public()

    def _require(self, product_id: DocumentId) -> Product:
        product = self.storage.get_product(product_id)
        if product is None:
            raise NotFound(PRODUCT_NOT_FOUND)
        return product

    # ---------------------------------------------------------------------
    # Queries
    # ---------------------------------------------------------------------
    def build_query(self, params: Mapping[str, Any]) -> ListQuery:
        """Build a ListQuery from raw query-string params (camelCase keys)."""
        return build_list_query(
            page=params.get("page"),
            limit=params.get("limit"),
            name=params.get("name"),
            min_price=params.get("minPrice"),
            max_price=params.get("maxPrice"),
            default_limit=self.default_limit,
        )

    def list(self, params: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """
        List products with filtering and pagination.

        Args:
            params: Raw request params: page, limit, name, minPrice, maxPrice.

        Returns:
            dict: Envelope `{totalProducts, page, limit, totalPages, data}`.

        Raises:
            ValidationError: Non-numeric price bound, or minPrice > maxPrice.
            OutOfRange: Page past the last page (when there is at least one page).
        """
        query = self.build_query(params or {})
        total = self.storage.count_products(query.filter)
        total_pages = query.total_pages(total)

        if query.page > total_pages and total_pages > 0:
            raise OutOfRange(
                f"Page {query.page} is out of bounds. There are only {total_pages} pages."
            )

        products = self.storage.find_products(query.filter, skip=query.skip, limit=query.limit)
        return query.envelope(total, [self.shape(p) for p in products])

    def get_by_id(self, raw_id: Any) -> Dict[str, Any]:
        """Return one shaped product. Raises InvalidId or NotFound."""
        return self.shape(self._require(parse_document_id(raw_id)))

    # ---------------------------------------------------------------------
    # Mutations
    # ---------------------------------------------------------------------
    def create(self, payload: Any) -> Dict[str, Any]:
        """Validate and persist a new product. Raises ValidationError."""
        result = validate_product(payload)
        if not result.ok:
            raise ValidationError(result.message)
        product = self.storage.create_product(result.value)
        log.info("Product created id=%s name=%r", product.id, product.name)
        return self.shape(product)

    def update_by_id(self, raw_id: Any, changes: Any) -> Dict[str, Any]:
        """
        Merge a partial update into an existing product.

        Fields absent from `changes` keep their current values; the merged
        record is validated as a whole before it is saved. The merge runs
        inside the store's update lock, so it always starts from the
        latest saved version.

        Raises:
            InvalidId, NotFound, ValidationError
        """
        product_id = parse_document_id(raw_id)

        def _merge(current: ProductFields) -> ProductFields:
            result = validate_product_update(current, changes)
            if not result.ok:
                raise ValidationError(result.message)
            return result.value

        updated = self.storage.update_product(product_id, _merge)
        if updated is None:
            raise NotFound(PRODUCT_NOT_FOUND)
        log.info("Product updated id=%s", product_id)
        return self.shape(updated)

    def delete_by_id(self, raw_id: Any) -> None:
        """Delete one product. Raises InvalidId or NotFound."""
        product_id = parse_document_id(raw_id)
        if not self.storage.delete_product(product_id):
            raise NotFound(PRODUCT_NOT_FOUND)
        log.info("Product deleted id=%s", product_id)

    def delete_many(self, ids: Any) -> int:
        """
        Delete a batch of products.

        Every id is validated before anything is deleted: one malformed id
        rejects the whole batch.

        Returns:
            int: Number of products deleted.

        Raises:
            ValidationError: `ids` is not a list, or contains a malformed id.
            NotFound: None of the ids matched a product.
        """
        if not isinstance(ids, list):
            raise ValidationError("IDs should be an array")

        if not all(is_valid(raw_id) for raw_id in ids):
            raise ValidationError("Some IDs are invalid")
        product_ids: List[DocumentId] = [parse_document_id(raw_id) for raw_id in ids]

        deleted = self.storage.delete_products(product_ids)
        if deleted == 0:
            raise NotFound("No products found to delete")
        log.info("Bulk delete removed %d of %d requested products", deleted, len(product_ids))
        return deleted
