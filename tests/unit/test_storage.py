"""
Unit tests for the in-memory stores.

Covers:
    - create/get/update/delete of products (found & not found)
    - delete_products (partial matches, unknown ids, duplicates in the batch)
    - count/find with filters, natural order and skip/limit
    - credential store: create, lookup, username uniqueness
"""

import threading
from dataclasses import replace

import pytest

from catalog_platform.errors import DuplicateUsername, ValidationError
from catalog_platform.manager.query import ProductFilter
from catalog_platform.models.product import ProductFields
from catalog_platform.storage.storage import CredentialStorage, Storage

MISSING_ID = "000000000000000000000000"


@pytest.fixture
def storage():
    """Fresh storage instance per test."""
    return Storage()


def _add(storage, name="Widget", price=9.99, quantity=5):
    return storage.create_product(ProductFields(name=name, price=price, quantity=quantity))


def test_create_and_get_product(storage):
    product = _add(storage)
    assert len(product.id) == 24
    assert product.created_at == product.updated_at
    assert storage.get_product(product.id) == product


def test_get_product_not_found(storage):
    assert storage.get_product(MISSING_ID) is None


def test_update_product_replaces_fields_and_touches_updated_at(storage):
    product = _add(storage)
    updated = storage.update_product(product.id, lambda current: ProductFields(name="Gadget", price=1.0, quantity=0))
    assert updated.id == product.id
    assert (updated.name, updated.price, updated.quantity) == ("Gadget", 1.0, 0)
    assert updated.created_at == product.created_at
    assert updated.updated_at >= product.updated_at
    assert storage.get_product(product.id) == updated


def test_update_product_not_found_skips_merge(storage):
    calls = []
    assert storage.update_product(MISSING_ID, calls.append) is None
    assert calls == []


def test_update_product_merge_error_leaves_record_unchanged(storage):
    product = _add(storage)

    def _reject(current):
        raise ValidationError("price must be a number")

    with pytest.raises(ValidationError):
        storage.update_product(product.id, _reject)
    assert storage.get_product(product.id) == product


def test_overlapping_updates_keep_both_changes(storage):
    """
    A second partial update started while the first is mid-merge must see
    the first one's result, not the record as it was before.
    """
    product = _add(storage, price=1, quantity=1)
    first_merging = threading.Event()
    release_first = threading.Event()
    seen_by_second = []

    def _set_price(current):
        first_merging.set()
        release_first.wait(timeout=5)
        return replace(current, price=5.0)

    def _set_quantity(current):
        seen_by_second.append(current)
        return replace(current, quantity=99)

    first = threading.Thread(target=storage.update_product, args=(product.id, _set_price))
    second = threading.Thread(target=storage.update_product, args=(product.id, _set_quantity))
    first.start()
    assert first_merging.wait(timeout=5)
    second.start()
    release_first.set()
    first.join(timeout=5)
    second.join(timeout=5)

    final = storage.get_product(product.id)
    assert (final.price, final.quantity) == (5.0, 99)
    assert seen_by_second[0].price == 5.0


def test_delete_product(storage):
    product = _add(storage)
    assert storage.delete_product(product.id) is True
    assert storage.get_product(product.id) is None
    assert storage.delete_product(product.id) is False


def test_delete_products_counts_only_existing(storage):
    a, b, c = _add(storage, "a"), _add(storage, "b"), _add(storage, "c")
    deleted = storage.delete_products([a.id, b.id, MISSING_ID, a.id])
    assert deleted == 2
    assert storage.get_product(c.id) is not None
    assert storage.delete_products([MISSING_ID]) == 0


def test_count_and_find_with_filter(storage):
    _add(storage, "Red Widget", price=5)
    _add(storage, "Blue widget", price=15)
    _add(storage, "Lamp", price=8)

    f = ProductFilter(name_contains="WIDGET")
    assert storage.count_products(f) == 2
    assert [p.name for p in storage.find_products(f, skip=0, limit=10)] == ["Red Widget", "Blue widget"]

    f = ProductFilter(min_price=6, max_price=20)
    assert [p.name for p in storage.find_products(f, skip=0, limit=10)] == ["Blue widget", "Lamp"]


def test_find_paginates_in_insertion_order(storage):
    names = [f"p{i}" for i in range(7)]
    for n in names:
        _add(storage, n)
    everything = ProductFilter()
    assert [p.name for p in storage.find_products(everything, skip=0, limit=3)] == names[0:3]
    assert [p.name for p in storage.find_products(everything, skip=3, limit=3)] == names[3:6]
    assert [p.name for p in storage.find_products(everything, skip=6, limit=3)] == names[6:]
    assert storage.find_products(everything, skip=9, limit=3) == []


def test_custom_id_factory_is_used():
    ids = iter(["a" * 24, "b" * 24])
    storage = Storage(id_factory=lambda: next(ids))
    assert _add(storage).id == "a" * 24
    assert _add(storage).id == "b" * 24


# -------------------------
# Credential store
# -------------------------

def test_create_and_lookup_user():
    creds = CredentialStorage()
    user = creds.create_user("alice", "hash")
    assert creds.get_user_by_username("alice") == user
    assert user.to_public() == {"id": user.id, "username": "alice"}


def test_lookup_unknown_user():
    assert CredentialStorage().get_user_by_username("nobody") is None


def test_username_must_be_unique():
    creds = CredentialStorage()
    creds.create_user("alice", "hash")
    with pytest.raises(DuplicateUsername, match="Username already exists"):
        creds.create_user("alice", "other")
