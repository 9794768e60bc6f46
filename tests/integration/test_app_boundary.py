"""
API error-path tests: every failure comes back as JSON {"message": ...}
with the mapped status code.
"""

import pytest

from catalog_platform.errors import StoreError

MISSING_ID = "000000000000000000000000"


def test_min_price_greater_than_max_price(client):
    resp = client.get("/products?minPrice=10&maxPrice=5")
    assert resp.status_code == 400
    assert resp.json() == {"message": "minPrice cannot be greater than maxPrice"}


def test_min_price_greater_than_max_price_regardless_of_other_params(client, auth_headers):
    client.post("/products", json={"name": "A", "price": 7, "quantity": 1}, headers=auth_headers)
    resp = client.get("/products", params={"minPrice": 10, "maxPrice": 5, "page": 1, "name": "A"})
    assert resp.status_code == 400


def test_non_numeric_price_bound(client):
    resp = client.get("/products", params={"minPrice": "cheap"})
    assert resp.status_code == 400
    assert resp.json() == {"message": "minPrice must be a number"}


def test_page_out_of_range(client, auth_headers):
    for i in range(3):
        client.post("/products", json={"name": f"P{i}", "price": 1, "quantity": 1}, headers=auth_headers)
    resp = client.get("/products", params={"page": 3, "limit": 2})
    assert resp.status_code == 400
    assert resp.json() == {"message": "Page 3 is out of bounds. There are only 2 pages."}


@pytest.mark.parametrize("method", ["get", "put", "delete"])
def test_invalid_id_format(client, auth_headers, method):
    kwargs = {"headers": auth_headers}
    if method == "put":
        kwargs["json"] = {"name": "x"}
    resp = getattr(client, method)("/products/not-an-id", **kwargs)
    assert resp.status_code == 400
    assert resp.json() == {"message": "Invalid ID format"}


@pytest.mark.parametrize("method", ["get", "put", "delete"])
def test_unknown_id_is_404(client, auth_headers, method):
    kwargs = {"headers": auth_headers}
    if method == "put":
        kwargs["json"] = {"name": "x"}
    resp = getattr(client, method)(f"/products/{MISSING_ID}", **kwargs)
    assert resp.status_code == 404
    assert resp.json() == {"message": "Product not found"}


@pytest.mark.parametrize(
    "payload",
    [
        {"price": 1, "quantity": 1},
        {"name": "   ", "price": 1, "quantity": 1},
        {"name": "A", "price": -1, "quantity": 1},
        {"name": "A", "price": 1, "quantity": -1},
        {"name": "A", "price": "abc", "quantity": 1},
        ["not", "an", "object"],
    ],
)
def test_create_validation_failures(client, auth_headers, payload):
    resp = client.post("/products", json=payload, headers=auth_headers)
    assert resp.status_code == 400
    assert isinstance(resp.json()["message"], str)
    assert client.get("/products").json()["totalProducts"] == 0


def test_create_with_malformed_json_is_400(client, auth_headers):
    headers = {**auth_headers, "Content-Type": "application/json"}
    resp = client.post("/products", content=b"{not json", headers=headers)
    assert resp.status_code == 400
    assert "message" in resp.json()


def test_update_validation_failure(client, auth_headers):
    created = client.post("/products", json={"name": "A", "price": 1, "quantity": 1}, headers=auth_headers).json()
    resp = client.put(f"/products/{created['id']}", json={"quantity": 1.5}, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.json() == {"message": "quantity must be an integer"}


@pytest.mark.parametrize("body", [{"ids": "abc"}, {"ids": None}, {}, ["a"]])
def test_bulk_delete_requires_array(client, auth_headers, body):
    resp = client.request("DELETE", "/products", json=body, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.json() == {"message": "IDs should be an array"}


def test_bulk_delete_with_one_malformed_id_deletes_nothing(client, auth_headers):
    """
    Validation happens before any mutation: one bad id rejects the whole
    batch and every product survives.
    """
    ids = [
        client.post("/products", json={"name": f"P{i}", "price": 1, "quantity": 1}, headers=auth_headers).json()["id"]
        for i in range(2)
    ]
    resp = client.request("DELETE", "/products", json={"ids": [ids[0], "bad", ids[1]]}, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.json() == {"message": "Some IDs are invalid"}
    assert client.get("/products").json()["totalProducts"] == 2


def test_bulk_delete_nothing_found(client, auth_headers):
    resp = client.request("DELETE", "/products", json={"ids": [MISSING_ID]}, headers=auth_headers)
    assert resp.status_code == 404
    assert resp.json() == {"message": "No products found to delete"}


def test_unknown_route_uses_message_shape(client):
    resp = client.get("/nope")
    assert resp.status_code == 404
    assert resp.json() == {"message": "Not Found"}


def test_store_failure_is_500(client, storage, monkeypatch):
    def _fail(*args, **kwargs):
        raise StoreError("Database error")
    monkeypatch.setattr(storage, "count_products", _fail)
    resp = client.get("/products")
    assert resp.status_code == 500
    assert resp.json() == {"message": "Database error"}


@pytest.mark.parametrize("field", ["price", "quantity"])
def test_number_too_large_for_float_is_400(client, auth_headers, field):
    payload = {"name": "A", "price": 1, "quantity": 1}
    payload[field] = 10**400
    resp = client.post("/products", json=payload, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.json() == {"message": f"{field} must be a number"}


def test_huge_limit_and_page_on_empty_catalog(client):
    resp = client.get("/products", params={"limit": "999999999999999999999", "page": "999999999999999999999"})
    assert resp.status_code == 200
    assert resp.json()["data"] == []
