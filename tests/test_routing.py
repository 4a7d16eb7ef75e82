"""Tests for route matching: path IDs, unsupported methods and unknown paths."""
import pytest
from fastapi.testclient import TestClient

from app.api.exception_handlers import describe_validation_error
from app.repositories.product_repository import ProductRepository


@pytest.mark.parametrize(
    "segment",
    ["abc", "1.5", "12abc", "99999999999999999999", str(-(2 ** 63) - 1)],
)
def test_invalid_id_is_bad_request(client, segment):
    """Test a non-integer ID segment is rejected before the handler runs."""
    response = client.get(f"/products/{segment}")

    assert response.status_code == 400
    assert response.json() == {"code": 400, "message": "invalid id"}


def test_trailing_slash_is_invalid_id(client):
    """Test `/products/` is not redirected to the collection."""
    response = client.get("/products/", follow_redirects=False)

    assert response.status_code == 400
    assert response.json() == {"code": 400, "message": "invalid id"}


def test_invalid_id_checked_before_body(client):
    """Test the path ID is reported even when the body is also invalid."""
    response = client.put("/products/abc", json={"name": "", "price": 0, "stock": -1})

    assert response.status_code == 400
    assert response.json()["message"] == "invalid id"


@pytest.mark.parametrize(
    "method, path",
    [
        ("post", "/health"),
        ("delete", "/products"),
        ("put", "/products"),
        ("post", "/products/1"),
        ("put", "/products/search"),
        ("get", "/products/bulk"),
        ("delete", "/products/bulk"),
        ("post", "/products/"),
    ],
)
def test_method_not_allowed(client, method, path):
    """Test a known path with an unsupported method returns 405."""
    response = client.request(method.upper(), path)

    assert response.status_code == 405
    body = response.json()
    assert body["code"] == 405
    assert "message" in body
    assert "allow" in response.headers


def test_reserved_words_are_not_ids(client):
    """Test a name that merely starts with a reserved word is still an ID segment."""
    response = client.get("/products/searching")

    assert response.status_code == 400
    assert response.json()["message"] == "invalid id"


def test_unknown_path(client):
    """Test an unregistered path returns a 404 envelope."""
    response = client.get("/orders")

    assert response.status_code == 404
    assert response.json()["code"] == 404


def test_unexpected_error_is_500_envelope(app, client, monkeypatch):
    """Test an error no handler knows about still leaves as a JSON envelope."""
    def broken(self):
        raise OverflowError("Python int too large to convert to SQLite INTEGER")

    monkeypatch.setattr(ProductRepository, "get_all", broken)
    # The server error middleware re-raises after responding
    raw_client = TestClient(app, raise_server_exceptions=False)

    response = raw_client.get("/products")

    assert response.status_code == 500
    assert response.json() == {"code": 500, "message": "internal server error"}


def test_response_is_json(client):
    """Test responses are served as JSON."""
    response = client.get("/products")

    assert response.headers["content-type"].startswith("application/json")


@pytest.mark.parametrize(
    "error, message",
    [
        ({"type": "int_parsing", "loc": ("path", "product_id"), "msg": "x"}, "invalid id"),
        ({"type": "json_invalid", "loc": ("body", 7), "msg": "JSON decode error"}, "invalid JSON body"),
        ({"type": "missing", "loc": ("body", "stock"), "msg": "Field required"}, "stock is required"),
        ({"type": "missing", "loc": ("body",), "msg": "Field required"}, "request body is required"),
        (
            {"type": "value_error", "loc": ("body", 2, "name"), "msg": "Value error, name is required"},
            "products[2].name is required",
        ),
        (
            {"type": "int_type", "loc": ("body", "stock"), "msg": "Input should be a valid integer"},
            "stock: Input should be a valid integer",
        ),
    ],
)
def test_describe_validation_error(error, message):
    """Test pydantic errors are turned into field-naming messages."""
    assert describe_validation_error(error) == message
