# test_http_api.py
import json

import httpx
import pytest

from storefront.schemas import OrderStatus, ProductFilters
from storefront.services.api import AuthContext, HttpStorefrontAPI, ResultStatus
from tests.conftest import run

BASE = "http://api.test"


def make_api(handler):
    return HttpStorefrontAPI(base_url=BASE, timeout=5, transport=httpx.MockTransport(handler))


def test_list_products_sends_filters_and_skips_bad_records():
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json=[
            {"_id": "1", "name": "Classic Burger", "price": 4500, "category": "hamburgers"},
            {"_id": "2", "name": "Broken", "price": -1, "category": "hamburgers"},
        ])

    result = run(make_api(handler).list_products(ProductFilters(search="burger", category="hamburgers")))

    assert result.success
    assert [p.name for p in result.data] == ["Classic Burger"]
    assert seen["path"] == "/products"
    assert seen["params"] == {"search": "burger", "category": "hamburgers"}
    assert seen["auth"] is None


def test_admin_listing_sends_token():
    seen = {}

    def handler(request):
        seen["params"] = dict(request.url.params)
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json=[])

    run(make_api(handler).list_products(admin=True, auth=AuthContext(token="abc")))

    assert seen["params"] == {"admin": "true"}
    assert seen["auth"] == "Bearer abc"


def test_unauthorized_discards_token():
    auth = AuthContext(token="expired")
    api = make_api(lambda request: httpx.Response(401, json={"message": "jwt expired"}))

    result = run(api.list_orders(auth))

    assert result.status == ResultStatus.UNAUTHENTICATED
    assert auth.token is None


def test_server_error_message_is_surfaced():
    api = make_api(lambda request: httpx.Response(500, json={"message": "Database unavailable"}))
    result = run(api.get_product("1"))

    assert result.status == ResultStatus.FAILED
    assert result.status_code == 500
    assert result.error_message == "Database unavailable"


def test_network_error_is_a_failure():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    result = run(make_api(handler).list_products())
    assert result.status == ResultStatus.FAILED
    assert result.status_code is None


def test_create_order_reads_assigned_id():
    seen = {}

    def handler(request):
        seen["body"] = json.loads(request.content)
        return httpx.Response(201, json={"orderId": 42, "status": "pending", "total": 4500})

    payload = {
        "items": [{"name": "Burger", "quantity": 1, "price": 4500}],
        "customer": {"name": "Ana", "deliveryType": "pickup"},
        "total": 4500,
        "status": "pending",
    }
    result = run(make_api(handler).create_order(payload))

    assert result.data.id == "42"
    assert seen["body"] == payload


def test_status_update_and_patches():
    requests = []

    def handler(request):
        requests.append((request.method, request.url.path, json.loads(request.content)))
        if request.url.path.startswith("/orders"):
            return httpx.Response(200, json={"_id": "ORD-1", "status": "ready"})
        return httpx.Response(200, json={"_id": "p1", "name": "Pizza", "price": 1, "category": "pizzas"})

    api = make_api(handler)
    auth = AuthContext(token="t")
    run(api.update_order_status("ORD-1", OrderStatus.READY, auth))
    run(api.set_published("p1", False, auth))
    run(api.set_out_of_stock("p1", True, auth))

    assert requests == [
        ("PUT", "/orders/ORD-1/status", {"status": "ready"}),
        ("PUT", "/products/p1", {"published": False}),
        ("PUT", "/products/p1", {"sinStock": True}),
    ]


def test_login_stores_token():
    auth = AuthContext()
    api = make_api(lambda request: httpx.Response(200, json={"token": "fresh"}))
    assert run(api.login("admin", "secret", auth)).success
    assert auth.token == "fresh"


def test_login_rejected():
    auth = AuthContext()
    api = make_api(lambda request: httpx.Response(401, json={"message": "bad credentials"}))
    result = run(api.login("admin", "nope", auth))
    assert result.status == ResultStatus.FAILED
    assert result.error_message == "Invalid username or password"


def test_requires_base_url(monkeypatch):
    from storefront.core.config import get_settings

    monkeypatch.setenv("API_BASE_URL", "")
    get_settings.cache_clear()
    with pytest.raises(ValueError, match="API_BASE_URL"):
        HttpStorefrontAPI()
