"""
Mock Catalog API Implementation

In-memory product/order API used in development mode (ENV_MODE=development)
to:
    - Browse, configure and order against a seeded menu offline
    - Exercise the admin flows without a backend
    - Run the simulation script

Behavior:
    - Products are stored as raw records, exactly as the API would persist
      them, option maps included
    - Non-admin fetches return published products only
    - Admin fetches and writes require a token obtained through login();
      an unknown token answers UNAUTHENTICATED and clears the AuthContext
    - Order ids are sequential (ORD-0001, ORD-0002, ...)
    - Optional simulated latency and random 503 failures

Author: Khalil Bannouri
Version: 1.0.0
"""

import asyncio
import copy
import logging
import random
import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import ValidationError

from storefront.schemas import (
    OrderCreate,
    OrderResponse,
    OrderStatus,
    Product,
    ProductFilters,
    TokenResponse,
)
from storefront.services.api.base import ApiResult, AuthContext, BaseStorefrontAPI

logger = logging.getLogger(__name__)


def _choice(name: str, price_modifier: float = 0, is_default: bool = False) -> dict:
    return {"name": name, "priceModifier": price_modifier, "isDefault": is_default}


# Persisted records, in the shape the admin editor saves them
SEED_PRODUCTS: list[dict[str, Any]] = [
    {
        "name": "Classic Burger",
        "description": "Beef patty, cheddar, lettuce and tomato",
        "price": 4500,
        "category": "hamburgers",
        "sinStock": False,
        "published": True,
        "options": {
            "withSide": {
                "enabled": True,
                "choices": [_choice("With fries", 0, True), _choice("Without fries", -800)],
            },
            "type": {
                "enabled": True,
                "choices": [_choice("Classic", 0, True), _choice("Complete", 700)],
            },
            "beverage": {
                "enabled": True,
                "choices": [
                    _choice("None", 0, True),
                    _choice("Cola", 1200),
                    _choice("Lemonade", 1000),
                ],
            },
        },
    },
    {
        "name": "Muzzarella Pizza",
        "description": "Tomato sauce, muzzarella and oregano",
        "price": 8000,
        "category": "pizzas",
        "sinStock": False,
        "published": True,
        "options": {
            "portion": {
                "enabled": True,
                "choices": [_choice("Whole", 0, True), _choice("Half", -3500)],
            },
        },
    },
    {
        "name": "Beef Empanadas",
        "description": "Hand-cut beef, baked",
        "price": 12000,
        "category": "empanadas",
        "sinStock": False,
        "published": True,
        "options": {
            "quantity": {
                "enabled": True,
                "choices": [
                    _choice("Single", -11000),
                    _choice("Half dozen", -6000),
                    _choice("Dozen", 0, True),
                ],
            },
        },
    },
    {
        "name": "Steak Sandwich",
        "description": "Grilled steak, lettuce, tomato and egg",
        "price": 7000,
        "category": "steak-sandwiches",
        "sinStock": True,
        "published": True,
        "options": {
            "withSide": {
                "enabled": True,
                "choices": [_choice("Without fries", 0, True), _choice("With fries", 900)],
            },
        },
    },
    {
        "name": "Caesar Salad",
        "description": "Romaine, croutons and parmesan",
        "price": 5200,
        "category": "salads",
        "sinStock": False,
        "published": False,
        "options": {},
    },
    {
        "name": "Lemonade",
        "description": "Freshly squeezed",
        "price": 1500,
        "category": "beverages",
        "sinStock": False,
        "published": True,
        "options": {
            "size": {
                "enabled": True,
                "choices": [
                    _choice("Small", 0, True),
                    _choice("Medium", 400),
                    _choice("Large", 800),
                ],
            },
        },
    },
]


class MockStorefrontAPI(BaseStorefrontAPI):
    """
    Mock implementation of the catalog API.

    Attributes:
        failure_rate: Probability of a simulated 503 (0.0-1.0)
        min_latency: Minimum simulated response time in seconds
        max_latency: Maximum simulated response time in seconds

    Example:
        >>> api = MockStorefrontAPI()
        >>> result = await api.list_products()
        >>> [p.name for p in result.data][:2]
        ['Classic Burger', 'Muzzarella Pizza']
    """

    def __init__(
        self,
        failure_rate: float = 0.0,
        min_latency: float = 0.0,
        max_latency: float = 0.0,
        username: str = "admin",
        password: str = "admin",
        seed: bool = True,
    ):
        """
        Initialize the mock API.

        Args:
            failure_rate: Probability of a simulated failure (default: never)
            min_latency: Minimum response time in seconds
            max_latency: Maximum response time in seconds
            username: Accepted admin username
            password: Accepted admin password
            seed: Load SEED_PRODUCTS into the catalog
        """
        self.failure_rate = failure_rate
        self.min_latency = min_latency
        self.max_latency = max(max_latency, min_latency)
        self._username = username
        self._password = password

        self._products: dict[str, dict[str, Any]] = {}
        self._orders: dict[str, dict[str, Any]] = {}
        self._tokens: set[str] = set()
        self._order_sequence = 0
        self._product_sequence = 0

        if seed:
            for record in SEED_PRODUCTS:
                self._insert_product(copy.deepcopy(record))

        logger.info(
            f"MockStorefrontAPI initialized "
            f"({len(self._products)} products, failure_rate={failure_rate:.0%}, "
            f"latency={self.min_latency}-{self.max_latency}s)"
        )

    @property
    def provider_name(self) -> str:
        return "mock"

    # =========================================================================
    # SIMULATION
    # =========================================================================

    async def _simulate_latency(self) -> float:
        """
        Simulate network latency.

        Returns:
            float: Actual latency in milliseconds
        """
        latency = random.uniform(self.min_latency, self.max_latency)
        if latency > 0:
            await asyncio.sleep(latency)
        return latency * 1000

    def _should_fail(self) -> bool:
        return random.random() < self.failure_rate

    async def _begin(self, auth: Optional[AuthContext] = None, admin: bool = False) -> Optional[ApiResult]:
        """
        Common preamble of every call.

        Returns:
            A terminal ApiResult (failure or 401), or None to proceed
        """
        await self._simulate_latency()
        if self._should_fail():
            logger.debug("Mock: simulated outage")
            return ApiResult.failed("Service temporarily unavailable", status_code=503)
        if admin and not self._authorized(auth):
            logger.debug("Mock: rejected admin call without a valid token")
            if auth:
                auth.discard()
            return ApiResult.unauthorized()
        return None

    def _authorized(self, auth: Optional[AuthContext]) -> bool:
        return bool(auth and auth.token in self._tokens)

    def revoke_tokens(self) -> None:
        """Invalidate every issued token (simulates session expiry)."""
        self._tokens.clear()

    # =========================================================================
    # STORAGE
    # =========================================================================

    def _next_product_id(self) -> str:
        self._product_sequence += 1
        return f"p{self._product_sequence:04d}"

    def _insert_product(self, record: dict[str, Any]) -> dict[str, Any]:
        record["_id"] = self._next_product_id()
        self._products[record["_id"]] = record
        return record

    @staticmethod
    def _matches(record: dict[str, Any], filters: Optional[ProductFilters]) -> bool:
        if filters is None:
            return True
        if filters.search:
            needle = filters.search.lower()
            haystack = f"{record.get('name', '')} {record.get('description', '')}".lower()
            if needle not in haystack:
                return False
        if filters.category and record.get("category") != filters.category.value:
            return False
        price = record.get("price", 0)
        if filters.min_price is not None and price < filters.min_price:
            return False
        if filters.max_price is not None and price > filters.max_price:
            return False
        return True

    @staticmethod
    def _to_product(record: dict[str, Any]) -> Optional[Product]:
        try:
            return Product.model_validate(record)
        except ValidationError as e:
            logger.warning(f"Mock: stored product {record.get('_id')} is invalid: {e}")
            return None

    # =========================================================================
    # AUTH
    # =========================================================================

    async def login(self, username: str, password: str, auth: AuthContext) -> ApiResult:
        failure = await self._begin()
        if failure:
            return failure
        if username != self._username or password != self._password:
            logger.info(f"Mock: login rejected for '{username}'")
            return ApiResult.failed("Invalid username or password", status_code=401)

        token = f"mock_{uuid.uuid4().hex}"
        self._tokens.add(token)
        auth.token = token
        logger.info(f"Mock: admin '{username}' logged in")
        return ApiResult.ok(TokenResponse(token=token))

    # =========================================================================
    # PRODUCTS
    # =========================================================================

    async def list_products(
        self,
        filters: Optional[ProductFilters] = None,
        admin: bool = False,
        auth: Optional[AuthContext] = None,
    ) -> ApiResult:
        failure = await self._begin(auth, admin=admin)
        if failure:
            return failure

        products = []
        for record in self._products.values():
            if not admin and not record.get("published", True):
                continue
            if not self._matches(record, filters):
                continue
            product = self._to_product(copy.deepcopy(record))
            if product is not None:
                products.append(product)
        return ApiResult.ok(products)

    async def get_product(self, product_id: str) -> ApiResult:
        failure = await self._begin()
        if failure:
            return failure
        record = self._products.get(product_id)
        if record is None:
            return ApiResult.failed("Product not found", status_code=404)
        return ApiResult.ok(self._to_product(copy.deepcopy(record)))

    async def create_product(self, payload: dict, auth: AuthContext) -> ApiResult:
        failure = await self._begin(auth, admin=True)
        if failure:
            return failure

        record = copy.deepcopy(payload)
        record.pop("_id", None)
        record.pop("id", None)
        product = self._to_product(record)
        if product is None:
            return ApiResult.failed("Invalid product", status_code=400)

        stored = self._insert_product(product.to_payload())
        logger.info(f"Mock: product '{product.name}' created ({stored['_id']})")
        return ApiResult.ok(self._to_product(copy.deepcopy(stored)), status_code=201)

    async def update_product(self, product_id: str, payload: dict, auth: AuthContext) -> ApiResult:
        failure = await self._begin(auth, admin=True)
        if failure:
            return failure

        current = self._products.get(product_id)
        if current is None:
            return ApiResult.failed("Product not found", status_code=404)

        # Partial patches ({"published"}, {"sinStock"}) merge over the record
        updated = {**copy.deepcopy(current), **copy.deepcopy(payload), "_id": product_id}
        updated.pop("id", None)
        product = self._to_product(updated)
        if product is None:
            return ApiResult.failed("Invalid product", status_code=400)

        self._products[product_id] = {**product.to_payload(), "_id": product_id}
        logger.info(f"Mock: product {product_id} updated ({', '.join(sorted(payload))})")
        return ApiResult.ok(product)

    async def delete_product(self, product_id: str, auth: AuthContext) -> ApiResult:
        failure = await self._begin(auth, admin=True)
        if failure:
            return failure
        if self._products.pop(product_id, None) is None:
            return ApiResult.failed("Product not found", status_code=404)
        logger.info(f"Mock: product {product_id} deleted")
        return ApiResult.ok(None, status_code=204)

    # =========================================================================
    # ORDERS
    # =========================================================================

    async def create_order(self, payload: dict) -> ApiResult:
        failure = await self._begin()
        if failure:
            return failure

        try:
            order = OrderCreate.model_validate(payload)
        except ValidationError as e:
            logger.warning(f"Mock: rejected order payload: {e}")
            return ApiResult.failed("Invalid order", status_code=400)

        self._order_sequence += 1
        order_id = f"ORD-{self._order_sequence:04d}"
        record = {
            **order.to_payload(),
            "orderId": order_id,
            "createdAt": datetime.now(timezone.utc).isoformat(),
        }
        self._orders[order_id] = record

        logger.info(f"Mock: order #{order_id} created - total {order.total}")
        return ApiResult.ok(OrderResponse.model_validate(record), status_code=201)

    async def list_orders(
        self,
        auth: AuthContext,
        status: Optional[OrderStatus] = None,
        search: Optional[str] = None,
    ) -> ApiResult:
        failure = await self._begin(auth, admin=True)
        if failure:
            return failure

        orders = []
        for record in reversed(list(self._orders.values())):
            if status and record.get("status") != OrderStatus(status).value:
                continue
            if search:
                needle = search.lower()
                customer = record.get("customer", {})
                haystack = f"{record['orderId']} {customer.get('name', '')} {customer.get('phone') or ''}".lower()
                if needle not in haystack:
                    continue
            orders.append(OrderResponse.model_validate(record))
        return ApiResult.ok(orders)

    async def get_order(self, order_id: str, auth: AuthContext) -> ApiResult:
        failure = await self._begin(auth, admin=True)
        if failure:
            return failure
        record = self._orders.get(order_id)
        if record is None:
            return ApiResult.failed("Order not found", status_code=404)
        return ApiResult.ok(OrderResponse.model_validate(record))

    async def update_order_status(self, order_id: str, status: OrderStatus, auth: AuthContext) -> ApiResult:
        failure = await self._begin(auth, admin=True)
        if failure:
            return failure
        record = self._orders.get(order_id)
        if record is None:
            return ApiResult.failed("Order not found", status_code=404)
        record["status"] = OrderStatus(status).value
        logger.info(f"Mock: order #{order_id} -> {record['status']}")
        return ApiResult.ok(OrderResponse.model_validate(record))

    async def delete_order(self, order_id: str, auth: AuthContext) -> ApiResult:
        failure = await self._begin(auth, admin=True)
        if failure:
            return failure
        if self._orders.pop(order_id, None) is None:
            return ApiResult.failed("Order not found", status_code=404)
        logger.info(f"Mock: order #{order_id} deleted")
        return ApiResult.ok(None, status_code=204)

    async def health_check(self) -> bool:
        return True
