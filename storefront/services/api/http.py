"""
HTTP Catalog API Implementation

Production implementation talking to the product/order REST API with
httpx. Used when ENV_MODE=production or ENV_MODE=staging.

Endpoints:
    GET    /products             ?search&category&minPrice&maxPrice[&admin=true]
    GET    /products/{id}
    POST   /products
    PUT    /products/{id}        full record or {"published"} / {"sinStock"} patch
    DELETE /products/{id}
    POST   /orders
    GET    /orders               ?status&search
    GET    /orders/{id}
    PUT    /orders/{id}/status   {"status"}
    DELETE /orders/{id}
    POST   /auth/login

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
from datetime import datetime
from typing import Any, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from storefront.core.config import get_settings
from storefront.schemas import (
    LoginRequest,
    OrderResponse,
    OrderStatus,
    OrderStatusUpdate,
    Product,
    ProductFilters,
    TokenResponse,
)
from storefront.services.api.base import ApiResult, AuthContext, BaseStorefrontAPI

logger = logging.getLogger(__name__)


class HttpStorefrontAPI(BaseStorefrontAPI):
    """
    REST implementation of the catalog API.

    A 401 on any request clears the AuthContext that was passed in and
    yields an UNAUTHENTICATED result. Other HTTP or network errors yield
    FAILED results. Nothing is retried.

    Example:
        >>> api = HttpStorefrontAPI("https://shop.example.com/api")
        >>> result = await api.list_products()
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            base_url: API base URL (default: API_BASE_URL setting)
            timeout: Request timeout in seconds (default: API_TIMEOUT_SECONDS)
            transport: Custom httpx transport, e.g. httpx.MockTransport in tests
        """
        settings = get_settings()
        self.base_url = base_url or settings.api_base_url
        if not self.base_url:
            raise ValueError(
                "API_BASE_URL is required for production mode. "
                "Set it in your .env file or environment variables."
            )
        self.timeout = timeout if timeout is not None else settings.api_timeout_seconds
        self._transport = transport

        logger.info(f"HttpStorefrontAPI initialized ({self.base_url})")

    @property
    def provider_name(self) -> str:
        return "http"

    # =========================================================================
    # TRANSPORT
    # =========================================================================

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            for key in ("message", "detail", "error"):
                if isinstance(body.get(key), str):
                    return body[key]
        return f"Request failed with status {response.status_code}"

    async def _request(
        self,
        method: str,
        path: str,
        auth: Optional[AuthContext] = None,
        json: Any = None,
        params: Optional[dict] = None,
    ) -> ApiResult:
        headers = auth.authorization_header() if auth else {}
        start_time = datetime.now()

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.request(
                    method, path, json=json, params=params, headers=headers
                )
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            return ApiResult.failed("Could not reach the server. Please try again.")

        elapsed_ms = (datetime.now() - start_time).total_seconds() * 1000

        if response.status_code == 401:
            logger.warning(f"{method} {path} unauthorized; discarding admin token")
            if auth:
                auth.discard()
            result = ApiResult.unauthorized()
        elif response.is_error:
            logger.warning(f"{method} {path} -> {response.status_code}")
            result = ApiResult.failed(self._error_message(response), status_code=response.status_code)
        else:
            try:
                data = response.json() if response.content else None
            except ValueError:
                data = None
            result = ApiResult.ok(data, status_code=response.status_code)

        result.response_time_ms = elapsed_ms
        logger.debug(f"{method} {path} -> {response.status_code} ({elapsed_ms:.0f}ms)")
        return result

    @staticmethod
    def _parse(result: ApiResult, model) -> ApiResult:
        if not result.success:
            return result
        try:
            result.data = model.model_validate(result.data)
        except ValidationError as e:
            logger.error(f"Unexpected {model.__name__} payload: {e}")
            return ApiResult.failed("Unexpected response from the server", status_code=result.status_code)
        return result

    @staticmethod
    def _parse_list(result: ApiResult, model) -> ApiResult:
        if not result.success:
            return result
        if not isinstance(result.data, list):
            return ApiResult.failed("Unexpected response from the server", status_code=result.status_code)
        items = []
        for raw in result.data:
            try:
                items.append(model.model_validate(raw))
            except ValidationError as e:
                logger.warning(f"Skipping malformed {model.__name__}: {e}")
        result.data = items
        return result

    @staticmethod
    def _path(prefix: str, identifier: str, suffix: str = "") -> str:
        return f"{prefix}/{quote(str(identifier), safe='')}{suffix}"

    # =========================================================================
    # AUTH
    # =========================================================================

    async def login(self, username: str, password: str, auth: AuthContext) -> ApiResult:
        body = LoginRequest(username=username, password=password).model_dump()
        result = self._parse(await self._request("POST", "/auth/login", json=body), TokenResponse)
        if result.unauthenticated:
            return ApiResult.failed("Invalid username or password", status_code=401)
        if result.success:
            auth.token = result.data.token
            logger.info(f"Admin '{username}' logged in")
        return result

    # =========================================================================
    # PRODUCTS
    # =========================================================================

    async def list_products(
        self,
        filters: Optional[ProductFilters] = None,
        admin: bool = False,
        auth: Optional[AuthContext] = None,
    ) -> ApiResult:
        params = filters.to_params() if filters else {}
        if admin:
            params["admin"] = "true"
        result = await self._request("GET", "/products", auth=auth if admin else None, params=params)
        return self._parse_list(result, Product)

    async def get_product(self, product_id: str) -> ApiResult:
        return self._parse(await self._request("GET", self._path("/products", product_id)), Product)

    async def create_product(self, payload: dict, auth: AuthContext) -> ApiResult:
        result = await self._request("POST", "/products", auth=auth, json=payload)
        return self._parse(result, Product)

    async def update_product(self, product_id: str, payload: dict, auth: AuthContext) -> ApiResult:
        result = await self._request("PUT", self._path("/products", product_id), auth=auth, json=payload)
        return self._parse(result, Product)

    async def delete_product(self, product_id: str, auth: AuthContext) -> ApiResult:
        return await self._request("DELETE", self._path("/products", product_id), auth=auth)

    # =========================================================================
    # ORDERS
    # =========================================================================

    async def create_order(self, payload: dict) -> ApiResult:
        result = self._parse(await self._request("POST", "/orders", json=payload), OrderResponse)
        if result.success:
            logger.info(f"Order #{result.data.id} submitted")
        return result

    async def list_orders(
        self,
        auth: AuthContext,
        status: Optional[OrderStatus] = None,
        search: Optional[str] = None,
    ) -> ApiResult:
        params = {}
        if status:
            params["status"] = OrderStatus(status).value
        if search:
            params["search"] = search
        result = await self._request("GET", "/orders", auth=auth, params=params)
        return self._parse_list(result, OrderResponse)

    async def get_order(self, order_id: str, auth: AuthContext) -> ApiResult:
        result = await self._request("GET", self._path("/orders", order_id), auth=auth)
        return self._parse(result, OrderResponse)

    async def update_order_status(self, order_id: str, status: OrderStatus, auth: AuthContext) -> ApiResult:
        body = OrderStatusUpdate(status=status).model_dump(mode="json")
        result = await self._request("PUT", self._path("/orders", order_id, "/status"), auth=auth, json=body)
        return self._parse(result, OrderResponse)

    async def delete_order(self, order_id: str, auth: AuthContext) -> ApiResult:
        return await self._request("DELETE", self._path("/orders", order_id), auth=auth)

    async def health_check(self) -> bool:
        result = await self._request("GET", "/products", params={"search": "__health__"})
        return result.success
