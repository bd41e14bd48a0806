"""
Catalog API Abstract Base Class

Defines the interface contract for the product/order API collaborator.
Both MockStorefrontAPI and HttpStorefrontAPI implement these methods, so
the storefront and admin sessions behave identically against either.

Every call returns an ApiResult instead of raising:
    - OK: the request succeeded, ``data`` holds the parsed payload
    - UNAUTHENTICATED: the API answered 401; the AuthContext passed in has
      already been cleared and the caller must log in again
    - FAILED: anything else; the caller reports a generic failure and
      leaves its local state unchanged

No call is retried.

Author: Khalil Bannouri
Version: 1.0.0
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from storefront.schemas import OrderStatus, ProductFilters


class ResultStatus(str, Enum):
    OK = "ok"
    UNAUTHENTICATED = "unauthenticated"
    FAILED = "failed"


@dataclass
class ApiResult:
    """
    Standardized result from a catalog API call.

    Attributes:
        status: OK, UNAUTHENTICATED or FAILED
        data: Parsed payload (Product, list of Product, OrderResponse, ...)
        status_code: HTTP status code, when one was received
        error_message: Human-readable failure description
        response_time_ms: Time taken by the call
    """
    status: ResultStatus
    data: Any = None
    status_code: Optional[int] = None
    error_message: Optional[str] = None
    response_time_ms: float = 0.0

    @property
    def success(self) -> bool:
        return self.status == ResultStatus.OK

    @property
    def unauthenticated(self) -> bool:
        return self.status == ResultStatus.UNAUTHENTICATED

    @classmethod
    def ok(cls, data: Any = None, status_code: Optional[int] = 200) -> "ApiResult":
        return cls(status=ResultStatus.OK, data=data, status_code=status_code)

    @classmethod
    def failed(cls, error_message: str, status_code: Optional[int] = None) -> "ApiResult":
        return cls(status=ResultStatus.FAILED, status_code=status_code, error_message=error_message)

    @classmethod
    def unauthorized(cls) -> "ApiResult":
        return cls(
            status=ResultStatus.UNAUTHENTICATED,
            status_code=401,
            error_message="Session expired. Please log in again.",
        )


@dataclass
class AuthContext:
    """
    Admin credential passed explicitly to every admin-scoped call.

    The token is opaque; discard() is called by the API collaborator when
    the server rejects it.
    """
    token: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def authorization_header(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    def discard(self) -> None:
        self.token = None


class BaseStorefrontAPI(ABC):
    """
    Abstract base class for the product/order API.

    Example:
        >>> api = get_storefront_api()
        >>> result = await api.list_products(ProductFilters(category="pizzas"))
        >>> if result.success:
        ...     products = result.data
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name ("mock", "http")."""
        pass

    # =========================================================================
    # AUTH
    # =========================================================================

    @abstractmethod
    async def login(self, username: str, password: str, auth: AuthContext) -> ApiResult:
        """Authenticate an admin; stores the token on ``auth`` on success."""
        pass

    # =========================================================================
    # PRODUCTS
    # =========================================================================

    @abstractmethod
    async def list_products(
        self,
        filters: Optional[ProductFilters] = None,
        admin: bool = False,
        auth: Optional[AuthContext] = None,
    ) -> ApiResult:
        """
        Fetch products.

        Args:
            filters: Server-side search/category/price filters
            admin: Include unpublished and out-of-stock products (needs auth)
            auth: Admin credential, required when ``admin`` is set

        Returns:
            ApiResult with ``data`` = list[Product]
        """
        pass

    @abstractmethod
    async def get_product(self, product_id: str) -> ApiResult:
        pass

    @abstractmethod
    async def create_product(self, payload: dict, auth: AuthContext) -> ApiResult:
        """Create a product from a full record; ``data`` = Product."""
        pass

    @abstractmethod
    async def update_product(self, product_id: str, payload: dict, auth: AuthContext) -> ApiResult:
        """Update a product with a full record or a partial patch."""
        pass

    @abstractmethod
    async def delete_product(self, product_id: str, auth: AuthContext) -> ApiResult:
        pass

    async def set_published(self, product_id: str, published: bool, auth: AuthContext) -> ApiResult:
        """Publish-toggle patch: ``{"published": bool}``."""
        return await self.update_product(product_id, {"published": published}, auth)

    async def set_out_of_stock(self, product_id: str, out_of_stock: bool, auth: AuthContext) -> ApiResult:
        """Stock-toggle patch: ``{"sinStock": bool}``."""
        return await self.update_product(product_id, {"sinStock": out_of_stock}, auth)

    # =========================================================================
    # ORDERS
    # =========================================================================

    @abstractmethod
    async def create_order(self, payload: dict) -> ApiResult:
        """Submit an order; ``data`` = OrderResponse with the assigned id."""
        pass

    @abstractmethod
    async def list_orders(
        self,
        auth: AuthContext,
        status: Optional[OrderStatus] = None,
        search: Optional[str] = None,
    ) -> ApiResult:
        pass

    @abstractmethod
    async def get_order(self, order_id: str, auth: AuthContext) -> ApiResult:
        pass

    @abstractmethod
    async def update_order_status(self, order_id: str, status: OrderStatus, auth: AuthContext) -> ApiResult:
        pass

    @abstractmethod
    async def delete_order(self, order_id: str, auth: AuthContext) -> ApiResult:
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Verify connectivity to the API."""
        pass
