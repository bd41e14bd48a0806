"""
Storefront Session

Customer-facing flow: browse the published catalog, configure a product,
collect it in the cart and check out. One session per customer; nothing
is persisted across sessions.

Checkout:
    1. Validate the cart and the customer form
    2. Submit the order to the catalog API (status pending)
    3. On acceptance: clear the cart and hand the order summary to the
       messaging service

A failed step returns a CheckoutResult with success=False and leaves the
cart untouched so the customer may retry.

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union

from storefront.cart import Cart, CartLine
from storefront.configurator import ProductConfigurator
from storefront.core.config import Settings, get_settings
from storefront.options.catalog import Category
from storefront.orders import build_order, format_order_message
from storefront.schemas import CustomerInfo, PriceSort, Product, ProductFilters
from storefront.services.api import ApiResult, BaseStorefrontAPI, get_storefront_api
from storefront.services.messaging import BaseMessagingService, get_messaging_service

logger = logging.getLogger(__name__)


@dataclass
class CheckoutResult:
    """
    Result of a checkout attempt.

    Attributes:
        success: Order accepted by the API
        order_id: Server-assigned order identifier
        total: Submitted total
        issues: Validation messages for the customer form
        error_message: Transport failure description
        message_link: Messaging deep link carrying the order summary
    """
    success: bool
    order_id: Optional[str] = None
    total: Optional[int] = None
    issues: list[str] = field(default_factory=list)
    error_message: Optional[str] = None
    message_link: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "order_id": self.order_id,
            "total": self.total,
            "issues": self.issues,
            "error_message": self.error_message,
            "message_link": self.message_link,
        }


class StorefrontSession:
    """
    One customer's browsing and ordering state.

    Example:
        >>> session = StorefrontSession()
        >>> await session.load_products(category="pizzas")
        >>> view = session.open_product(session.products[0])
        >>> session.add_to_cart(view)
        >>> result = await session.checkout({"name": "Ana", "deliveryType": "pickup"})
    """

    def __init__(
        self,
        api: Optional[BaseStorefrontAPI] = None,
        messaging: Optional[BaseMessagingService] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.api = api or get_storefront_api()
        self.messaging = messaging or get_messaging_service()
        self.products: list[Product] = []
        self.cart = Cart()
        self.last_error: Optional[str] = None

    # =========================================================================
    # CATALOG
    # =========================================================================

    async def load_products(
        self,
        search: Optional[str] = None,
        category: Optional[Union[str, Category]] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        sort: Optional[Union[str, PriceSort]] = None,
    ) -> ApiResult:
        """
        Fetch the catalog with server-side filters, then sort by price.

        Unpublished products are never shown; out-of-stock products are
        dropped when HIDE_OUT_OF_STOCK is set. On failure the previously
        loaded products stay in place.
        """
        try:
            filters = ProductFilters(
                search=search or None,
                category=category or None,
                min_price=min_price,
                max_price=max_price,
            )
            order = PriceSort(sort) if sort else None
        except ValueError as e:
            logger.info(f"Rejected product filters: {e}")
            self.last_error = "Invalid product filters"
            return ApiResult.failed(self.last_error)

        result = await self.api.list_products(filters)
        if not result.success:
            self.last_error = result.error_message
            logger.warning(f"Could not load products: {result.error_message}")
            return result

        products = [p for p in result.data if p.published]
        if self.settings.hide_out_of_stock:
            products = [p for p in products if not p.out_of_stock]
        if order:
            products.sort(key=lambda p: p.price, reverse=order == PriceSort.DESC)

        self.products = products
        self.last_error = None
        logger.debug(f"Loaded {len(products)} products")
        return result

    def open_product(self, product: Product) -> ProductConfigurator:
        return ProductConfigurator(product)

    # =========================================================================
    # CART
    # =========================================================================

    def add_to_cart(self, configurator: ProductConfigurator) -> Optional[CartLine]:
        """
        Add one unit of the configured product.

        Returns:
            The cart line, or None when the product is out of stock
        """
        if not configurator.can_add_to_cart:
            logger.info(f"'{configurator.product.name}' is out of stock; not added")
            return None
        return self.cart.add(configurator.product, configurator.selections)

    @property
    def cart_item_count(self) -> int:
        return self.cart.item_count

    # =========================================================================
    # CHECKOUT
    # =========================================================================

    async def checkout(self, customer: Union[CustomerInfo, Mapping[str, Any]]) -> CheckoutResult:
        order, issues = build_order(self.cart, customer)
        if order is None:
            return CheckoutResult(success=False, issues=issues)

        result = await self.api.create_order(order.to_payload())
        if not result.success:
            logger.error(f"Order submission failed: {result.error_message}")
            return CheckoutResult(
                success=False,
                total=order.total,
                error_message="We could not place your order. Please try again.",
            )

        order_id = result.data.id
        summary = format_order_message(
            order_id,
            order,
            restaurant_name=self.settings.restaurant_name,
            currency=self.settings.currency,
        )
        self.cart.clear()

        handoff = await self.messaging.send_order(order_id, summary)
        if not handoff.success:
            logger.warning(f"Order #{order_id} placed but handoff failed: {handoff.error_message}")

        return CheckoutResult(
            success=True,
            order_id=order_id,
            total=order.total,
            message_link=handoff.link,
        )
