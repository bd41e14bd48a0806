"""
Admin Session

Back-office flows over the catalog API: product listing with search and
pagination, the product form with its option editor, publish/stock
toggles, and order status management.

Every admin call carries the session's AuthContext. When the API answers
401 the token is discarded, ``requires_login`` turns True and the caller
is expected to show the login screen; nothing is retried.

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from storefront.core.config import Settings, get_settings
from storefront.options.catalog import Category, parse_category
from storefront.options.editor import OptionEditor, ValidationIssue
from storefront.schemas import OrderResponse, OrderStatus, Product
from storefront.services.api import ApiResult, AuthContext, BaseStorefrontAPI, get_storefront_api

logger = logging.getLogger(__name__)


def _price_text(price: float) -> str:
    """Price as the admin types it: 1234567, not 1.23457e+06."""
    return str(int(price)) if float(price).is_integer() else str(price)


@dataclass
class SaveResult:
    """Result of saving a product form."""
    success: bool
    product: Optional[Product] = None
    issues: list[str] = field(default_factory=list)
    error_message: Optional[str] = None
    unauthenticated: bool = False

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "product_id": self.product.id if self.product else None,
            "issues": self.issues,
            "error_message": self.error_message,
            "unauthenticated": self.unauthenticated,
        }


class ProductForm:
    """
    Create/edit form for one product.

    Attributes:
        product_id: None for a new product
        editor: Option editor over the product's option map
    """

    def __init__(
        self,
        category: Union[str, Category],
        product: Optional[Product] = None,
    ):
        if product is not None:
            self.product_id = product.id
            self.name = product.name
            self.description = product.description
            self.price: Any = product.price
            self.out_of_stock = product.out_of_stock
            self.published = product.published
            self.image = product.image
            self.editor = OptionEditor.for_product(product)
        else:
            self.product_id = None
            self.name = ""
            self.description = ""
            self.price = 0
            self.out_of_stock = False
            self.published = True
            self.image = None
            self.editor = OptionEditor(category)

    @property
    def is_new(self) -> bool:
        return self.product_id is None

    @property
    def category(self) -> Category:
        return self.editor.category

    def change_category(self, category: Union[str, Category]) -> None:
        """Reseed the options for another category; beverage and custom groups survive."""
        self.editor.change_category(category)

    def validate(self) -> list[str]:
        issues = []
        if not str(self.name or "").strip():
            issues.append("Name is required")
        try:
            price = float(self.price)
        except (TypeError, ValueError):
            issues.append("Price must be a number")
        else:
            if not math.isfinite(price) or price < 0:
                issues.append("Price must be zero or more")
        issues.extend(self._format_issue(issue) for issue in self.editor.validate())
        return issues

    @staticmethod
    def _format_issue(issue: ValidationIssue) -> str:
        return f"{issue.label}: {issue.message}"

    def to_payload(self) -> dict[str, Any]:
        """Full product record, option map normalized."""
        return {
            "name": str(self.name).strip(),
            "description": str(self.description or "").strip(),
            "price": float(self.price),
            "category": self.category.value,
            "sinStock": bool(self.out_of_stock),
            "published": bool(self.published),
            "image": self.image,
            "options": self.editor.to_payload(),
        }


class AdminSession:
    """
    One administrator's back-office state.

    Example:
        >>> admin = AdminSession()
        >>> await admin.login("admin", "admin")
        >>> await admin.load_products()
        >>> form = admin.new_product("pizzas")
        >>> form.name, form.price = "Fugazzeta", 9000
        >>> result = await admin.save(form)
    """

    def __init__(
        self,
        api: Optional[BaseStorefrontAPI] = None,
        settings: Optional[Settings] = None,
        auth: Optional[AuthContext] = None,
    ):
        self.settings = settings or get_settings()
        self.api = api or get_storefront_api()
        self.auth = auth or AuthContext()
        self.products: list[Product] = []
        self.orders: list[OrderResponse] = []
        self.search_term = ""
        self.page = 1
        self.page_size = max(1, self.settings.admin_page_size)
        self.last_error: Optional[str] = None

    # =========================================================================
    # AUTH
    # =========================================================================

    @property
    def requires_login(self) -> bool:
        return not self.auth.is_authenticated

    async def login(self, username: str, password: str) -> ApiResult:
        result = await self.api.login(username, password, self.auth)
        self.last_error = None if result.success else result.error_message
        return result

    def logout(self) -> None:
        self.auth.discard()
        self.products = []
        self.orders = []
        logger.info("Admin logged out")

    def _track(self, result: ApiResult, action: str) -> ApiResult:
        if result.unauthenticated:
            logger.warning(f"{action}: admin session expired")
        elif not result.success:
            logger.error(f"{action} failed: {result.error_message}")
        self.last_error = None if result.success else result.error_message
        return result

    # =========================================================================
    # PRODUCT LISTING
    # =========================================================================

    async def load_products(self) -> ApiResult:
        """Admin fetch: unpublished and out-of-stock products included."""
        result = self._track(
            await self.api.list_products(admin=True, auth=self.auth),
            "Load products",
        )
        if result.success:
            self.products = result.data
            self._clamp_page()
        return result

    def search(self, term: str) -> None:
        self.search_term = (term or "").strip()
        self.page = 1

    @property
    def filtered_products(self) -> list[Product]:
        if not self.search_term:
            return list(self.products)
        needle = self.search_term.lower()
        return [
            p for p in self.products
            if needle in p.name.lower()
            or needle in p.description.lower()
            or needle in _price_text(p.price)
        ]

    @property
    def page_count(self) -> int:
        return max(1, math.ceil(len(self.filtered_products) / self.page_size))

    def _clamp_page(self) -> None:
        if not 1 <= self.page <= self.page_count:
            self.page = 1

    def set_page(self, page: int) -> None:
        self.page = page
        self._clamp_page()

    @property
    def page_products(self) -> list[Product]:
        self._clamp_page()
        start = (self.page - 1) * self.page_size
        return self.filtered_products[start:start + self.page_size]

    # =========================================================================
    # PRODUCT FORM
    # =========================================================================

    def new_product(self, category: Optional[Union[str, Category]] = None) -> ProductForm:
        return ProductForm(parse_category(category or self.settings.default_category))

    def edit_product(self, product: Product) -> ProductForm:
        return ProductForm(product.category, product=product)

    async def save(self, form: ProductForm) -> SaveResult:
        """Validate the form, then create or update the product."""
        issues = form.validate()
        if issues:
            logger.info(f"Product form rejected: {issues}")
            return SaveResult(success=False, issues=issues)

        payload = form.to_payload()
        if form.is_new:
            result = await self.api.create_product(payload, self.auth)
        else:
            result = await self.api.update_product(form.product_id, payload, self.auth)
        self._track(result, f"Save product '{payload['name']}'")

        if not result.success:
            return SaveResult(
                success=False,
                error_message=result.error_message,
                unauthenticated=result.unauthenticated,
            )

        product = result.data
        self._replace_product(product)
        form.product_id = product.id
        logger.info(f"Product '{product.name}' saved ({product.id})")
        return SaveResult(success=True, product=product)

    def _replace_product(self, product: Product) -> None:
        for i, existing in enumerate(self.products):
            if existing.id == product.id:
                self.products[i] = product
                return
        self.products.append(product)

    async def delete_product(self, product_id: str) -> ApiResult:
        result = self._track(await self.api.delete_product(product_id, self.auth), "Delete product")
        if result.success:
            self.products = [p for p in self.products if p.id != product_id]
            self._clamp_page()
        return result

    async def toggle_published(self, product: Product) -> ApiResult:
        result = self._track(
            await self.api.set_published(product.id, not product.published, self.auth),
            "Toggle published",
        )
        if result.success:
            self._replace_product(result.data)
        return result

    async def set_out_of_stock(self, product: Product, out_of_stock: bool) -> ApiResult:
        result = self._track(
            await self.api.set_out_of_stock(product.id, out_of_stock, self.auth),
            "Set stock",
        )
        if result.success:
            self._replace_product(result.data)
        return result

    # =========================================================================
    # ORDERS
    # =========================================================================

    async def load_orders(
        self,
        status: Optional[Union[str, OrderStatus]] = None,
        search: Optional[str] = None,
    ) -> ApiResult:
        status = OrderStatus(status) if status else None
        result = self._track(
            await self.api.list_orders(self.auth, status=status, search=search or None),
            "Load orders",
        )
        if result.success:
            self.orders = result.data
        return result

    async def update_order_status(self, order_id: str, status: Union[str, OrderStatus]) -> ApiResult:
        """Set any status; transitions are not restricted."""
        result = self._track(
            await self.api.update_order_status(order_id, OrderStatus(status), self.auth),
            f"Update order #{order_id}",
        )
        if result.success:
            self.orders = [result.data if o.id == order_id else o for o in self.orders]
        return result
