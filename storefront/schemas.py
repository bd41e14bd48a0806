"""
Pydantic Schemas for the Catalog API Data Contract

Shapes exchanged with the product/order API:
- Product records (read and write, including the raw option map)
- Order submission and order records
- Order status updates
- Admin login

Field aliases follow the API's camelCase wire names
(``sinStock``, ``priceModifier``, ``productId``, ``deliveryType``).

Author: Khalil Bannouri
Version: 1.0.0
"""

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from typing import Optional, List, Any
from datetime import datetime
from enum import Enum

from storefront.options.catalog import Category


# =============================================================================
# ENUMS
# =============================================================================

class OrderStatus(str, Enum):
    """Order status, in workflow order."""
    PENDING = "pending"
    PREPARING = "preparing"
    READY = "ready"
    DELIVERED = "delivered"

    @property
    def label(self) -> str:
        return ORDER_STATUS_LABELS[self]

    @classmethod
    def ordered(cls) -> list["OrderStatus"]:
        return list(cls)


ORDER_STATUS_LABELS = {
    OrderStatus.PENDING: "Pending",
    OrderStatus.PREPARING: "Preparing",
    OrderStatus.READY: "Ready",
    OrderStatus.DELIVERED: "Delivered",
}


class DeliveryType(str, Enum):
    PICKUP = "pickup"
    DELIVERY = "delivery"


class PriceSort(str, Enum):
    ASC = "asc"
    DESC = "desc"


# =============================================================================
# PRODUCTS
# =============================================================================

class Product(BaseModel):
    """A catalog entry as returned by the API."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(default=None, validation_alias=AliasChoices("_id", "id"))
    name: str = Field(..., min_length=1, max_length=100, examples=["Classic Burger"])
    description: str = Field(default="", examples=["Beef patty, cheddar, pickles"])
    price: float = Field(..., ge=0, examples=[4500])
    category: Category = Field(default=Category.HAMBURGERS)
    out_of_stock: bool = Field(default=False, alias="sinStock")
    published: bool = Field(default=True)
    image: Optional[str] = Field(default=None, description="Image URL or data URI")
    options: dict[str, Any] = Field(default_factory=dict)

    @field_validator("options", mode="before")
    @classmethod
    def validate_options(cls, v: Any) -> dict[str, Any]:
        # Option data is coerced later; anything that is not a mapping is empty
        return v if isinstance(v, dict) else {}

    @property
    def is_available(self) -> bool:
        return self.published and not self.out_of_stock

    def to_payload(self) -> dict[str, Any]:
        """Full record for create/update requests."""
        return self.model_dump(by_alias=True, exclude={"id"}, mode="json")


class ProductFilters(BaseModel):
    """Server-side product filters."""
    search: Optional[str] = None
    category: Optional[Category] = None
    min_price: Optional[float] = Field(default=None, ge=0)
    max_price: Optional[float] = Field(default=None, ge=0)

    def to_params(self) -> dict[str, str]:
        params = {}
        if self.search:
            params["search"] = self.search
        if self.category:
            params["category"] = self.category.value
        if self.min_price is not None:
            params["minPrice"] = str(self.min_price)
        if self.max_price is not None:
            params["maxPrice"] = str(self.max_price)
        return params


# =============================================================================
# ORDERS
# =============================================================================

class OrderItemOption(BaseModel):
    """One chosen option of an ordered item."""
    model_config = ConfigDict(populate_by_name=True)

    label: str
    value: str
    price_modifier: float = Field(default=0.0, alias="priceModifier")


class OrderItem(BaseModel):
    """Single line of an order."""
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, max_length=100)
    quantity: int = Field(..., ge=1, examples=[2])
    price: float = Field(..., description="Unit price including option modifiers")
    product_id: Optional[str] = Field(default=None, alias="productId")
    options: List[OrderItemOption] = Field(default_factory=list)
    notes: Optional[str] = Field(default=None, max_length=200)


class CustomerInfo(BaseModel):
    """Customer details collected at checkout."""
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100, examples=["Ana Pérez"])
    delivery_type: DeliveryType = Field(default=DeliveryType.PICKUP, alias="deliveryType")
    address: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=30)
    note: Optional[str] = Field(default=None, max_length=500)

    @model_validator(mode="after")
    def validate_address(self) -> "CustomerInfo":
        if self.delivery_type == DeliveryType.DELIVERY and not self.address:
            raise ValueError("Address is required for delivery orders")
        if self.delivery_type == DeliveryType.PICKUP:
            self.address = None
        return self


class OrderCreate(BaseModel):
    """Request schema for submitting an order."""
    items: List[OrderItem] = Field(..., min_length=1)
    customer: CustomerInfo
    total: int = Field(..., ge=0)
    status: OrderStatus = Field(default=OrderStatus.PENDING)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class OrderResponse(BaseModel):
    """An order as returned by the API."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., validation_alias=AliasChoices("orderId", "_id", "id"))
    items: List[OrderItem] = Field(default_factory=list)
    customer: dict[str, Any] = Field(default_factory=dict)
    total: float = 0
    status: OrderStatus = OrderStatus.PENDING
    created_at: Optional[datetime] = Field(
        default=None,
        validation_alias=AliasChoices("createdAt", "created_at"),
    )

    @field_validator("id", mode="before")
    @classmethod
    def validate_id(cls, v: Any) -> str:
        return str(v)


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


# =============================================================================
# AUTH
# =============================================================================

class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    token: str
