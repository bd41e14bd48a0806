"""
Order Assembly

Turns a cart and the checkout form into the order submission payload,
and renders the plain-text summary handed to the messaging link.

Customer validation problems are returned as messages, never raised.

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from storefront.cart import Cart, CartLine
from storefront.schemas import (
    CustomerInfo,
    DeliveryType,
    OrderCreate,
    OrderItem,
    OrderItemOption,
    OrderStatus,
)

logger = logging.getLogger(__name__)

FIELD_LABELS = {
    "name": "Name",
    "deliveryType": "Delivery type",
    "address": "Address",
    "phone": "Phone",
    "note": "Note",
    "total": "Total",
    "items": "Items",
}


def _issues_from(error: ValidationError) -> list[str]:
    issues = []
    for err in error.errors():
        location = [str(part) for part in err.get("loc", ()) if part != "customer"]
        message = err.get("msg", "Invalid value").removeprefix("Value error, ")
        if location:
            field = FIELD_LABELS.get(location[-1], location[-1])
            issues.append(f"{field}: {message}")
        else:
            issues.append(message)
    return issues


def validate_customer(
    customer: Union[CustomerInfo, Mapping[str, Any]],
) -> tuple[Optional[CustomerInfo], list[str]]:
    """
    Validate checkout customer details.

    Returns:
        (CustomerInfo, []) when valid, (None, messages) otherwise
    """
    if isinstance(customer, CustomerInfo):
        return customer, []
    try:
        return CustomerInfo.model_validate(dict(customer)), []
    except ValidationError as e:
        return None, _issues_from(e)


def order_item_from_line(line: CartLine) -> OrderItem:
    return OrderItem(
        name=line.name,
        quantity=line.quantity,
        price=line.final_price,
        product_id=line.product_id,
        options=[
            OrderItemOption(label=o.label, value=o.value, price_modifier=o.price_modifier)
            for o in line.options
        ],
        notes=line.notes,
    )


def build_order(
    cart: Cart,
    customer: Union[CustomerInfo, Mapping[str, Any]],
) -> tuple[Optional[OrderCreate], list[str]]:
    """
    Assemble the order submission from the cart.

    The total is the cart total, rounded once. Status is always pending.

    Returns:
        (OrderCreate, []) on success, (None, messages) otherwise
    """
    if cart.is_empty:
        return None, ["Your cart is empty"]

    info, issues = validate_customer(customer)
    if info is None:
        logger.info(f"Checkout rejected: {issues}")
        return None, issues

    try:
        order = OrderCreate(
            items=[order_item_from_line(line) for line in cart],
            customer=info,
            total=cart.total(),
            status=OrderStatus.PENDING,
        )
    except ValidationError as e:
        issues = _issues_from(e)
        logger.info(f"Checkout rejected: {issues}")
        return None, issues
    return order, []


def format_order_message(
    order_id: str,
    order: OrderCreate,
    restaurant_name: str,
    currency: str = "ARS",
) -> str:
    """Plain-text order summary for the messaging handoff."""
    lines = [
        f"New order #{order_id} - {restaurant_name}",
        "",
    ]
    for item in order.items:
        lines.append(f"{item.quantity} x {item.name} ({currency} {item.price:.2f})")
        for option in item.options:
            modifier = ""
            if option.price_modifier:
                sign = "+" if option.price_modifier > 0 else "-"
                modifier = f" {sign}{abs(option.price_modifier):.2f}"
            lines.append(f"   - {option.label}: {option.value}{modifier}")
        if item.notes:
            lines.append(f"   Note: {item.notes}")

    customer = order.customer
    lines.append("")
    lines.append(f"Total: {currency} {order.total}")
    lines.append(f"Customer: {customer.name}")
    if customer.delivery_type == DeliveryType.DELIVERY:
        lines.append(f"Delivery to: {customer.address}")
    else:
        lines.append("Pickup at the store")
    if customer.phone:
        lines.append(f"Phone: {customer.phone}")
    if customer.note:
        lines.append(f"Note: {customer.note}")

    return "\n".join(lines)
