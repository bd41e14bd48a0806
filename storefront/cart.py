"""
Cart Aggregator

Groups configured products into cart lines. Two additions land on the same
line when the product and the full selection map are equal; the selection
map is compared through a canonical, key-sorted serialization.

Line indexes are positions, not identifiers: removing a line shifts every
later line down by one.

Author: Khalil Bannouri
Version: 1.0.0
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Mapping, Optional

from storefront.options.merger import parse_options
from storefront.pricing import (
    SelectedOption,
    compute_final_price,
    describe_selections,
    round_amount,
)
from storefront.schemas import Product

logger = logging.getLogger(__name__)


def selection_fingerprint(selections: Mapping[str, str]) -> str:
    """Canonical form of a selection map; equal maps give equal strings."""
    return json.dumps(dict(selections), sort_keys=True, separators=(",", ":"), ensure_ascii=False)


@dataclass
class CartLine:
    """
    One distinct product + selection combination.

    Attributes:
        product_id: Identity of the product
        name: Product name at the time it was added
        selections: Chosen choice name per option group
        final_price: Unrounded unit price including modifiers
        options: Labelled selections, for display and order items
        quantity: Units on this line (>= 1)
    """
    product_id: Optional[str]
    name: str
    selections: dict[str, str]
    final_price: float
    options: list[SelectedOption] = field(default_factory=list)
    quantity: int = 1
    notes: Optional[str] = None

    @property
    def fingerprint(self) -> str:
        return selection_fingerprint(self.selections)

    @property
    def line_total(self) -> float:
        return self.final_price * self.quantity

    def matches(self, product_id: Optional[str], selections: Mapping[str, str]) -> bool:
        return self.product_id == product_id and self.fingerprint == selection_fingerprint(selections)


class Cart:
    """Session-local cart. Not persisted."""

    def __init__(self):
        self.lines: list[CartLine] = []

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self):
        return iter(self.lines)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def item_count(self) -> int:
        """Units across all lines."""
        return sum(line.quantity for line in self.lines)

    def add(self, product: Product, selections: Mapping[str, str]) -> CartLine:
        """
        Add one unit of a configured product.

        Increments the matching line if there is one, otherwise appends a
        new line with quantity 1.

        Returns:
            The line that received the unit
        """
        selections = dict(selections)
        for line in self.lines:
            if line.matches(product.id, selections):
                line.quantity += 1
                logger.debug(f"Cart: {product.name} x{line.quantity}")
                return line

        options = parse_options(product.options, product.category)
        line = CartLine(
            product_id=product.id,
            name=product.name,
            selections=selections,
            final_price=compute_final_price(product.price, options, selections),
            options=describe_selections(options, selections, product.category),
        )
        self.lines.append(line)
        logger.debug(f"Cart: added {product.name} at {line.final_price}")
        return line

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.lines):
            raise IndexError(f"Cart line {index} out of range (cart has {len(self.lines)} lines)")

    def update_quantity(self, index: int, quantity: int) -> None:
        """Set a line's quantity; zero or less removes the line."""
        self._check_index(index)
        if quantity <= 0:
            self.remove(index)
            return
        self.lines[index].quantity = quantity

    def remove(self, index: int) -> CartLine:
        """Delete a line; later lines shift down by one."""
        self._check_index(index)
        return self.lines.pop(index)

    def clear(self) -> None:
        self.lines = []

    def subtotal(self) -> float:
        """Unrounded sum of line totals."""
        return sum(line.line_total for line in self.lines)

    def total(self) -> int:
        """Order total, rounded once to the whole currency unit."""
        return round_amount(self.subtotal())
