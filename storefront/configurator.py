"""
Product Configurator

Selection state of one product while a customer configures it. Opens on
the default selections and re-derives the price after every change.

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
from typing import Optional

from storefront.options.merger import parse_options
from storefront.options.models import ChoiceGroup, OptionMap
from storefront.pricing import (
    SelectedOption,
    compute_final_price,
    describe_selections,
    initial_selections,
    price_difference,
)
from storefront.schemas import Product

logger = logging.getLogger(__name__)


class ProductConfigurator:
    """
    Per-product selection state.

    Example:
        >>> view = ProductConfigurator(product)
        >>> view.select("size", "Large")
        >>> view.final_price
        5200.0
    """

    def __init__(self, product: Product):
        self.product = product
        self.options: OptionMap = parse_options(product.options, product.category)
        self.selections: dict[str, str] = initial_selections(self.options)

    @property
    def has_options(self) -> bool:
        return any(group.enabled for group in self.options.values())

    def visible_groups(self) -> list[tuple[str, ChoiceGroup]]:
        """Enabled choice groups with at least one choice, in display order."""
        return [
            (key, group) for key, group in self.options.items()
            if isinstance(group, ChoiceGroup) and group.enabled and group.choices
        ]

    def _visible_group(self, key: str) -> ChoiceGroup:
        group = dict(self.visible_groups()).get(key)
        if group is None:
            raise KeyError(f"'{self.product.name}' has no selectable option '{key}'")
        return group

    def select(self, key: str, name: str) -> None:
        """Select a choice by name."""
        group = self._visible_group(key)
        if group.find(name) is None:
            raise ValueError(f"Option '{key}' has no choice named '{name}'")
        self.selections[key] = name

    def clear(self, key: str) -> bool:
        """
        Deselect a default-optional group.

        Returns:
            False when the group requires a selection (nothing changes)
        """
        group = self._visible_group(key)
        if group.requires_default:
            return False
        self.selections.pop(key, None)
        return True

    def selected(self, key: str) -> Optional[str]:
        return self.selections.get(key)

    @property
    def base_price(self) -> float:
        return self.product.price

    @property
    def final_price(self) -> float:
        return compute_final_price(self.product.price, self.options, self.selections)

    @property
    def price_difference(self) -> float:
        return price_difference(self.product.price, self.options, self.selections)

    def selected_options(self) -> list[SelectedOption]:
        return describe_selections(self.options, self.selections, self.product.category)

    @property
    def can_add_to_cart(self) -> bool:
        return not self.product.out_of_stock
