"""
Price Calculator

Derives a product's final price from its base price and the choice
selected in each enabled choice group.

Intermediate prices are left unrounded; rounding to the whole currency
unit happens once, through round_amount(), when a cart or order total
is displayed or submitted.

Author: Khalil Bannouri
Version: 1.0.0
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Mapping, Union

from storefront.options.catalog import Category, label_for
from storefront.options.models import ChoiceGroup, OptionMap

Selections = Mapping[str, str]


@dataclass(frozen=True)
class SelectedOption:
    """A resolved selection, as shown in the cart and sent with an order."""
    key: str
    label: str
    value: str
    price_modifier: float

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "value": self.value,
            "priceModifier": self.price_modifier,
        }


def _active_groups(options: OptionMap):
    for key, group in options.items():
        if isinstance(group, ChoiceGroup) and group.enabled and group.choices:
            yield key, group


def compute_final_price(
    base_price: float,
    options: OptionMap,
    selections: Selections,
) -> float:
    """
    Base price plus the modifier of every selected choice.

    Only enabled choice groups contribute. A group with no selection, or a
    selection naming no existing choice, adds nothing. Flag groups never
    contribute.
    """
    total = float(base_price)
    for key, group in _active_groups(options):
        choice = group.find(selections.get(key))
        if choice is not None:
            total += choice.price_modifier
    return total


def price_difference(
    base_price: float,
    options: OptionMap,
    selections: Selections,
) -> float:
    """Signed difference between the final and the base price."""
    return compute_final_price(base_price, options, selections) - float(base_price)


def initial_selections(options: OptionMap) -> dict[str, str]:
    """
    Selections a product opens with.

    Default-optional groups (beverage, custom) start on their default
    choice if one is marked, otherwise on nothing. Every other group starts
    on its default choice, or on its first choice when none is marked.
    """
    selections: dict[str, str] = {}
    for key, group in _active_groups(options):
        default = group.default_choice()
        if group.requires_default:
            selections[key] = (default or group.choices[0]).name
        elif default is not None:
            selections[key] = default.name
    return selections


def describe_selections(
    options: OptionMap,
    selections: Selections,
    category: Union[str, Category],
) -> list[SelectedOption]:
    """Resolve selections to labelled options, in option map order."""
    described = []
    for key, group in _active_groups(options):
        choice = group.find(selections.get(key))
        if choice is None or choice.is_sentinel:
            continue
        described.append(SelectedOption(
            key=key,
            label=label_for(category, key),
            value=choice.name,
            price_modifier=choice.price_modifier,
        ))
    return described


def round_amount(value: float) -> int:
    """Round a monetary value to the nearest whole unit (half up)."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
