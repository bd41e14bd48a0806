"""
Option Schema Catalog

Static, category-keyed definitions of which option groups apply to a
product category and how each group behaves.

Every category maps through CATEGORY_SCHEMAS to a fixed tuple of
OptionGroupDescriptor; the two universal groups (beverage and custom)
are appended to every category. A category missing from the lookup
table fails at import time instead of silently falling back.

Author: Khalil Bannouri
Version: 1.0.0
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from storefront.options.models import (
    Choice,
    ChoiceGroup,
    FlagGroup,
    GroupKind,
    OptionMap,
)


class Category(str, Enum):
    """Product categories offered by the storefront."""
    HAMBURGERS = "hamburgers"
    PIZZAS = "pizzas"
    STEAK_SANDWICHES = "steak-sandwiches"
    EMPANADAS = "empanadas"
    TACOS = "tacos"
    BURRITOS = "burritos"
    SALADS = "salads"
    APPETIZERS = "appetizers"
    BEVERAGES = "beverages"


@dataclass(frozen=True)
class OptionGroupDescriptor:
    """
    Describes one option group of a category schema.

    Attributes:
        key: Option map key (e.g. "size")
        label: Display label for editors and order summaries
        kind: Group shape and default rule
        help: Optional help text shown in the admin editor
    """
    key: str
    label: str
    kind: GroupKind
    help: Optional[str] = None

    @property
    def requires_default(self) -> bool:
        return self.kind.requires_default


# =============================================================================
# UNIVERSAL GROUPS
# =============================================================================

BEVERAGE_KEY = "beverage"
CUSTOM_KEY = "custom"

UNIVERSAL_DESCRIPTORS = (
    OptionGroupDescriptor(
        key=BEVERAGE_KEY,
        label="Optional beverage",
        kind=GroupKind.BEVERAGE,
        help="Lets customers add a drink to the order. Add as many drinks as you want, each with its own price.",
    ),
    OptionGroupDescriptor(
        key=CUSTOM_KEY,
        label="Custom option",
        kind=GroupKind.CUSTOM,
        help="Fully custom choices. Add or remove choices and optionally mark one as the default.",
    ),
)


# =============================================================================
# CATEGORY SCHEMAS
# =============================================================================

def _required(key: str, label: str) -> OptionGroupDescriptor:
    return OptionGroupDescriptor(key=key, label=label, kind=GroupKind.REQUIRED_CHOICE)


CATEGORY_SCHEMAS: dict[Category, tuple[OptionGroupDescriptor, ...]] = {
    Category.HAMBURGERS: (
        _required("withSide", "With/without fries"),
        _required("type", "Type (Classic/Complete)"),
    ),
    Category.STEAK_SANDWICHES: (
        _required("withSide", "With/without fries"),
        _required("size", "Size (Simple/Complete)"),
    ),
    Category.PIZZAS: (
        _required("portion", "Portion (Whole/Half)"),
    ),
    Category.EMPANADAS: (
        _required("quantity", "Quantity"),
    ),
    Category.TACOS: (
        _required("quantity", "Quantity"),
    ),
    Category.BURRITOS: (
        _required("size", "Size (Regular/Large)"),
    ),
    Category.SALADS: (
        _required("size", "Size (Individual/Family)"),
    ),
    Category.APPETIZERS: (),
    Category.BEVERAGES: (
        _required("size", "Size (Small/Medium/Large)"),
    ),
}

# Starter choices per (category, key): (name, is_default)
SEED_CHOICES: dict[Category, dict[str, tuple[tuple[str, bool], ...]]] = {
    Category.HAMBURGERS: {
        "withSide": (("With fries", True), ("Without fries", False)),
        "type": (("Classic", True), ("Complete", False)),
    },
    Category.STEAK_SANDWICHES: {
        "withSide": (("Without fries", True), ("With fries", False)),
        "size": (("Simple", True), ("Complete", False)),
    },
    Category.PIZZAS: {
        "portion": (("Whole", True), ("Half", False)),
    },
    Category.EMPANADAS: {
        "quantity": (("Single", False), ("Half dozen", False), ("Dozen", True)),
    },
    Category.TACOS: {
        "quantity": (("1 unit", True), ("2 units", False), ("3 units", False)),
    },
    Category.BURRITOS: {
        "size": (("Regular", True), ("Large", False)),
    },
    Category.SALADS: {
        "size": (("Individual", True), ("Family", False)),
    },
    Category.APPETIZERS: {},
    Category.BEVERAGES: {
        "size": (("Small", True), ("Medium", False), ("Large", False)),
    },
}

_unmapped = set(Category) - set(CATEGORY_SCHEMAS)
if _unmapped:
    raise RuntimeError(f"Categories without an option schema: {sorted(c.value for c in _unmapped)}")


# =============================================================================
# LOOKUPS
# =============================================================================

def parse_category(value: Union[str, Category]) -> Category:
    """
    Resolve a category value.

    Raises:
        ValueError: If the value names no known category
    """
    if isinstance(value, Category):
        return value
    try:
        return Category(value)
    except ValueError:
        valid = [c.value for c in Category]
        raise ValueError(f"Unknown category '{value}'. Must be one of: {valid}")


def schema_for(category: Union[str, Category]) -> list[OptionGroupDescriptor]:
    """
    Ordered option group descriptors for a category.

    The universal beverage and custom descriptors are always appended.
    """
    category = parse_category(category)
    return [*CATEGORY_SCHEMAS[category], *UNIVERSAL_DESCRIPTORS]


def descriptor_for(category: Union[str, Category], key: str) -> Optional[OptionGroupDescriptor]:
    return next((d for d in schema_for(category) if d.key == key), None)


def kind_for(category: Union[str, Category], key: str) -> GroupKind:
    """
    Group kind for a key of a category's option map.

    Keys the schema does not declare are treated as default-required
    choice groups, except the universal free-form keys.
    """
    if key == BEVERAGE_KEY:
        return GroupKind.BEVERAGE
    if key == CUSTOM_KEY:
        return GroupKind.CUSTOM
    descriptor = descriptor_for(category, key)
    return descriptor.kind if descriptor else GroupKind.REQUIRED_CHOICE


def label_for(category: Union[str, Category], key: str) -> str:
    descriptor = descriptor_for(category, key)
    return descriptor.label if descriptor else key


def default_options_for(category: Union[str, Category]) -> OptionMap:
    """
    Seeded option map for a category.

    Every schema group is present and disabled. Default-required groups
    ship with their starter choices (exactly one marked default); the
    free-form beverage and custom groups ship empty.
    """
    category = parse_category(category)
    seeds = SEED_CHOICES[category]
    options: OptionMap = {}

    for descriptor in schema_for(category):
        if descriptor.kind is GroupKind.FLAG:
            options[descriptor.key] = FlagGroup(enabled=False, price_modifier=0.0, default=True)
            continue
        choices = [
            Choice(name=name, price_modifier=0.0, is_default=is_default)
            for name, is_default in seeds.get(descriptor.key, ())
        ]
        options[descriptor.key] = ChoiceGroup(kind=descriptor.kind, enabled=False, choices=choices)

    return options
