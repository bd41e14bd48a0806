"""
Option Model

In-memory representation of a product's option configuration.

An OptionMap maps a group key ("type", "size", "beverage", ...) to one of
two group shapes:

    - ChoiceGroup: an ordered list of named choices, each with a signed
      price modifier and a default flag. Its GroupKind says whether the
      group needs exactly one default (REQUIRED_CHOICE), may have none
      (OPTIONAL_CHOICE), or is one of the free-form groups every category
      carries (BEVERAGE, CUSTOM).
    - FlagGroup: a legacy binary toggle with a single modifier.

Wire format (camelCase, as stored by the catalog API):

    {"enabled": true, "choices": [{"name": "L", "priceModifier": 5, "isDefault": false}]}
    {"enabled": true, "priceModifier": -3, "default": true}

Author: Khalil Bannouri
Version: 1.0.0
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union


SENTINEL_CHOICE_NAME = "None"


class GroupKind(str, Enum):
    """Shape and default rule of an option group."""
    FLAG = "flag"
    REQUIRED_CHOICE = "choice-required-default"
    OPTIONAL_CHOICE = "choice-optional-default"
    BEVERAGE = "free-form-beverage"
    CUSTOM = "free-form-custom"

    @property
    def requires_default(self) -> bool:
        return self is GroupKind.REQUIRED_CHOICE

    @property
    def is_free_form(self) -> bool:
        return self in (GroupKind.BEVERAGE, GroupKind.CUSTOM)

    @property
    def is_choice(self) -> bool:
        return self is not GroupKind.FLAG


@dataclass
class Choice:
    """One selectable value within a choice group."""
    name: str = ""
    price_modifier: float = 0.0
    is_default: bool = False

    @property
    def is_sentinel(self) -> bool:
        """True for the placeholder inserted when a free-form group has no default."""
        return (
            self.is_default
            and self.name == SENTINEL_CHOICE_NAME
            and self.price_modifier == 0
        )

    def copy(self) -> "Choice":
        return Choice(self.name, self.price_modifier, self.is_default)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "priceModifier": self.price_modifier,
            "isDefault": self.is_default,
        }


@dataclass
class ChoiceGroup:
    """
    An option group whose price contribution is driven by a selected choice.

    Attributes:
        kind: Default rule of the group (never GroupKind.FLAG)
        enabled: Whether the group is offered to customers
        choices: Ordered choices; order is the display order
    """
    kind: GroupKind = GroupKind.REQUIRED_CHOICE
    enabled: bool = False
    choices: list[Choice] = field(default_factory=list)

    def __post_init__(self):
        if self.kind is GroupKind.FLAG:
            raise ValueError("ChoiceGroup cannot have kind 'flag'")

    @property
    def requires_default(self) -> bool:
        return self.kind.requires_default

    @property
    def is_free_form(self) -> bool:
        return self.kind.is_free_form

    def default_indexes(self) -> list[int]:
        return [i for i, choice in enumerate(self.choices) if choice.is_default]

    def default_choice(self) -> Union[Choice, None]:
        return next((c for c in self.choices if c.is_default), None)

    def find(self, name: Union[str, None]) -> Union[Choice, None]:
        """Return the first choice called ``name``, if any."""
        if name is None:
            return None
        return next((c for c in self.choices if c.name == name), None)

    def copy(self) -> "ChoiceGroup":
        return ChoiceGroup(self.kind, self.enabled, [c.copy() for c in self.choices])

    def to_dict(self) -> dict:
        return {
            "enabled": self.enabled,
            "choices": [c.to_dict() for c in self.choices],
        }


@dataclass
class FlagGroup:
    """
    A binary toggle carrying one modifier.

    Kept for catalog entries written before toggles became two-choice
    groups. Flag groups never take part in the selection-driven price.
    """
    enabled: bool = False
    price_modifier: float = 0.0
    default: bool = True

    kind = GroupKind.FLAG

    def copy(self) -> "FlagGroup":
        return FlagGroup(self.enabled, self.price_modifier, self.default)

    def to_dict(self) -> dict:
        return {
            "enabled": self.enabled,
            "priceModifier": self.price_modifier,
            "default": self.default,
        }


OptionGroup = Union[ChoiceGroup, FlagGroup]
OptionMap = dict[str, OptionGroup]


def copy_option_map(options: OptionMap) -> OptionMap:
    """Deep copy of an option map."""
    return {key: group.copy() for key, group in options.items()}


def option_map_to_dict(options: OptionMap) -> dict[str, Any]:
    """Serialize every group as-is (no normalization)."""
    return {key: group.to_dict() for key, group in options.items()}
