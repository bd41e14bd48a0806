"""
Admin Option Editor

Mutation and validation rules for authoring one product's option map.

Each choice group moves through:

    DISABLED ──enable──▶ ENABLED_NO_DEFAULT ──mark default──▶ ENABLED_VALID

Rules enforced on every edit:
    - Enabling/disabling never touches the choices.
    - Only the free-form groups (beverage, custom) grow or shrink.
    - Marking a choice as default clears the previous default and zeroes
      the new default's modifier; the previous default keeps its modifier.
    - A default-required group cannot lose its only default; the admin
      must mark another choice first.
    - A free-form group cannot drop its only default while other
      choices remain.
    - The default choice's modifier is not editable.

Rejected edits return EditResult(ok=False, message=...) and leave the
option map untouched; nothing here raises for a rule violation.

Usage:
    editor = OptionEditor.for_product(product)
    editor.set_enabled("size", True)
    result = editor.mark_default("size", 1)
    if not result.ok:
        show(result.message)
    payload = editor.to_payload()

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional, Union

from storefront.options.catalog import (
    BEVERAGE_KEY,
    CUSTOM_KEY,
    Category,
    OptionGroupDescriptor,
    default_options_for,
    label_for,
    parse_category,
    schema_for,
)
from storefront.options.merger import coerce_number, merge_options
from storefront.options.models import (
    SENTINEL_CHOICE_NAME,
    Choice,
    ChoiceGroup,
    FlagGroup,
    OptionGroup,
    OptionMap,
    copy_option_map,
)

if TYPE_CHECKING:
    from storefront.schemas import Product

logger = logging.getLogger(__name__)


# =============================================================================
# MESSAGES
# =============================================================================

MSG_SOLE_DEFAULT = (
    "There must be at least one choice marked as default. "
    "Mark another choice first."
)
MSG_REMOVE_SOLE_DEFAULT = (
    "You cannot remove the only choice marked as default. "
    "Mark another choice as default first."
)
MSG_NOT_FREE_FORM = "Choices can only be added or removed in free-form groups"
MSG_DEFAULT_MODIFIER_LOCKED = "The default choice is the price baseline and carries no modifier"
MSG_NOT_CHOICE_GROUP = "This option has no choices"
MSG_NOT_FLAG_GROUP = "This option is not a simple toggle"


@dataclass(frozen=True)
class EditResult:
    """Outcome of a single edit."""
    ok: bool
    message: Optional[str] = None

    @classmethod
    def accepted(cls) -> "EditResult":
        return cls(ok=True)

    @classmethod
    def rejected(cls, message: str) -> "EditResult":
        return cls(ok=False, message=message)


@dataclass(frozen=True)
class ValidationIssue:
    """A rule the option map currently violates."""
    key: str
    label: str
    message: str


class GroupState(str, Enum):
    DISABLED = "disabled"
    ENABLED_NO_DEFAULT = "enabled-no-default"
    ENABLED_MULTIPLE_DEFAULTS = "enabled-multiple-defaults"
    ENABLED_VALID = "enabled-valid"


def _named(choices: list[Choice]) -> list[Choice]:
    return [c for c in choices if c.name.strip()]


class OptionEditor:
    """
    Editing state over one product's option map.

    Attributes:
        category: Category whose schema the options follow
        options: The option map being authored
    """

    def __init__(
        self,
        category: Union[str, Category],
        options: Optional[OptionMap] = None,
    ):
        self.category = parse_category(category)
        self.options: OptionMap = (
            copy_option_map(options) if options is not None
            else default_options_for(self.category)
        )

    @classmethod
    def for_product(cls, product: "Product") -> "OptionEditor":
        """Editor over a persisted product, merged against its category seed."""
        return cls(product.category, merge_options(product.options, product.category))

    @property
    def descriptors(self) -> list[OptionGroupDescriptor]:
        return schema_for(self.category)

    # =========================================================================
    # ACCESSORS
    # =========================================================================

    def group(self, key: str) -> OptionGroup:
        try:
            return self.options[key]
        except KeyError:
            raise KeyError(f"No option group '{key}' for category {self.category.value}")

    def _choice_group(self, key: str) -> Optional[ChoiceGroup]:
        group = self.group(key)
        return group if isinstance(group, ChoiceGroup) else None

    def _choice(self, group: ChoiceGroup, index: int) -> Choice:
        if not 0 <= index < len(group.choices):
            raise IndexError(f"Choice {index} out of range ({len(group.choices)} choices)")
        return group.choices[index]

    def state(self, key: str) -> GroupState:
        group = self.group(key)
        if not group.enabled:
            return GroupState.DISABLED
        if isinstance(group, FlagGroup):
            return GroupState.ENABLED_VALID

        defaults = sum(1 for c in _named(group.choices) if c.is_default)
        if defaults > 1:
            return GroupState.ENABLED_MULTIPLE_DEFAULTS
        if defaults == 0 and group.requires_default and _named(group.choices):
            return GroupState.ENABLED_NO_DEFAULT
        return GroupState.ENABLED_VALID

    # =========================================================================
    # GROUP EDITS
    # =========================================================================

    def set_enabled(self, key: str, enabled: bool) -> EditResult:
        """Enable or disable a group; its choices are kept either way."""
        self.group(key).enabled = bool(enabled)
        logger.debug(f"Option '{key}' enabled={bool(enabled)}")
        return EditResult.accepted()

    def set_flag_modifier(self, key: str, value: Any) -> EditResult:
        group = self.group(key)
        if not isinstance(group, FlagGroup):
            return self._reject(key, MSG_NOT_FLAG_GROUP)
        group.price_modifier = coerce_number(value)
        return EditResult.accepted()

    def set_flag_default(self, key: str, default: bool) -> EditResult:
        group = self.group(key)
        if not isinstance(group, FlagGroup):
            return self._reject(key, MSG_NOT_FLAG_GROUP)
        group.default = bool(default)
        return EditResult.accepted()

    # =========================================================================
    # CHOICE EDITS
    # =========================================================================

    def add_choice(self, key: str) -> EditResult:
        """Append a blank choice to a beverage or custom group."""
        group = self._choice_group(key)
        if group is None or not group.is_free_form:
            return self._reject(key, MSG_NOT_FREE_FORM)
        group.choices.append(Choice(name="", price_modifier=0.0, is_default=False))
        logger.debug(f"Option '{key}': added choice #{len(group.choices) - 1}")
        return EditResult.accepted()

    def remove_choice(self, key: str, index: int) -> EditResult:
        group = self._choice_group(key)
        if group is None or not group.is_free_form:
            return self._reject(key, MSG_NOT_FREE_FORM)
        choice = self._choice(group, index)
        if choice.is_default and len(group.default_indexes()) == 1 and len(group.choices) > 1:
            return self._reject(key, MSG_REMOVE_SOLE_DEFAULT)
        group.choices.pop(index)
        logger.debug(f"Option '{key}': removed choice '{choice.name}'")
        return EditResult.accepted()

    def set_choice_name(self, key: str, index: int, name: str) -> EditResult:
        group = self._choice_group(key)
        if group is None:
            return self._reject(key, MSG_NOT_CHOICE_GROUP)
        self._choice(group, index).name = name if isinstance(name, str) else ""
        return EditResult.accepted()

    def set_price_modifier(self, key: str, index: int, value: Any) -> EditResult:
        """Set a non-default choice's modifier (any signed number)."""
        group = self._choice_group(key)
        if group is None:
            return self._reject(key, MSG_NOT_CHOICE_GROUP)
        choice = self._choice(group, index)
        if choice.is_default:
            return self._reject(key, MSG_DEFAULT_MODIFIER_LOCKED)
        choice.price_modifier = coerce_number(value)
        return EditResult.accepted()

    def set_subtracts(self, key: str, index: int, subtracts: bool) -> EditResult:
        """Make a non-default choice's modifier a discount or a surcharge."""
        group = self._choice_group(key)
        if group is None:
            return self._reject(key, MSG_NOT_CHOICE_GROUP)
        choice = self._choice(group, index)
        if choice.is_default:
            return self._reject(key, MSG_DEFAULT_MODIFIER_LOCKED)
        magnitude = abs(choice.price_modifier)
        choice.price_modifier = -magnitude if subtracts else magnitude
        return EditResult.accepted()

    def mark_default(self, key: str, index: int) -> EditResult:
        """
        Make a choice the group's only default and zero its modifier.

        The previous default loses its flag but keeps its stored modifier.
        """
        group = self._choice_group(key)
        if group is None:
            return self._reject(key, MSG_NOT_CHOICE_GROUP)
        target = self._choice(group, index)
        for choice in group.choices:
            choice.is_default = choice is target
        target.price_modifier = 0.0
        logger.debug(f"Option '{key}': default is now '{target.name}'")
        return EditResult.accepted()

    def unmark_default(self, key: str, index: int) -> EditResult:
        """
        Clear a choice's default flag.

        Rejected when it is the only default of a default-required group.
        """
        group = self._choice_group(key)
        if group is None:
            return self._reject(key, MSG_NOT_CHOICE_GROUP)
        choice = self._choice(group, index)
        if not choice.is_default:
            return EditResult.accepted()
        if group.requires_default and len(group.default_indexes()) == 1:
            return self._reject(key, MSG_SOLE_DEFAULT)
        choice.is_default = False
        logger.debug(f"Option '{key}': '{choice.name}' is no longer default")
        return EditResult.accepted()

    def toggle_default(self, key: str, index: int) -> EditResult:
        """Default button: unmark the sole default, otherwise mark this choice."""
        group = self._choice_group(key)
        if group is None:
            return self._reject(key, MSG_NOT_CHOICE_GROUP)
        choice = self._choice(group, index)
        if choice.is_default and len(group.default_indexes()) == 1:
            return self.unmark_default(key, index)
        return self.mark_default(key, index)

    # =========================================================================
    # CATEGORY
    # =========================================================================

    def change_category(self, category: Union[str, Category]) -> None:
        """Reseed for another category, keeping the beverage and custom groups."""
        category = parse_category(category)
        options = default_options_for(category)
        for key in (BEVERAGE_KEY, CUSTOM_KEY):
            if key in self.options:
                options[key] = self.options[key]
        self.category = category
        self.options = options
        logger.debug(f"Option editor switched to {category.value}")

    # =========================================================================
    # VALIDATION & PAYLOAD
    # =========================================================================

    def validate(self) -> list[ValidationIssue]:
        """Issues that block saving."""
        issues = []
        for key in self.options:
            state = self.state(key)
            if state == GroupState.ENABLED_NO_DEFAULT:
                message = "This option requires one choice marked as default"
            elif state == GroupState.ENABLED_MULTIPLE_DEFAULTS:
                message = "Only one choice can be marked as default"
            else:
                continue
            issues.append(ValidationIssue(key=key, label=label_for(self.category, key), message=message))
        return issues

    @property
    def is_valid(self) -> bool:
        return not self.validate()

    def to_payload(self) -> dict[str, Any]:
        return normalize_options(self.options)

    def _reject(self, key: str, message: str) -> EditResult:
        logger.info(f"Option '{key}': edit rejected - {message}")
        return EditResult.rejected(message)


def normalize_options(options: OptionMap) -> dict[str, Any]:
    """
    Option map as persisted on save.

    - Choices with blank names are dropped and names are trimmed.
    - A beverage/custom group left without a default gets a leading
      "None" default choice with no modifier.
    - Choice groups are kept only when enabled with at least one choice;
      flag groups only when enabled.
    """
    payload: dict[str, Any] = {}

    for key, group in options.items():
        if isinstance(group, FlagGroup):
            if group.enabled:
                payload[key] = {
                    "enabled": True,
                    "priceModifier": group.price_modifier,
                    "default": group.default,
                }
            continue

        choices = [
            Choice(name=c.name.strip(), price_modifier=c.price_modifier, is_default=c.is_default)
            for c in _named(group.choices)
        ]
        if not group.enabled or not choices:
            continue
        if group.is_free_form and not any(c.is_default for c in choices):
            choices.insert(0, Choice(name=SENTINEL_CHOICE_NAME, price_modifier=0.0, is_default=True))

        payload[key] = {
            "enabled": True,
            "choices": [c.to_dict() for c in choices],
        }

    return payload
