"""
Product Options

Per-category option schemas, the typed option model, merging of persisted
option data, and the admin editing rules.

Usage:
    from storefront.options import OptionEditor, merge_options, schema_for

    editor = OptionEditor("pizzas")
    editor.set_enabled("portion", True)
"""

from storefront.options.models import (
    SENTINEL_CHOICE_NAME,
    Choice,
    ChoiceGroup,
    FlagGroup,
    GroupKind,
    OptionGroup,
    OptionMap,
    copy_option_map,
    option_map_to_dict,
)
from storefront.options.catalog import (
    BEVERAGE_KEY,
    CUSTOM_KEY,
    Category,
    OptionGroupDescriptor,
    default_options_for,
    descriptor_for,
    kind_for,
    label_for,
    parse_category,
    schema_for,
)
from storefront.options.merger import (
    coerce_bool,
    coerce_number,
    merge_options,
    parse_options,
)
from storefront.options.editor import (
    EditResult,
    GroupState,
    OptionEditor,
    ValidationIssue,
    normalize_options,
)

__all__ = [
    # Model
    "SENTINEL_CHOICE_NAME",
    "Choice",
    "ChoiceGroup",
    "FlagGroup",
    "GroupKind",
    "OptionGroup",
    "OptionMap",
    "copy_option_map",
    "option_map_to_dict",
    # Catalog
    "BEVERAGE_KEY",
    "CUSTOM_KEY",
    "Category",
    "OptionGroupDescriptor",
    "default_options_for",
    "descriptor_for",
    "kind_for",
    "label_for",
    "parse_category",
    "schema_for",
    # Merger
    "coerce_bool",
    "coerce_number",
    "merge_options",
    "parse_options",
    # Editor
    "EditResult",
    "GroupState",
    "OptionEditor",
    "ValidationIssue",
    "normalize_options",
]
