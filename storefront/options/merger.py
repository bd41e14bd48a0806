"""
Option State Merger

Turns persisted option data (possibly partial, malformed, or written for
an older version of a category schema) into a typed OptionMap.

Two entry points:
    - parse_options(): the storefront view of a product, exactly what was
      persisted, typed and coerced.
    - merge_options(): the admin editing view, completed against the
      category's seeded defaults so every schema group can be rendered.

Malformed numbers coerce to 0 and malformed booleans to False; nothing
here raises on bad catalog data.

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
import math
from typing import Any, Mapping, Optional, Union

from storefront.options.catalog import Category, default_options_for, kind_for, parse_category
from storefront.options.models import (
    Choice,
    ChoiceGroup,
    FlagGroup,
    GroupKind,
    OptionGroup,
    OptionMap,
)

logger = logging.getLogger(__name__)


# =============================================================================
# COERCION
# =============================================================================

def coerce_number(value: Any) -> float:
    """Numeric value of a persisted field; anything unparseable becomes 0."""
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return 0.0
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


def coerce_bool(value: Any) -> bool:
    """Boolean value of a persisted field; anything unrecognised becomes False."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    if isinstance(value, (int, float)):
        return value == 1
    return False


def parse_choice(raw: Any) -> Choice:
    if not isinstance(raw, Mapping):
        return Choice()
    name = raw.get("name")
    return Choice(
        name=name if isinstance(name, str) else "",
        price_modifier=coerce_number(raw.get("priceModifier")),
        is_default=coerce_bool(raw.get("isDefault")),
    )


def _has_choices(raw: Any) -> bool:
    return isinstance(raw, Mapping) and isinstance(raw.get("choices"), list)


def _is_flag_shaped(raw: Any) -> bool:
    return (
        isinstance(raw, Mapping)
        and "choices" not in raw
        and ("priceModifier" in raw or "default" in raw)
    )


def _parse_flag(raw: Mapping, fallback_default: bool = True) -> FlagGroup:
    return FlagGroup(
        enabled=coerce_bool(raw.get("enabled", False)),
        price_modifier=coerce_number(raw.get("priceModifier")),
        default=coerce_bool(raw["default"]) if "default" in raw else fallback_default,
    )


# =============================================================================
# STOREFRONT VIEW
# =============================================================================

def parse_options(raw_options: Any, category: Union[str, Category]) -> OptionMap:
    """
    Type the option map of a product as persisted.

    Every stored group is kept, including the synthesized "None" choice of
    free-form groups. Entries that are neither choice- nor flag-shaped are
    skipped.
    """
    if not isinstance(raw_options, Mapping):
        return {}

    options: OptionMap = {}
    for key, raw in raw_options.items():
        if _has_choices(raw):
            options[key] = ChoiceGroup(
                kind=kind_for(category, key),
                enabled=coerce_bool(raw.get("enabled", False)),
                choices=[parse_choice(c) for c in raw["choices"]],
            )
        elif _is_flag_shaped(raw):
            options[key] = _parse_flag(raw)
        else:
            logger.debug(f"Skipping malformed option group '{key}'")
    return options


# =============================================================================
# EDITING VIEW
# =============================================================================

def _merge_group(key: str, seeded: OptionGroup, saved: Any) -> OptionGroup:
    if _has_choices(saved) and saved["choices"]:
        kind = seeded.kind if isinstance(seeded, ChoiceGroup) else GroupKind.REQUIRED_CHOICE
        choices = [parse_choice(c) for c in saved["choices"]]
        if kind.is_free_form:
            choices = [c for c in choices if not c.is_sentinel]
        return ChoiceGroup(
            kind=kind,
            enabled=coerce_bool(saved.get("enabled", False)),
            choices=choices,
        )

    if _is_flag_shaped(saved):
        fallback = seeded.default if isinstance(seeded, FlagGroup) else True
        return _parse_flag(saved, fallback_default=fallback)

    return seeded


def merge_options(saved: Optional[Any], category: Union[str, Category]) -> OptionMap:
    """
    Complete option map for editing a product.

    For each group of the category's seeded defaults:
        - no saved entry: the seeded group, verbatim
        - saved choice list: saved ``enabled`` and choices, coerced; the
          synthesized "None" default of beverage/custom groups is dropped
        - saved flag entry: saved ``enabled``, modifier and ``default``
          (falling back to the seeded flag's default)

    Saved keys outside the category schema are dropped.

    Args:
        saved: Option map as persisted (may be None, empty or malformed)
        category: Product category

    Returns:
        OptionMap with every schema key, including beverage and custom
    """
    category = parse_category(category)
    defaults = default_options_for(category)
    saved = saved if isinstance(saved, Mapping) else {}

    merged: OptionMap = {}
    for key, seeded in defaults.items():
        merged[key] = _merge_group(key, seeded, saved.get(key)) if key in saved else seeded

    dropped = [key for key in saved if key not in merged]
    if dropped:
        logger.debug(f"Dropping option groups outside the {category.value} schema: {dropped}")

    return merged
