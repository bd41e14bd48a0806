# test_merger.py
import pytest

from storefront.options import (
    ChoiceGroup,
    FlagGroup,
    GroupKind,
    coerce_bool,
    coerce_number,
    default_options_for,
    merge_options,
    option_map_to_dict,
    parse_options,
)
from tests.conftest import choice


@pytest.mark.parametrize("saved", [None, {}, "garbage", []])
def test_missing_saved_map_yields_seed(saved):
    merged = merge_options(saved, "hamburgers")
    assert option_map_to_dict(merged) == option_map_to_dict(default_options_for("hamburgers"))


def test_saved_choices_replace_seed_and_are_coerced():
    saved = {
        "size": {
            "enabled": "true",
            "choices": [
                {"name": "Small", "priceModifier": "0", "isDefault": True},
                {"name": "Large", "priceModifier": "450.5"},
                {"name": "Huge", "priceModifier": "lots", "isDefault": "no"},
            ],
        },
    }
    group = merge_options(saved, "beverages")["size"]

    assert isinstance(group, ChoiceGroup)
    assert group.enabled is True
    assert [(c.name, c.price_modifier, c.is_default) for c in group.choices] == [
        ("Small", 0.0, True),
        ("Large", 450.5, False),
        ("Huge", 0.0, False),
    ]


def test_enabled_defaults_to_false():
    saved = {"portion": {"choices": [choice("Whole", 0, True)]}}
    assert merge_options(saved, "pizzas")["portion"].enabled is False


def test_untouched_groups_keep_their_seed():
    saved = {"withSide": {"enabled": True, "choices": [choice("With fries", 0, True)]}}
    merged = merge_options(saved, "hamburgers")

    assert merged["type"].enabled is False
    assert [c.name for c in merged["type"].choices] == ["Classic", "Complete"]


def test_empty_saved_choice_list_keeps_seed():
    saved = {"portion": {"enabled": True, "choices": []}}
    group = merge_options(saved, "pizzas")["portion"]
    assert [c.name for c in group.choices] == ["Whole", "Half"]


@pytest.mark.parametrize("key", ["beverage", "custom"])
def test_sentinel_is_stripped_from_free_form_groups(key):
    saved = {key: {"enabled": True, "choices": [choice("None", 0, True), choice("Cola", 1200)]}}
    group = merge_options(saved, "tacos")[key]

    assert group.kind.is_free_form
    assert [c.name for c in group.choices] == ["Cola"]
    assert group.default_indexes() == []


def test_real_none_choice_with_a_price_is_kept():
    saved = {"beverage": {"enabled": True, "choices": [choice("None", 100, True)]}}
    group = merge_options(saved, "tacos")["beverage"]
    assert [c.name for c in group.choices] == ["None"]


def test_universal_groups_merge_for_categories_without_own_groups():
    saved = {"custom": {"enabled": True, "choices": [choice("Extra cheese", 300)]}}
    merged = merge_options(saved, "appetizers")
    assert list(merged) == ["beverage", "custom"]
    assert merged["custom"].choices[0].price_modifier == 300


def test_keys_outside_schema_are_dropped():
    saved = {"portion": {"enabled": True, "choices": [choice("Slice", 0, True)]}}
    merged = merge_options(saved, "hamburgers")
    assert "portion" not in merged


def test_flag_shaped_entry_is_preserved():
    saved = {"withSide": {"enabled": True, "priceModifier": "-500"}}
    group = merge_options(saved, "hamburgers")["withSide"]

    assert isinstance(group, FlagGroup)
    assert group.enabled is True
    assert group.price_modifier == -500
    assert group.default is True


def test_flag_default_is_read_when_present():
    saved = {"withSide": {"enabled": False, "priceModifier": 200, "default": False}}
    group = merge_options(saved, "hamburgers")["withSide"]
    assert group.default is False


def test_merge_does_not_alias_saved_data():
    saved = {"portion": {"enabled": True, "choices": [choice("Whole", 0, True)]}}
    merged = merge_options(saved, "pizzas")
    merged["portion"].choices[0].name = "Changed"
    assert saved["portion"]["choices"][0]["name"] == "Whole"


def test_storefront_view_keeps_everything_stored():
    raw = {
        "beverage": {"enabled": True, "choices": [choice("None", 0, True), choice("Cola", 1200)]},
        "legacy": {"enabled": True, "choices": [choice("A", 0, True)]},
        "withSide": {"enabled": True, "priceModifier": 300},
        "broken": "not-a-group",
    }
    options = parse_options(raw, "hamburgers")

    assert list(options) == ["beverage", "legacy", "withSide"]
    assert [c.name for c in options["beverage"].choices] == ["None", "Cola"]
    assert options["legacy"].kind is GroupKind.REQUIRED_CHOICE
    assert isinstance(options["withSide"], FlagGroup)


@pytest.mark.parametrize("value, expected", [
    (True, True),
    (False, False),
    ("true", True),
    ("TRUE", True),
    ("1", True),
    ("yes", True),
    ("no", False),
    (1, True),
    (0, False),
    (2, False),
    (None, False),
    ([], False),
])
def test_coerce_bool(value, expected):
    assert coerce_bool(value) is expected


@pytest.mark.parametrize("value, expected", [
    (5, 5.0),
    ("-12.5", -12.5),
    (" 3 ", 3.0),
    ("abc", 0.0),
    (None, 0.0),
    (True, 0.0),
    (float("nan"), 0.0),
    (float("inf"), 0.0),
    ({}, 0.0),
])
def test_coerce_number(value, expected):
    assert coerce_number(value) == expected
