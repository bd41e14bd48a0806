# test_editor.py
import pytest

from storefront.options import (
    Choice,
    ChoiceGroup,
    FlagGroup,
    GroupKind,
    GroupState,
    OptionEditor,
    merge_options,
    normalize_options,
)
from storefront.options.editor import MSG_REMOVE_SOLE_DEFAULT, MSG_SOLE_DEFAULT


def _defaults(group):
    return [c.name for c in group.choices if c.is_default]


def _beverage_editor(*names):
    editor = OptionEditor("pizzas")
    editor.set_enabled("beverage", True)
    for i, name in enumerate(names):
        editor.add_choice("beverage")
        editor.set_choice_name("beverage", i, name)
    return editor


def test_new_editor_starts_from_seed():
    editor = OptionEditor("hamburgers")
    assert [d.key for d in editor.descriptors] == ["withSide", "type", "beverage", "custom"]
    assert editor.state("type") == GroupState.DISABLED


def test_toggling_enabled_keeps_choices():
    editor = OptionEditor("burritos")
    editor.set_enabled("size", True)
    editor.set_enabled("size", False)
    editor.set_enabled("size", True)

    assert [c.name for c in editor.group("size").choices] == ["Regular", "Large"]
    assert editor.state("size") == GroupState.ENABLED_VALID


def test_mark_default_is_exclusive_and_zeroes_modifier():
    editor = OptionEditor("beverages")
    editor.set_price_modifier("size", 2, 800)

    result = editor.mark_default("size", 2)

    group = editor.group("size")
    assert result.ok
    assert _defaults(group) == ["Large"]
    assert group.choices[2].price_modifier == 0


def test_previous_default_keeps_its_stored_modifier():
    options = {
        "portion": ChoiceGroup(GroupKind.REQUIRED_CHOICE, True, [
            Choice("Whole", 150, True),
            Choice("Half", -3000, False),
        ]),
    }
    editor = OptionEditor("pizzas", options)
    editor.mark_default("portion", 1)

    assert editor.group("portion").choices[0].price_modifier == 150
    assert editor.group("portion").choices[0].is_default is False


@pytest.mark.parametrize("index", [0, 1, 2])
def test_any_sequence_of_marks_leaves_one_default(index):
    editor = OptionEditor("tacos")
    editor.set_enabled("quantity", True)
    editor.mark_default("quantity", 2)
    editor.mark_default("quantity", index)

    assert len(editor.group("quantity").default_indexes()) == 1
    assert editor.is_valid


def test_sole_default_of_required_group_cannot_be_unmarked():
    editor = OptionEditor("pizzas")
    editor.set_enabled("portion", True)

    result = editor.unmark_default("portion", 0)

    assert not result.ok
    assert result.message == MSG_SOLE_DEFAULT
    assert _defaults(editor.group("portion")) == ["Whole"]


def test_toggle_default_button():
    editor = OptionEditor("pizzas")
    assert not editor.toggle_default("portion", 0).ok
    assert editor.toggle_default("portion", 1).ok
    assert _defaults(editor.group("portion")) == ["Half"]


def test_optional_default_can_be_cleared():
    editor = _beverage_editor("Cola", "Water")
    editor.toggle_default("beverage", 0)
    assert _defaults(editor.group("beverage")) == ["Cola"]

    assert editor.toggle_default("beverage", 0).ok
    assert _defaults(editor.group("beverage")) == []
    assert editor.state("beverage") == GroupState.ENABLED_VALID


def test_choices_only_added_to_free_form_groups():
    editor = OptionEditor("pizzas")
    assert not editor.add_choice("portion").ok
    assert len(editor.group("portion").choices) == 2

    assert editor.add_choice("custom").ok
    assert editor.group("custom").choices == [Choice("", 0.0, False)]


def test_sole_default_cannot_be_removed_while_others_remain():
    editor = _beverage_editor("Cola", "Water")
    editor.mark_default("beverage", 1)

    result = editor.remove_choice("beverage", 1)
    assert not result.ok
    assert result.message == MSG_REMOVE_SOLE_DEFAULT
    assert len(editor.group("beverage").choices) == 2

    assert editor.remove_choice("beverage", 0).ok
    assert editor.remove_choice("beverage", 0).ok
    assert editor.group("beverage").choices == []


def test_required_group_choices_cannot_be_removed():
    editor = OptionEditor("pizzas")
    assert not editor.remove_choice("portion", 1).ok


def test_default_choice_modifier_is_locked():
    editor = OptionEditor("pizzas")
    assert not editor.set_price_modifier("portion", 0, 500).ok
    assert not editor.set_subtracts("portion", 0, True).ok
    assert editor.group("portion").choices[0].price_modifier == 0


def test_non_default_modifier_and_sign():
    editor = OptionEditor("pizzas")
    assert editor.set_price_modifier("portion", 1, "3500").ok
    assert editor.group("portion").choices[1].price_modifier == 3500

    editor.set_subtracts("portion", 1, True)
    assert editor.group("portion").choices[1].price_modifier == -3500
    editor.set_subtracts("portion", 1, False)
    assert editor.group("portion").choices[1].price_modifier == 3500


def test_unknown_group_and_index():
    editor = OptionEditor("pizzas")
    with pytest.raises(KeyError):
        editor.group("size")
    with pytest.raises(IndexError):
        editor.mark_default("portion", 7)


def test_validation_reports_missing_and_multiple_defaults():
    editor = OptionEditor("hamburgers")
    editor.set_enabled("type", True)
    editor.group("type").choices[0].is_default = False
    editor.set_enabled("withSide", True)
    editor.group("withSide").choices[1].is_default = True

    assert editor.state("type") == GroupState.ENABLED_NO_DEFAULT
    assert editor.state("withSide") == GroupState.ENABLED_MULTIPLE_DEFAULTS
    issues = editor.validate()
    assert [i.key for i in issues] == ["withSide", "type"]
    assert issues[1].label == "Type (Classic/Complete)"
    assert not editor.is_valid


def test_disabled_invalid_group_does_not_block_saving():
    editor = OptionEditor("hamburgers")
    editor.group("type").choices[0].is_default = False
    assert editor.is_valid


def test_change_category_keeps_universal_groups():
    editor = _beverage_editor("Cola")
    editor.set_enabled("portion", True)

    editor.change_category("empanadas")

    assert list(editor.options) == ["quantity", "beverage", "custom"]
    assert [c.name for c in editor.group("beverage").choices] == ["Cola"]
    assert editor.group("quantity").enabled is False


def test_legacy_flag_group_edits():
    options = merge_options({"withSide": {"enabled": True, "priceModifier": 500}}, "hamburgers")
    editor = OptionEditor("hamburgers", options)

    assert isinstance(editor.group("withSide"), FlagGroup)
    assert editor.set_flag_modifier("withSide", "-250").ok
    assert editor.set_flag_default("withSide", False).ok
    assert editor.group("withSide").price_modifier == -250
    assert editor.state("withSide") == GroupState.ENABLED_VALID
    assert not editor.set_flag_modifier("type", 10).ok
    assert not editor.add_choice("withSide").ok


def test_payload_normalization():
    editor = _beverage_editor("  Cola ", "   ", "Water")
    editor.set_price_modifier("beverage", 0, 1200)
    editor.set_enabled("portion", True)
    editor.set_enabled("custom", True)

    payload = editor.to_payload()

    assert list(payload) == ["portion", "beverage"]
    assert payload["beverage"] == {
        "enabled": True,
        "choices": [
            {"name": "None", "priceModifier": 0.0, "isDefault": True},
            {"name": "Cola", "priceModifier": 1200.0, "isDefault": False},
            {"name": "Water", "priceModifier": 0.0, "isDefault": False},
        ],
    }


def test_sentinel_not_added_when_a_default_exists():
    editor = _beverage_editor("Cola")
    editor.mark_default("beverage", 0)
    choices = editor.to_payload()["beverage"]["choices"]
    assert [c["name"] for c in choices] == ["Cola"]


def test_saved_sentinel_is_hidden_on_next_edit():
    editor = _beverage_editor("Cola")
    payload = editor.to_payload()

    reopened = OptionEditor("pizzas", merge_options(payload, "pizzas"))

    assert [c.name for c in reopened.group("beverage").choices] == ["Cola"]
    assert reopened.to_payload() == payload


def test_flags_persist_when_enabled_only():
    payload = normalize_options({
        "on": FlagGroup(enabled=True, price_modifier=100, default=False),
        "off": FlagGroup(enabled=False, price_modifier=100),
    })
    assert payload == {"on": {"enabled": True, "priceModifier": 100, "default": False}}


def test_for_product_merges_stored_options(burger):
    editor = OptionEditor.for_product(burger)

    assert editor.category.value == "hamburgers"
    assert [c.name for c in editor.group("beverage").choices] == ["Cola"]
    assert editor.group("custom").choices == []
    assert editor.is_valid
