from __future__ import annotations

from decimal import Decimal

import pytest

from pricelist.core.errors import LineNotFoundError, ValidationError
from pricelist.services.quantity_edit import (
    EditPhase,
    QuantityEditController,
    format_quantity,
    parse_quantity_text,
)
from pricelist.services.tech_card import TechCardLineStore


@pytest.fixture()
def store():
    return TechCardLineStore()


def test_comma_decimal_is_committed(store):
    line_id = store.add_line(1)
    controller = QuantityEditController(store)

    controller.edit(line_id, "2,5")
    committed = controller.commit(line_id)

    assert committed == Decimal("2.5")
    assert store.get_line(line_id).quantity == Decimal("2.5")
    assert controller.state(line_id).phase is EditPhase.CLEAN


def test_negative_text_is_coerced_to_zero_on_commit(store):
    line_id = store.add_line(1)
    store.set_quantity(line_id, 4)
    controller = QuantityEditController(store)

    controller.edit(line_id, "-3")

    assert controller.commit(line_id) == Decimal("0")
    assert store.get_line(line_id).quantity == Decimal("0")


def test_direct_negative_quantity_is_rejected(store):
    line_id = store.add_line(1)

    with pytest.raises(ValidationError):
        store.set_quantity(line_id, -3)


def test_editing_does_not_touch_the_store(store):
    line_id = store.add_line(1)
    store.set_quantity(line_id, 3)
    controller = QuantityEditController(store)

    controller.edit(line_id, "1")
    controller.edit(line_id, "12")

    assert store.get_line(line_id).quantity == Decimal("3")
    assert controller.display_value(line_id) == "12"
    assert controller.editing_line_ids == [line_id]


def test_clean_line_displays_stored_quantity(store):
    line_id = store.add_line(1)
    store.set_quantity(line_id, Decimal("2.5000"))
    controller = QuantityEditController(store)

    assert controller.display_value(line_id) == "2.5"


def test_commit_without_edit_is_a_no_op(store):
    line_id = store.add_line(1)
    controller = QuantityEditController(store)

    assert controller.commit(line_id) is None


def test_removing_a_line_discards_its_draft(store):
    line_id = store.add_line(1)
    controller = QuantityEditController(store)
    controller.edit(line_id, "9")

    controller.remove_line(line_id)

    assert controller.state(line_id).phase is EditPhase.REMOVED
    assert controller.commit(line_id) is None
    assert line_id not in store
    with pytest.raises(LineNotFoundError):
        controller.edit(line_id, "1")
    controller.remove_line(line_id)


def test_line_removed_behind_the_controller_is_not_recreated(store):
    line_id = store.add_line(1)
    controller = QuantityEditController(store)
    controller.edit(line_id, "5")

    store.remove_line(line_id)

    assert controller.commit(line_id) is None
    assert controller.state(line_id).phase is EditPhase.REMOVED
    assert store.snapshot() == ()


def test_removed_lines_leave_no_tracked_state(store):
    controller = QuantityEditController(store)
    line_ids = [store.add_line(index) for index in range(3)]
    for line_id in line_ids:
        controller.edit(line_id, "4")

    for line_id in line_ids:
        controller.remove_line(line_id)

    assert controller._states == {}
    assert controller.editing_line_ids == []
    assert all(controller.state(line_id).phase is EditPhase.REMOVED for line_id in line_ids)


def test_lines_are_edited_independently(store):
    first = store.add_line(1)
    second = store.add_line(2)
    controller = QuantityEditController(store)

    controller.edit(first, "1,5")
    controller.edit(second, "7")
    controller.commit(second)

    assert controller.state(first).phase is EditPhase.EDITING
    assert controller.state(first).raw_text == "1,5"
    assert store.get_line(first).quantity == Decimal("0")
    assert store.get_line(second).quantity == Decimal("7")


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("2,5", Decimal("2.5")),
        ("2.5", Decimal("2.5")),
        (" 1 234,5 ", Decimal("1234.5")),
        ("12 шт", Decimal("12")),
        (".5", Decimal("0.5")),
        ("abc", Decimal("0")),
        ("", Decimal("0")),
        (None, Decimal("0")),
        ("-3", Decimal("0")),
        ("3.", Decimal("3")),
    ],
)
def test_parse_quantity_text(text, expected):
    assert parse_quantity_text(text) == expected


def test_format_quantity_drops_trailing_zeros():
    assert format_quantity(Decimal("100.0000")) == "100"
    assert format_quantity(Decimal("0.0000")) == "0"
    assert format_quantity(Decimal("0.2500")) == "0.25"
