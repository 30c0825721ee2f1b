from __future__ import annotations

import itertools
from decimal import Decimal

import pytest

from pricelist.core.errors import LineNotFoundError, ValidationError
from pricelist.services.tech_card import TechCardLine, TechCardLineStore, to_quantity


def _sequential_ids():
    counter = itertools.count(1)
    return lambda: f"line-{next(counter)}"


def test_add_line_appends_with_zero_quantity():
    store = TechCardLineStore(line_id_factory=_sequential_ids())

    first = store.add_line(10)
    second = store.add_line(20)

    assert [line.line_id for line in store.snapshot()] == [first, second]
    assert store.get_line(first).quantity == Decimal("0")
    assert store.get_line(second).material_id == 20


def test_generated_line_ids_are_unique_even_when_factory_repeats():
    ids = iter(["dup", "dup", "other"])
    store = TechCardLineStore(line_id_factory=lambda: next(ids))

    assert store.add_line(1) == "dup"
    assert store.add_line(2) == "other"


def test_default_line_ids_are_unique():
    store = TechCardLineStore()
    line_ids = {store.add_line(1) for _ in range(50)}

    assert len(line_ids) == 50


def test_remove_line_is_idempotent():
    store = TechCardLineStore(line_id_factory=_sequential_ids())
    line_id = store.add_line(1)

    assert store.remove_line(line_id) is True
    assert store.remove_line(line_id) is False
    assert store.remove_line("never-existed") is False
    assert store.snapshot() == ()


def test_set_quantity_keeps_position():
    store = TechCardLineStore(line_id_factory=_sequential_ids())
    a = store.add_line(1)
    b = store.add_line(2)
    c = store.add_line(3)

    store.set_quantity(b, Decimal("4.5"))

    assert [line.line_id for line in store.snapshot()] == [a, b, c]
    assert store.get_line(b).quantity == Decimal("4.5")


@pytest.mark.parametrize("bad", [-3, Decimal("-0.01"), float("nan"), float("inf"), Decimal("Infinity"), "abc", True, None])
def test_set_quantity_rejects_invalid_values(bad):
    store = TechCardLineStore(line_id_factory=_sequential_ids())
    line_id = store.add_line(1)
    store.set_quantity(line_id, 2)

    with pytest.raises(ValidationError):
        store.set_quantity(line_id, bad)

    assert store.get_line(line_id).quantity == Decimal("2")


def test_set_quantity_on_unknown_line_raises():
    store = TechCardLineStore()

    with pytest.raises(LineNotFoundError):
        store.set_quantity("missing", 1)


def test_snapshot_is_detached_from_later_mutations():
    store = TechCardLineStore(line_id_factory=_sequential_ids())
    line_id = store.add_line(1)
    before = store.snapshot()

    store.set_quantity(line_id, 7)
    store.add_line(2)

    assert len(before) == 1
    assert before[0].quantity == Decimal("0")


def test_store_rejects_duplicate_initial_line_ids():
    with pytest.raises(ValueError, match="Duplicate"):
        TechCardLineStore([TechCardLine("x", 1), TechCardLine("x", 2)])


def test_line_for_material_returns_first_match():
    store = TechCardLineStore(line_id_factory=_sequential_ids())
    first = store.add_line(5)
    store.add_line(5)

    assert store.line_for_material(5).line_id == first
    assert store.line_for_material(6) is None


def test_to_quantity_accepts_plain_numbers():
    assert to_quantity(3) == Decimal("3")
    assert to_quantity(2.5) == Decimal("2.5")
    assert to_quantity(" 1.25 ") == Decimal("1.25")
    assert to_quantity(Decimal("0")) == Decimal("0")
