from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest

from pricelist.core.errors import ImportParseFailure, LineNotFoundError, ValidationError
from pricelist.models.product import TechCardLineRow
from pricelist.schemas.material import MaterialCreate
from pricelist.schemas.pricing_type import FinishTypeCreate, ProductTypeCreate
from pricelist.schemas.product import CollectionCreate, CollectionUpdate, ProductCreate
from pricelist.services import catalog as catalog_service
from pricelist.services import products as products_service
from pricelist.services.price_list import CSV_HEADER, build_price_list, price_list_csv


def _catalog(db_session):
    board = catalog_service.create_material(
        db_session,
        MaterialCreate(name="ЛДСП Egger", article="EG-16", unit="м2", unit_price=Decimal("850")),
    )
    hinge = catalog_service.create_material(
        db_session,
        MaterialCreate(name="Петля Hettich", article="HF-35", unit_price=Decimal("120.50")),
    )
    product_type = catalog_service.create_product_type(
        db_session,
        ProductTypeCreate(name="Тумба", markup_percent=Decimal("10"), work_cost=Decimal("1000")),
    )
    finish_type = catalog_service.create_finish_type(
        db_session,
        FinishTypeCreate(name="Эмаль", markup_percent=Decimal("50"), work_cost=Decimal("0")),
    )
    return board, hinge, product_type, finish_type


def _product(db_session, product_type=None, finish_type=None, **kwargs):
    return products_service.create_product(
        db_session,
        ProductCreate(
            product_type_id=product_type.id if product_type else None,
            finish_type_id=finish_type.id if finish_type else None,
            **kwargs,
        ),
    )


def test_create_product_rejects_unknown_references(db_session):
    with pytest.raises(ValueError, match="Product type not found"):
        products_service.create_product(db_session, ProductCreate(name="Тумба", product_type_id=77))


def test_compute_product_cost_with_both_markups(db_session):
    board, _, product_type, finish_type = _catalog(db_session)
    product = _product(db_session, product_type, finish_type, name="Тумба Wasser 80")
    products_service.add_tech_card_line(db_session, product.id, board.id, Decimal("2"))

    summary = products_service.compute_product_cost(db_session, product.id)

    assert summary.material_cost == Decimal("1700")
    assert summary.work_cost == Decimal("1000")
    assert summary.markup_multiplier == Decimal("1.6")
    assert summary.total == Decimal("3720")
    assert not summary.has_unresolved


def test_tech_card_order_survives_save_and_load(db_session):
    board, hinge, _, _ = _catalog(db_session)
    product = _product(db_session, name="Пенал")
    first = products_service.add_tech_card_line(db_session, product.id, board.id, Decimal("1"))
    middle = products_service.add_tech_card_line(db_session, product.id, hinge.id, Decimal("4"))
    last = products_service.add_tech_card_line(db_session, product.id, board.id, Decimal("0.5"))

    assert products_service.remove_tech_card_line(db_session, product.id, middle) is True
    assert products_service.remove_tech_card_line(db_session, product.id, middle) is False

    store = products_service.load_tech_card(db_session, product.id)
    assert [line.line_id for line in store.snapshot()] == [first, last]
    assert [line.quantity for line in store.snapshot()] == [Decimal("1"), Decimal("0.5")]


def test_add_line_requires_existing_material(db_session):
    product = _product(db_session, name="Пенал")

    with pytest.raises(ValueError, match="Selected material does not exist"):
        products_service.add_tech_card_line(db_session, product.id, 404)


def test_set_quantity_is_strict(db_session):
    board, _, _, _ = _catalog(db_session)
    product = _product(db_session, name="Пенал")
    line_id = products_service.add_tech_card_line(db_session, product.id, board.id)

    assert products_service.set_tech_card_quantity(db_session, product.id, line_id, "3.25") == Decimal("3.25")
    with pytest.raises(ValidationError):
        products_service.set_tech_card_quantity(db_session, product.id, line_id, "-1")
    with pytest.raises(LineNotFoundError):
        products_service.set_tech_card_quantity(db_session, product.id, "missing", Decimal("1"))

    assert products_service.load_tech_card(db_session, product.id).get_line(line_id).quantity == Decimal("3.25")


def test_commit_quantity_text_forgives_bad_input(db_session):
    board, _, _, _ = _catalog(db_session)
    product = _product(db_session, name="Пенал")
    line_id = products_service.add_tech_card_line(db_session, product.id, board.id, Decimal("2"))

    assert products_service.commit_tech_card_quantity_text(db_session, product.id, line_id, "1,5") == Decimal("1.5")
    assert products_service.commit_tech_card_quantity_text(db_session, product.id, line_id, "abc") == Decimal("0")


def test_import_tech_card_merges_and_reports(db_session):
    board, hinge, _, _ = _catalog(db_session)
    product = _product(db_session, name="Тумба")
    products_service.add_tech_card_line(db_session, product.id, board.id, Decimal("1"))
    content = "Артикул;Количество\nEG-16;2\nHF-35;3\nXX-1;5\n".encode("utf-8")

    report = products_service.import_tech_card(db_session, product.id, "card.csv", content)

    assert report.header_skipped
    assert (report.merged, report.appended, report.unresolved) == (1, 1, 1)
    assert report.unresolved_articles == ["XX-1"]
    lines = products_service.load_tech_card(db_session, product.id).snapshot()
    assert [(line.material_id, line.quantity) for line in lines] == [
        (board.id, Decimal("3")),
        (hinge.id, Decimal("3")),
    ]


def test_import_parse_failure_leaves_tech_card_untouched(db_session):
    board, _, _, _ = _catalog(db_session)
    product = _product(db_session, name="Тумба")
    line_id = products_service.add_tech_card_line(db_session, product.id, board.id, Decimal("1"))

    with pytest.raises(ImportParseFailure):
        products_service.import_tech_card(db_session, product.id, "card.xlsx", b"broken")

    lines = products_service.load_tech_card(db_session, product.id).snapshot()
    assert [(line.line_id, line.quantity) for line in lines] == [(line_id, Decimal("1"))]


def test_delete_product_removes_tech_card_lines(db_session):
    board, _, _, _ = _catalog(db_session)
    product = _product(db_session, name="Тумба")
    products_service.add_tech_card_line(db_session, product.id, board.id, Decimal("1"))
    product_id = product.id

    products_service.delete_product(db_session, product_id)

    assert products_service.get_product(db_session, product_id) is None
    assert db_session.query(TechCardLineRow).filter_by(product_id=product_id).count() == 0


def test_price_list_sorting_archive_filter_and_csv(db_session):
    board, _, product_type, finish_type = _catalog(db_session)
    wasser = catalog_service.create_collection(db_session, CollectionCreate(name="Wasser"))
    archived = catalog_service.create_collection(
        db_session, CollectionCreate(name="Old line", is_archived=True)
    )
    cabinet = _product(
        db_session, product_type, finish_type, name="Тумба 80", article="WS-080", collection_id=wasser.id
    )
    products_service.add_tech_card_line(db_session, cabinet.id, board.id, Decimal("2"))
    _product(db_session, name="Зеркало")
    _product(db_session, name="Старая тумба", collection_id=archived.id)

    rows = build_price_list(db_session)

    assert [row.name for row in rows] == ["Тумба 80", "Зеркало"]
    assert rows[0].total == Decimal("3720")
    assert rows[1].total == Decimal("0")
    assert len(build_price_list(db_session, include_archived=True)) == 3

    lines = price_list_csv(rows).splitlines()
    assert lines[0] == ";".join(CSV_HEADER)
    assert lines[1] == "Wasser;Тумба 80;WS-080;Тумба;Эмаль;1700.00;1000.00;1.6;3720.00"
    assert lines[2] == ";Зеркало;;;;0.00;0.00;1;0.00"


def test_quantities_survive_save_and_reload_exactly(db_session):
    board, _, product_type, finish_type = _catalog(db_session)
    product = _product(db_session, product_type, finish_type, name="Тумба")
    line_id = products_service.add_tech_card_line(db_session, product.id, board.id, Decimal("0.333333333"))
    big_line = products_service.add_tech_card_line(db_session, product.id, board.id, Decimal("1"))

    returned = products_service.set_tech_card_quantity(
        db_session, product.id, big_line, Decimal("12345678901.123456789")
    )
    db_session.expire_all()

    store = products_service.load_tech_card(db_session, product.id)
    assert store.get_line(line_id).quantity == Decimal("0.333333333")
    assert store.get_line(big_line).quantity == returned == Decimal("12345678901.123456789")
    summary = products_service.compute_product_cost(db_session, product.id)
    expected_material = Decimal("850") * (Decimal("0.333333333") + Decimal("12345678901.123456789"))
    assert summary.material_cost == expected_material


def test_price_list_follows_pinned_collections_and_product_order(db_session):
    plain = catalog_service.create_collection(db_session, CollectionCreate(name="Alpha"))
    pinned = catalog_service.create_collection(db_session, CollectionCreate(name="Zeta", pinned=True))
    first = _product(db_session, name="Пенал", collection_id=pinned.id)
    second = _product(db_session, name="Зеркало", collection_id=pinned.id)
    unlisted = _product(db_session, name="Тумба", collection_id=pinned.id)
    _product(db_session, name="Шкаф", collection_id=plain.id)
    _product(db_session, name="Полка")
    catalog_service.update_collection(
        db_session,
        pinned.id,
        CollectionUpdate(name="Zeta", pinned=True, product_order=[second.id, first.id, second.id]),
    )

    rows = build_price_list(db_session)

    assert [row.product_id for row in rows[:3]] == [second.id, first.id, unlisted.id]
    assert [row.name for row in rows[3:]] == ["Шкаф", "Полка"]
    assert catalog_service.get_collection(db_session, pinned.id).product_order == [second.id, first.id]


def test_saving_a_tech_card_touches_product_updated_at(db_session):
    board, _, _, _ = _catalog(db_session)
    product = _product(db_session, name="Тумба")
    assert product.created_at is not None
    product.updated_at = datetime(2020, 1, 1)
    db_session.commit()

    products_service.add_tech_card_line(db_session, product.id, board.id, Decimal("1"))
    db_session.refresh(product)

    assert product.updated_at > datetime(2020, 1, 1)
