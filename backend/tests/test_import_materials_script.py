from __future__ import annotations

from decimal import Decimal

from pricelist.models.material import Material
from scripts.import_materials_csv import import_materials


def test_import_materials_creates_updates_and_skips(db_session, tmp_path):
    db_session.add(Material(name="Old board", article="EG-16", unit="м2", unit_price=Decimal("800")))
    db_session.commit()
    csv_path = tmp_path / "materials.csv"
    csv_path.write_text(
        "name;article;unit;price\n"
        "ЛДСП Egger;EG-16;м2;850,50\n"
        "Петля Hettich;HF-35;;120\n"
        "Broken;BR-1;шт;abc\n"
        "Too precise;TP-1;шт;10,555\n",
        encoding="utf-8",
    )

    counts = import_materials(db_session, csv_path)

    assert counts == {"created": 1, "updated": 1, "skipped": 2}
    materials = {material.article: material for material in db_session.query(Material).all()}
    assert materials["EG-16"].name == "ЛДСП Egger"
    assert materials["EG-16"].unit_price == Decimal("850.50")
    assert materials["HF-35"].unit == "шт"
    assert "BR-1" not in materials
    assert "TP-1" not in materials
