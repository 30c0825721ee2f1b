from __future__ import annotations

import argparse
import csv
import io
from decimal import Decimal, InvalidOperation
from pathlib import Path

from pricelist.db.session import SessionLocal
from pricelist.repositories import materials as materials_repo
from pricelist.services.tech_card_import import detect_dialect


def _parse_price(value: str | None) -> Decimal | None:
    if not value:
        return Decimal("0")
    try:
        parsed = Decimal("".join(value.split()).replace(",", "."))
    except InvalidOperation:
        return None
    if not parsed.is_finite() or parsed < 0:
        return None
    # Prices are stored with two decimal places; finer values are rejected.
    if parsed.normalize().as_tuple().exponent < -2:
        return None
    return parsed


def import_materials(session, path: Path) -> dict[str, int]:
    counts = {"created": 0, "updated": 0, "skipped": 0}
    with path.open(newline="", encoding="utf-8-sig") as handle:
        text = handle.read()
    reader = csv.DictReader(io.StringIO(text), dialect=detect_dialect(text))
    for row in reader:
        name = " ".join((row.get("name") or "").split())
        article = (row.get("article") or "").strip() or None
        unit = (row.get("unit") or "").strip() or "шт"
        price = _parse_price(row.get("price"))
        if not name or price is None:
            counts["skipped"] += 1
            continue
        existing = materials_repo.find_by_article(session, article) if article else None
        if existing is None:
            materials_repo.create_material(
                session, name=name, article=article, unit=unit, unit_price=price
            )
            counts["created"] += 1
        else:
            materials_repo.update_material(
                session, material=existing, name=name, article=article, unit=unit, unit_price=price
            )
            counts["updated"] += 1
    return counts


def main() -> None:
    parser = argparse.ArgumentParser(description="Load the material catalog from a CSV file.")
    parser.add_argument("path", type=Path, help="CSV with columns name, article, unit, price")
    args = parser.parse_args()

    if not args.path.exists():
        parser.error(f"File not found: {args.path}")

    session = SessionLocal()
    try:
        counts = import_materials(session, args.path)
    finally:
        session.close()
    print(
        f"Materials import complete: created={counts['created']} "
        f"updated={counts['updated']} skipped={counts['skipped']}"
    )


if __name__ == "__main__":
    main()
