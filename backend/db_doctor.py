from __future__ import annotations

from sqlalchemy import inspect, text

from pricelist.db.session import get_engine
from pricelist.main import REQUIRED_TABLES

TECH_CARD_COUNTS_SQL = text(
    """
    SELECT p.id, p.name, COUNT(t.line_id), COUNT(t.line_id) - COUNT(m.id)
    FROM products p
    LEFT JOIN tech_card_lines t ON t.product_id = p.id
    LEFT JOIN materials m ON m.id = t.material_id
    GROUP BY p.id, p.name
    ORDER BY p.name
    """
)


def _get_columns(inspector, table_name: str) -> list[str]:
    if not inspector.has_table(table_name):
        return []
    return [column["name"] for column in inspector.get_columns(table_name)]


def _print_tech_card_counts(engine, inspector) -> None:
    if not all(inspector.has_table(name) for name in ("products", "tech_card_lines", "materials")):
        print("tech_cards=<missing tables>")
        return
    with engine.connect() as connection:
        rows = connection.execute(TECH_CARD_COUNTS_SQL).fetchall()
    if not rows:
        print("tech_cards=<no products>")
    for product_id, name, line_count, unresolved in rows:
        print(f"tech_card[{product_id}] {name}: lines={line_count} unresolved={unresolved}")


def main(engine=None) -> None:
    engine = engine or get_engine()
    print(f"database_uri={engine.url.render_as_string(hide_password=True)}")

    inspector = inspect(engine)
    for table_name in sorted(REQUIRED_TABLES):
        columns = _get_columns(inspector, table_name)
        print(f"{table_name}.columns={columns if columns else '<missing table>'}")

    if inspector.has_table("alembic_version"):
        with engine.connect() as connection:
            rows = connection.execute(text("SELECT version_num FROM alembic_version")).fetchall()
        revisions = [str(row[0]) for row in rows]
        print(f"alembic_version={revisions if revisions else '<empty>'}")
    else:
        print("alembic_version=<missing table>")

    _print_tech_card_counts(engine, inspector)


if __name__ == "__main__":
    main()
