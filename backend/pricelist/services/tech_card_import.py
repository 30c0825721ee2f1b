from __future__ import annotations

import csv
import io
import zipfile
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from pricelist.core.errors import ImportParseFailure
from pricelist.services.tech_card import TechCardLineStore

EXCEL_SUFFIXES = {".xlsx", ".xlsm"}
TEXT_SUFFIXES = {".csv", ".txt"}

MERGED = "merged"
APPENDED = "appended"
UNRESOLVED = "unresolved"


@dataclass(frozen=True)
class RowOutcome:
    row_number: int
    article: str
    quantity: Decimal | None
    status: str


@dataclass
class ImportReport:
    merged: int = 0
    appended: int = 0
    unresolved: int = 0
    unresolved_articles: list[str] = field(default_factory=list)
    rows: list[RowOutcome] = field(default_factory=list)
    header_skipped: bool = False

    def record(self, outcome: RowOutcome) -> None:
        self.rows.append(outcome)
        if outcome.status == MERGED:
            self.merged += 1
        elif outcome.status == APPENDED:
            self.appended += 1
        else:
            self.unresolved += 1
            self.unresolved_articles.append(outcome.article)


def parse_import_quantity(text: str | None) -> Decimal | None:
    """Strict quantity for an import cell; ``None`` when the cell is unusable."""
    if text is None:
        return None
    cleaned = "".join(str(text).split()).replace(",", ".")
    if not cleaned:
        return None
    try:
        parsed = Decimal(cleaned)
    except InvalidOperation:
        return None
    if not parsed.is_finite() or parsed < 0:
        return None
    return parsed


def _cell_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _rows_from_workbook(content: bytes) -> list[list[str]]:
    try:
        workbook = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError, ValueError) as exc:
        raise ImportParseFailure("Import file is not a readable Excel workbook.") from exc
    try:
        if not workbook.worksheets:
            raise ImportParseFailure("Import workbook has no worksheets.")
        sheet = workbook.worksheets[0]
        return [[_cell_text(value) for value in row] for row in sheet.iter_rows(values_only=True)]
    finally:
        workbook.close()


def _decode_text(content: bytes) -> str:
    for encoding in ("utf-8-sig", "cp1251"):
        try:
            return content.decode(encoding)
        except UnicodeDecodeError:
            continue
    raise ImportParseFailure("Import file is not valid UTF-8 or Windows-1251 text.")


class ExcelSemicolon(csv.excel):
    delimiter = ";"


def detect_dialect(text: str, sample_size: int = 4096) -> type[csv.Dialect]:
    """Pick the CSV dialect of ``text``.

    A semicolon or tab present on every sampled line wins outright: the
    sniffer would otherwise split ``EG-16;2,5`` on the decimal comma.
    """
    sample = text[:sample_size]
    lines = sample.splitlines()
    if len(text) > sample_size:
        lines = lines[:-1]
    lines = [line for line in lines if line.strip()]
    if lines:
        if all(";" in line for line in lines):
            return ExcelSemicolon
        if all("\t" in line for line in lines):
            return csv.excel_tab
    try:
        return csv.Sniffer().sniff(sample, delimiters=";,\t")
    except csv.Error:
        return csv.excel


def _rows_from_text(content: bytes) -> list[list[str]]:
    text = _decode_text(content)
    dialect = detect_dialect(text)
    try:
        return [[_cell_text(value) for value in row] for row in csv.reader(io.StringIO(text), dialect)]
    except csv.Error as exc:
        raise ImportParseFailure(f"Import file is not a valid CSV table: {exc}") from exc


def read_tabular_file(filename: str, content: bytes) -> list[tuple[str, str]]:
    """Read an uploaded file into ``(article, quantity)`` text pairs.

    Only columns A and B are used and fully empty rows are dropped. Anything
    that cannot be read as such a table raises ``ImportParseFailure``.
    """
    suffix = Path(filename or "").suffix.lower()
    if suffix in EXCEL_SUFFIXES:
        raw_rows = _rows_from_workbook(content)
    elif suffix in TEXT_SUFFIXES:
        raw_rows = _rows_from_text(content)
    else:
        raise ImportParseFailure(f"Unsupported import file type '{suffix or filename}'.")

    rows: list[list[str]] = []
    for raw in raw_rows:
        cells = list(raw)
        while cells and not cells[-1]:
            cells.pop()
        if cells:
            rows.append(cells)
    if not rows:
        raise ImportParseFailure("Import file contains no rows.")
    if all(len(cells) < 2 for cells in rows):
        raise ImportParseFailure("Import file must have two columns: article and quantity.")
    return [(cells[0], cells[1] if len(cells) > 1 else "") for cells in rows]


def import_rows(
    store: TechCardLineStore,
    rows: Sequence[tuple[str, str]],
    materials_by_article: Mapping,
    *,
    max_rows: int | None = None,
) -> ImportReport:
    """Merge ``(article, quantity)`` rows into ``store``.

    Rows are resolved first and only then applied, in file order. A row whose
    material already has a line adds its quantity to that line; otherwise a
    new line is appended. Unknown articles and malformed quantities leave the
    store untouched and are reported as unresolved.
    """
    report = ImportReport()
    data_rows = list(enumerate(rows, start=1))
    if data_rows and parse_import_quantity(data_rows[0][1][1]) is None:
        report.header_skipped = True
        data_rows = data_rows[1:]
    if max_rows is not None and len(data_rows) > max_rows:
        raise ImportParseFailure(f"Import file has more than {max_rows} rows.")

    planned = []
    for row_number, (article_text, quantity_text) in data_rows:
        article = (article_text or "").strip()
        quantity = parse_import_quantity(quantity_text)
        material = materials_by_article.get(article) if article else None
        planned.append((row_number, article, quantity, material))

    for row_number, article, quantity, material in planned:
        if material is None or quantity is None:
            report.record(RowOutcome(row_number, article, quantity, UNRESOLVED))
            continue
        existing = store.line_for_material(material.id)
        if existing is not None:
            store.set_quantity(existing.line_id, existing.quantity + quantity)
            report.record(RowOutcome(row_number, article, quantity, MERGED))
        else:
            store.add_line(material.id, quantity)
            report.record(RowOutcome(row_number, article, quantity, APPENDED))
    return report
