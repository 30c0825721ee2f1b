from __future__ import annotations

import logging
import sys
import time
from dataclasses import dataclass
from pathlib import Path

from fastapi import FastAPI, Request
from sqlalchemy import inspect, text

from pricelist.api import materials, price_list, pricing_types, product_collections, products
from pricelist.core.config import settings
from pricelist.db.session import engine

REQUIRED_TABLES = {
    "materials",
    "product_types",
    "finish_types",
    "collections",
    "products",
    "tech_card_lines",
}


logger = logging.getLogger("pricelist.request")
_schema_error_already_logged = False


@dataclass(frozen=True)
class SchemaValidationResult:
    is_valid: bool
    database_url: str
    missing_revisions: list[str]
    missing_tables: list[str]


def configure_app_logging() -> None:
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logger.setLevel(log_level)

    if not any(isinstance(handler, logging.StreamHandler) and handler.stream is sys.stdout for handler in logger.handlers):
        stream_handler = logging.StreamHandler(sys.stdout)
        stream_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
        )
        logger.addHandler(stream_handler)

    logger.propagate = True


def _get_alembic_revisions(engine) -> list[str]:
    inspector = inspect(engine)
    if not inspector.has_table("alembic_version"):
        return []
    with engine.connect() as connection:
        rows = connection.execute(text("SELECT version_num FROM alembic_version")).fetchall()
    return [str(row[0]) for row in rows]


def _get_expected_alembic_head() -> str | None:
    versions_dir = Path(__file__).resolve().parents[1] / "alembic" / "versions"
    revisions = sorted(migration_file.stem for migration_file in versions_dir.glob("*.py"))
    return revisions[-1] if revisions else None


def build_schema_error_message(result: SchemaValidationResult) -> str:
    missing_revisions_text = ", ".join(result.missing_revisions) if result.missing_revisions else "<none>"
    missing_tables_text = ", ".join(result.missing_tables) if result.missing_tables else "<none>"
    return (
        "================= DATABASE SCHEMA ERROR =================\n"
        f"Database URL: {result.database_url}\n"
        f"Missing Alembic revision(s): {missing_revisions_text}\n"
        f"Missing tables: {missing_tables_text}\n"
        "Fix: run `alembic upgrade head` from the backend directory.\n"
        "========================================================="
    )


def _log_schema_error_once(message: str) -> None:
    global _schema_error_already_logged
    if _schema_error_already_logged:
        return
    logger.error(message)
    _schema_error_already_logged = True


def validate_schema(engine) -> SchemaValidationResult:
    inspector = inspect(engine)
    missing_tables = sorted(table for table in REQUIRED_TABLES if not inspector.has_table(table))
    expected_head = _get_expected_alembic_head()
    detected = _get_alembic_revisions(engine)
    missing_revisions = [expected_head] if expected_head and expected_head not in detected else []

    result = SchemaValidationResult(
        is_valid=not (missing_tables or missing_revisions),
        database_url=settings.sqlalchemy_database_uri,
        missing_revisions=missing_revisions,
        missing_tables=missing_tables,
    )
    if result.is_valid:
        return result

    error_message = build_schema_error_message(result)
    if settings.dev_mode:
        _log_schema_error_once(error_message)
        return result

    raise RuntimeError(error_message)


def create_app() -> FastAPI:
    configure_app_logging()
    app = FastAPI(
        title="Wasser Price List",
        version="0.1.0",
        docs_url="/docs" if settings.dev_mode else None,
        openapi_url="/openapi.json" if settings.dev_mode else None,
        redoc_url=None,
    )

    app.include_router(materials.router)
    app.include_router(pricing_types.product_types_router)
    app.include_router(pricing_types.finish_types_router)
    app.include_router(product_collections.router)
    app.include_router(products.router)
    app.include_router(price_list.router)

    @app.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    @app.middleware("http")
    async def request_logging_middleware(request: Request, call_next):
        started_at = time.perf_counter()
        try:
            response = await call_next(request)
            elapsed_ms = (time.perf_counter() - started_at) * 1000
            logger.info(
                "%s %s -> %s (%.2f ms)",
                request.method,
                request.url.path,
                response.status_code,
                elapsed_ms,
            )
            return response
        except Exception:
            elapsed_ms = (time.perf_counter() - started_at) * 1000
            logger.exception(
                "%s %s -> 500 (%.2f ms)",
                request.method,
                request.url.path,
                elapsed_ms,
            )
            raise

    @app.on_event("startup")
    def on_startup() -> None:
        validate_schema(engine)

    return app


app = create_app()
