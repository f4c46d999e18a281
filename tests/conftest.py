"""Shared pytest fixtures for sqlexport tests."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

import pytest
from factories import ColumnFactory, MemorySite
from faker import Faker

from sqlexport.dialects import SQLDialect
from sqlexport.exporter.models import ColumnDescriptor, DataKind
from sqlexport.exporter.settings import ExporterSettings
from sqlexport.exporter.sql_exporter import SQLExporter
from sqlexport.rendering import LiteralRenderer

# =============================================================================
# Faker Instance
# =============================================================================


@pytest.fixture
def fake() -> Faker:
    """Provide a Faker instance for test data generation."""
    return Faker()


# =============================================================================
# Dialect / Renderer Fixtures
# =============================================================================


@pytest.fixture
def dialect() -> SQLDialect:
    """Provide the generic SQL dialect."""
    return SQLDialect()


@pytest.fixture
def renderer(dialect: SQLDialect) -> LiteralRenderer:
    """Provide a literal renderer for the generic dialect."""
    return LiteralRenderer(dialect)


# =============================================================================
# Column Fixtures
# =============================================================================


@pytest.fixture
def columns_ab() -> list[ColumnDescriptor]:
    """Two columns A (numeric) and B (text)."""
    return [
        ColumnDescriptor(name="A", data_kind=DataKind.NUMERIC),
        ColumnDescriptor(name="B", data_kind=DataKind.STRING),
    ]


@pytest.fixture
def rows_xyz() -> list[list[Any]]:
    """Three rows matching columns_ab."""
    return [[1, "x"], [2, "y"], [3, "z"]]


@pytest.fixture
def user_columns() -> list[ColumnDescriptor]:
    """id (auto-generated), name, email columns."""
    return [
        ColumnFactory.create_numeric("id", auto_generated=True),
        ColumnFactory.create("name"),
        ColumnFactory.create("email"),
    ]


# =============================================================================
# Exporter Fixtures
# =============================================================================


@pytest.fixture
def make_exporter(
    dialect: SQLDialect, renderer: LiteralRenderer
) -> Callable[..., tuple[SQLExporter, MemorySite]]:
    """Factory building an exporter over an in-memory site."""

    def _make(
        columns: Sequence[ColumnDescriptor],
        table_name: str | None = "T",
        **settings: Any,
    ) -> tuple[SQLExporter, MemorySite]:
        site = MemorySite(columns, table_name=table_name)
        exporter = SQLExporter(site, dialect, renderer, ExporterSettings(**settings))
        return exporter, site

    return _make


@pytest.fixture
def export_rows(
    make_exporter: Callable[..., tuple[SQLExporter, MemorySite]],
) -> Callable[..., str]:
    """Run header, rows and footer and return the produced SQL."""

    def _export(
        columns: Sequence[ColumnDescriptor],
        rows: Sequence[Sequence[Any]],
        table_name: str | None = "T",
        **settings: Any,
    ) -> str:
        exporter, site = make_exporter(columns, table_name=table_name, **settings)
        exporter.export_header()
        for row in rows:
            exporter.export_row(row)
        exporter.export_footer()
        return site.text

    return _export
