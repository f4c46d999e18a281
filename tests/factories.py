"""Faker-based factories and in-memory collaborators for tests."""

from __future__ import annotations

import io
from collections.abc import Iterator, Sequence
from typing import Any

from faker import Faker

from sqlexport.dialects import SQLDialect
from sqlexport.exporter.models import ColumnDescriptor, ContentStorage, DataKind

fake = Faker()


class ColumnFactory:
    """Factory for generating ColumnDescriptor models."""

    @staticmethod
    def create(
        name: str | None = None,
        data_kind: DataKind = DataKind.STRING,
        is_pseudo: bool = False,
        is_auto_generated: bool = False,
        is_custom: bool = False,
        value_handler: Any = None,
    ) -> ColumnDescriptor:
        """Create a ColumnDescriptor with configurable attributes."""
        return ColumnDescriptor(
            name=name or fake.unique.word(),
            data_kind=data_kind,
            is_pseudo=is_pseudo,
            is_auto_generated=is_auto_generated,
            is_custom=is_custom,
            value_handler=value_handler,
        )

    @staticmethod
    def create_numeric(name: str = "id", auto_generated: bool = False) -> ColumnDescriptor:
        """Create a numeric column."""
        return ColumnDescriptor(
            name=name,
            data_kind=DataKind.NUMERIC,
            is_auto_generated=auto_generated,
        )

    @staticmethod
    def create_timestamp(name: str = "created_at") -> ColumnDescriptor:
        """Create a date/time column."""
        return ColumnDescriptor(name=name, data_kind=DataKind.DATETIME)


class RowFactory:
    """Factory for generating (id, name, email) rows."""

    @staticmethod
    def create_batch(count: int) -> list[list[Any]]:
        return [[i + 1, fake.name(), fake.email()] for i in range(count)]


class MemorySite:
    """Export site writing into a string buffer."""

    def __init__(
        self, columns: Sequence[ColumnDescriptor], table_name: str | None = "T"
    ) -> None:
        self._columns = list(columns)
        self.table_name = table_name
        self.out = io.StringIO()
        self.binary_data: list[bytes] = []
        self.omit_schema_requests: list[bool] = []

    @property
    def columns(self) -> list[ColumnDescriptor]:
        return self._columns

    def get_table_name(self, omit_schema: bool) -> str | None:
        self.omit_schema_requests.append(omit_schema)
        if self.table_name and omit_schema and "." in self.table_name:
            return self.table_name.rsplit(".", 1)[1]
        return self.table_name

    def get_writer(self) -> io.StringIO:
        return self.out

    def write_binary_data(self, storage: ContentStorage) -> None:
        with storage.get_content_stream() as stream:
            data = stream.read()
        self.binary_data.append(data)
        self.out.write(SQLDialect().format_binary(data))

    @property
    def text(self) -> str:
        return self.out.getvalue()


class ListSource:
    """Row source over an in-memory list."""

    def __init__(
        self,
        columns: Sequence[ColumnDescriptor],
        rows: Sequence[Sequence[Any]],
        table_name: str | None = "T",
    ) -> None:
        self._columns = list(columns)
        self._rows = rows
        self.table_name = table_name

    @property
    def columns(self) -> list[ColumnDescriptor]:
        return self._columns

    def get_table_name(self, omit_schema: bool) -> str | None:
        return self.table_name

    def rows(self) -> Iterator[Sequence[Any]]:
        yield from self._rows
