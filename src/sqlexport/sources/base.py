"""Common interface of row sources."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Protocol

from ..exporter.models import ColumnDescriptor, Row


class RowSource(Protocol):
    """Ordered columns plus a stream of rows matching them."""

    @property
    def columns(self) -> Sequence[ColumnDescriptor]: ...

    def get_table_name(self, omit_schema: bool) -> str | None: ...

    def rows(self) -> Iterator[Row]: ...


def strip_schema(table_name: str) -> str:
    """Drop the schema qualifier of a dotted table name."""
    if "." not in table_name:
        return table_name
    return table_name.rsplit(".", 1)[1]
