"""PostgreSQL query row source."""

from __future__ import annotations

import re
from collections.abc import Iterator
from typing import Any

import psycopg

from ..db.connection import ConnectionManager
from ..exporter.models import (
    BinaryContent,
    ColumnDescriptor,
    DataKind,
    Row,
    TextContent,
)
from ..utils.exceptions import SourceError
from ..utils.logging_config import get_logger
from .base import strip_schema

logger = get_logger(__name__)

# PostgreSQL type OIDs (pg_type.oid) grouped by exported data kind
TYPE_OID_KINDS: dict[int, DataKind] = {
    16: DataKind.BOOLEAN,
    20: DataKind.NUMERIC,
    21: DataKind.NUMERIC,
    23: DataKind.NUMERIC,
    26: DataKind.NUMERIC,
    700: DataKind.NUMERIC,
    701: DataKind.NUMERIC,
    1700: DataKind.NUMERIC,
    18: DataKind.STRING,
    19: DataKind.STRING,
    25: DataKind.STRING,
    1042: DataKind.STRING,
    1043: DataKind.STRING,
    2950: DataKind.STRING,
    1082: DataKind.DATETIME,
    1083: DataKind.DATETIME,
    1114: DataKind.DATETIME,
    1184: DataKind.DATETIME,
    1266: DataKind.DATETIME,
    17: DataKind.BINARY,
    114: DataKind.OBJECT,
    3802: DataKind.OBJECT,
}

PSEUDO_COLUMNS = frozenset({"ctid", "oid", "xmin", "xmax", "cmin", "cmax", "tableoid"})

_NAME_PART = r"(?:\"[^\"]+\"|[\w$]+)"
FROM_TABLE_PATTERN = re.compile(
    rf"\bFROM\s+({_NAME_PART}(?:\.{_NAME_PART})?)", re.IGNORECASE
)


def table_name_from_query(query: str) -> str | None:
    """
    Find the first table named in the top-level FROM clause of a query.

    FROM keywords inside parentheses (subqueries, EXTRACT(... FROM ...))
    are skipped.

    Examples:
        >>> table_name_from_query("SELECT * FROM public.users WHERE id = 1")
        'public.users'
        >>> table_name_from_query("SELECT 1") is None
        True
    """
    for match in FROM_TABLE_PATTERN.finditer(query):
        start = match.start()
        if query.count("(", 0, start) == query.count(")", 0, start):
            return match.group(1)
    return None


class QuerySource:
    """Streams the result of a SELECT through a server-side cursor."""

    def __init__(
        self,
        conn_manager: ConnectionManager,
        query: str,
        table_name: str | None = None,
        fetch_size: int = 1000,
        lob_threshold: int = 4000,
    ) -> None:
        self.conn_manager = conn_manager
        self.query = query
        self.table_name = table_name
        self.fetch_size = fetch_size
        self.lob_threshold = lob_threshold
        self._cursor: psycopg.Cursor | None = None
        self._columns: list[ColumnDescriptor] | None = None

    @property
    def columns(self) -> list[ColumnDescriptor]:
        if self._columns is None:
            cursor = self._execute()
            if cursor.description is None:
                raise SourceError("Query does not return rows")
            self._columns = [
                ColumnDescriptor(
                    name=desc.name,
                    data_kind=TYPE_OID_KINDS.get(desc.type_code, DataKind.UNKNOWN),
                    type_name=str(desc.type_code),
                    is_pseudo=desc.name in PSEUDO_COLUMNS,
                )
                for desc in cursor.description
            ]
        return self._columns

    def get_table_name(self, omit_schema: bool) -> str | None:
        name = self.table_name or table_name_from_query(self.query)
        if name and omit_schema:
            return strip_schema(name)
        return name

    def _execute(self) -> psycopg.Cursor:
        if self._cursor is None:
            conn = self.conn_manager.get_connection()
            cursor = conn.cursor(name="sqlexport_source")
            cursor.itersize = self.fetch_size
            logger.debug(f"Executing source query: {self.query}")
            try:
                cursor.execute(self.query)
            except psycopg.Error as e:
                cursor.close()
                raise SourceError(f"Source query failed: {e}") from e
            self._cursor = cursor
        return self._cursor

    def rows(self) -> Iterator[Row]:
        cursor = self._execute()
        try:
            for record in cursor:
                yield [self._convert_value(value) for value in record]
        finally:
            cursor.close()
            self._cursor = None

    def _convert_value(self, value: Any) -> Any:
        if isinstance(value, (bytes, memoryview)):
            return BinaryContent(bytes(value))
        if isinstance(value, str) and len(value) > self.lob_threshold:
            return TextContent(value)
        return value
