"""CSV file row source."""

from __future__ import annotations

import csv
import re
from collections.abc import Iterator
from decimal import Decimal
from pathlib import Path
from typing import Any

from ..exporter.models import ColumnDescriptor, DataKind, Row, TextContent
from ..utils.exceptions import SourceError
from ..utils.logging_config import get_logger
from .base import strip_schema

logger = get_logger(__name__)

INTEGER_PATTERN = re.compile(r"^-?(0|[1-9]\d*)$")
DECIMAL_PATTERN = re.compile(r"^-?(0|[1-9]\d*)\.\d+$")


class CSVSource:
    """
    Reads rows from a CSV file with a header line.

    Empty cells become NULL, integer and decimal looking cells are
    exported as numbers, and cells longer than lob_threshold are
    streamed as large text objects.
    """

    def __init__(
        self,
        path: str | Path,
        table_name: str | None = None,
        delimiter: str = ",",
        encoding: str = "utf-8",
        lob_threshold: int = 4000,
    ) -> None:
        self.path = Path(path)
        self.table_name = table_name
        self.delimiter = delimiter
        self.encoding = encoding
        self.lob_threshold = lob_threshold
        self._columns: list[ColumnDescriptor] | None = None

    @property
    def columns(self) -> list[ColumnDescriptor]:
        if self._columns is None:
            with self._open() as f:
                header = next(csv.reader(f, delimiter=self.delimiter), None)
            if not header:
                raise SourceError(f"CSV file {self.path} has no header line")
            self._columns = [
                ColumnDescriptor(name=name.strip(), data_kind=DataKind.STRING)
                for name in header
            ]
        return self._columns

    def get_table_name(self, omit_schema: bool) -> str | None:
        name = self.table_name or self.path.stem
        return strip_schema(name) if omit_schema else name

    def rows(self) -> Iterator[Row]:
        width = len(self.columns)
        with self._open() as f:
            reader = csv.reader(f, delimiter=self.delimiter)
            next(reader, None)
            for line_no, record in enumerate(reader, start=2):
                if not record:
                    continue
                if len(record) != width:
                    raise SourceError(
                        f"{self.path}:{line_no}: expected {width} fields, "
                        f"got {len(record)}"
                    )
                yield [self._convert_cell(cell) for cell in record]

    def _open(self):
        try:
            return self.path.open("r", encoding=self.encoding, newline="")
        except OSError as e:
            raise SourceError(f"Cannot open CSV file {self.path}: {e}") from e

    def _convert_cell(self, cell: str) -> Any:
        if cell == "":
            return None
        if INTEGER_PATTERN.match(cell):
            return int(cell)
        if DECIMAL_PATTERN.match(cell):
            return Decimal(cell)
        if len(cell) > self.lob_threshold:
            return TextContent(cell)
        return cell
