"""Rendering of single cell values as SQL text."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path
from typing import IO, Any

from ..utils.exceptions import ExportCancelledError
from ..utils.logging_config import get_logger
from .models import ColumnDescriptor, Content, DataKind, DisplayFormat, Row
from .protocols import (
    DialectLike,
    ExportSite,
    ProgressMonitorLike,
    StreamingValueHandler,
    TextSink,
    ValueHandler,
)
from .settings import ExporterSettings

logger = get_logger(__name__)

STRING_QUOTE = "'"
TRANSFER_BUFFER_SIZE = 2000


class ValueEncoder:
    """Writes the values of one row, column by column."""

    def __init__(
        self,
        dialect: DialectLike | None,
        renderer: ValueHandler,
        site: ExportSite,
        settings: ExporterSettings,
        is_skip_column: Callable[[ColumnDescriptor], bool],
    ) -> None:
        self.dialect = dialect
        self.renderer = renderer
        self.site = site
        self.settings = settings
        self.is_skip_column = is_skip_column

    @property
    def null_literal(self) -> str:
        return self.dialect.null_literal if self.dialect is not None else "NULL"

    def write_row_values(
        self,
        out: TextSink,
        columns: Sequence[ColumnDescriptor],
        row: Row,
        monitor: ProgressMonitorLike | None = None,
    ) -> None:
        """Write comma separated values of all exported columns."""
        has_value = False
        for column, value in zip(columns, row):
            if self.is_skip_column(column):
                if isinstance(value, Content):
                    value.release()
                continue
            if has_value:
                out.write(",")
            has_value = True
            self.write_value(out, column, value, monitor)

    def write_value(
        self,
        out: TextSink,
        column: ColumnDescriptor,
        value: Any,
        monitor: ProgressMonitorLike | None = None,
    ) -> None:
        if value is None:
            out.write(self.null_literal)
        elif isinstance(value, Content):
            self._write_content(out, column, value, monitor)
        elif isinstance(value, Path):
            out.write("@")
            out.write(str(value.absolute()))
        else:
            # Date/time values in display format are rendered bare by the
            # handler and quoted here.
            need_quotes = False
            display_format = DisplayFormat.NATIVE
            if not self.settings.native_format and column.data_kind is DataKind.DATETIME:
                display_format = DisplayFormat.UI
                need_quotes = True
            handler = column.value_handler or self.renderer
            sql_value = handler.to_sql(column, value, display_format)
            if need_quotes:
                out.write(STRING_QUOTE)
            out.write(sql_value)
            if need_quotes:
                out.write(STRING_QUOTE)

    def _write_content(
        self,
        out: TextSink,
        column: ColumnDescriptor,
        content: Content,
        monitor: ProgressMonitorLike | None,
    ) -> None:
        try:
            handler = column.value_handler
            if isinstance(handler, StreamingValueHandler):
                handler.write_stream_value(monitor, column, content, out)
            else:
                storage = content.get_contents(monitor)
                if storage is not None:
                    if content.is_text:
                        with storage.get_content_reader() as reader:
                            self.write_string_stream(out, reader, monitor)
                    else:
                        self.site.write_binary_data(storage)
        except Exception as e:
            logger.warning(f"Failed to write content of column {column.name}: {e}")
        finally:
            content.release()

    def write_string_stream(
        self,
        out: TextSink,
        reader: IO[str],
        monitor: ProgressMonitorLike | None = None,
    ) -> None:
        """
        Copy a character stream into a quoted, escaped literal.

        The closing quote is written even when copying stops early, so the
        statement around the literal stays well-formed.
        """
        out.write(STRING_QUOTE)
        try:
            while True:
                if monitor is not None and monitor.is_canceled:
                    raise ExportCancelledError("Export cancelled while reading content")
                chunk = reader.read(TRANSFER_BUFFER_SIZE)
                if not chunk:
                    break
                if self.dialect is not None:
                    out.write(self.dialect.escape_string(chunk))
                else:
                    out.write(chunk)
        finally:
            out.write(STRING_QUOTE)
