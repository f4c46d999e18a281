"""Streaming conversion of rows into INSERT statements."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ..utils.logging_config import get_logger
from .encoder import ValueEncoder
from .identifiers import IdentifierTransformer
from .models import ColumnDescriptor, MultiValueInsertMode, Row
from .protocols import DialectLike, ExportSite, ProgressMonitorLike, ValueHandler
from .settings import ExporterSettings
from .variants import (
    closing_select,
    conflict_clause,
    statement_keyword,
    values_keyword,
)

logger = get_logger(__name__)

DEFAULT_TABLE_NAME = "new_table"


class RowAction(Enum):
    """Decision taken by the batcher for an incoming row."""

    CONTINUE_BATCH = "continue_batch"
    START_NEW_STATEMENT = "start_new_statement"


@dataclass
class ExportSession:
    """State of one export run, from header to footer."""

    table_name: str = ""
    columns: list[ColumnDescriptor] = field(default_factory=list)
    column_list: str = ""
    row_count: int = 0
    statement_count: int = 0
    buffer: list[str] = field(default_factory=list)

    def reset_buffer(self) -> list[str]:
        self.buffer = []
        return self.buffer


class SQLExporter:
    """
    Writes rows as INSERT statements (or one of their variants).

    Call export_header() once, export_row() for every row and
    export_footer() at the end of the stream. Output is written
    incrementally to the site's writer; nothing but the current
    statement preamble is buffered.
    """

    def __init__(
        self,
        site: ExportSite,
        dialect: DialectLike | None,
        renderer: ValueHandler,
        settings: ExporterSettings | None = None,
    ) -> None:
        self.site = site
        self.dialect = dialect
        self.renderer = renderer
        self.settings = settings or ExporterSettings()
        self.variant = self.settings.insert_variant
        self.keyword_case = self.settings.keyword_case
        self.rows_in_statement = self.settings.rows_in_statement

        if (
            self.settings.use_dialect_defaults
            and self._default_multi_value_insert_mode()
            is not MultiValueInsertMode.GROUP_ROWS
        ):
            logger.debug("Dialect does not group rows, writing one row per statement")
            self.rows_in_statement = 1

        self.identifiers = (
            IdentifierTransformer(dialect, self.settings.identifier_case)
            if dialect is not None
            else None
        )
        self.encoder = ValueEncoder(
            dialect, renderer, site, self.settings, self.is_skip_column
        )
        self.session = ExportSession()

    @property
    def one_line_entry(self) -> bool:
        """Whether every row is written as its own complete statement."""
        return self.rows_in_statement == 1 and not self.variant.is_multi_table

    @property
    def row_count(self) -> int:
        return self.session.row_count

    def _default_multi_value_insert_mode(self) -> MultiValueInsertMode:
        if self.dialect is None or self.rows_in_statement == 1:
            return MultiValueInsertMode.NOT_SUPPORTED
        return self.dialect.default_multi_value_insert_mode()

    def is_skip_column(self, column: ColumnDescriptor) -> bool:
        return (
            column.is_pseudo
            or (column.is_auto_generated and not self.settings.include_auto_generated)
            or column.is_custom
        )

    def should_truncate_output_file_before_export(self) -> bool:
        """Output is append-friendly: earlier statements are kept."""
        return False

    def export_header(self) -> None:
        """Resolve table name and columns and start a new session."""
        session = self.session = ExportSession()
        session.columns = list(self.site.columns)

        table_name = self.settings.user_table_name
        if not table_name:
            table_name = self.site.get_table_name(self.settings.omit_schema)
            if table_name and self.identifiers is not None:
                table_name = self.identifiers.quote_table_name(table_name)
        session.table_name = table_name or DEFAULT_TABLE_NAME

        if self.settings.native_format:
            set_native = getattr(self.renderer, "set_use_native_datetime_format", None)
            if set_native is not None:
                set_native(True)

        session.column_list = ",".join(
            self._column_identifier(column)
            for column in session.columns
            if not self.is_skip_column(column)
        )
        logger.debug(
            f"Exporting into {session.table_name} ({session.column_list}), "
            f"{self.rows_in_statement} rows per statement, variant {self.variant.name}"
        )

    def _column_identifier(self, column: ColumnDescriptor) -> str:
        if self.identifiers is None:
            return column.name
        return self.identifiers.column_identifier(column)

    def table_identifier(self) -> str:
        """Table name as written into the statements."""
        if self.identifiers is None:
            return self.session.table_name
        return self.identifiers.transform_table_name(self.session.table_name)

    def begin_row(self) -> RowAction:
        """Decide whether the next row opens a new statement."""
        if (
            self.one_line_entry
            or self.variant.is_multi_table
            or self.session.row_count % self.rows_in_statement == 0
        ):
            return RowAction.START_NEW_STATEMENT
        return RowAction.CONTINUE_BATCH

    def export_row(self, row: Row, monitor: ProgressMonitorLike | None = None) -> None:
        """
        Write one row.

        Args:
            row: Cell values, same length and order as the header columns
            monitor: Optional progress monitor checked while streaming
                large objects
        """
        out = self.site.get_writer()
        session = self.session
        settings = self.settings
        separator = settings.line_separator
        multi_table = self.variant.is_multi_table
        one_line = self.one_line_entry
        batch_start = session.row_count % self.rows_in_statement == 0
        first_row = False

        if self.begin_row() is RowAction.START_NEW_STATEMENT:
            buffer = session.reset_buffer()
            if session.row_count > 0:
                if not one_line and not multi_table:
                    buffer.append(self._conflict_clause())
                    buffer.append(";")
                elif multi_table and batch_start:
                    buffer.append(separator + closing_select(self.keyword_case) + ";")
                if settings.line_before_rows:
                    buffer.append(separator)
            buffer.append(statement_keyword(self.variant, self.keyword_case, batch_start))
            buffer.append(f" {self.table_identifier()} ({session.column_list}) ")
            buffer.append(values_keyword(self.keyword_case))
            if one_line or multi_table:
                buffer.append(" (")
            if self.rows_in_statement > 1 and settings.line_before_rows and not multi_table:
                buffer.append(separator)
            out.write("".join(buffer))
            first_row = True
            if batch_start:
                session.statement_count += 1

        if not one_line and not multi_table:
            if not first_row:
                out.write(",")
                if settings.line_before_rows:
                    out.write(separator)
            if settings.line_before_rows:
                out.write("\t(")
            else:
                out.write(" (" if first_row else "(")

        session.row_count += 1
        self.encoder.write_row_values(out, session.columns, row, monitor)
        out.write(")")
        if one_line:
            out.write(self._conflict_clause())
            out.write(";")

    def _conflict_clause(self) -> str:
        return conflict_clause(self.variant, self.settings.on_conflict, self.keyword_case)

    def export_footer(self) -> None:
        """Close the last statement. Writes nothing if no row was exported."""
        if self.session.row_count == 0:
            return
        out = self.site.get_writer()
        separator = self.settings.line_separator
        if self.variant.is_multi_table:
            out.write(separator + closing_select(self.keyword_case) + ";" + separator)
        elif not self.one_line_entry:
            out.write(self._conflict_clause())
            out.write(";")
            out.write(separator)
        else:
            out.write(separator)
        logger.debug(
            f"Wrote {self.session.row_count} rows in "
            f"{self.session.statement_count} statements"
        )
