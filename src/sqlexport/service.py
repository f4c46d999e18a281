"""Export service: drives a row source through the SQL exporter."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .dialects import SQLDialect
from .exporter.models import ColumnDescriptor, ContentStorage
from .exporter.protocols import TextSink, ValueHandler
from .exporter.settings import ExporterSettings
from .exporter.sql_exporter import SQLExporter
from .rendering import LiteralRenderer
from .sources.base import RowSource
from .utils.logging_config import get_logger

logger = get_logger(__name__)


class ProgressMonitor:
    """Counts exported rows and carries a cancellation flag."""

    def __init__(self) -> None:
        self.rows_done = 0
        self._canceled = False

    @property
    def is_canceled(self) -> bool:
        return self._canceled

    def cancel(self) -> None:
        self._canceled = True

    def worked(self, amount: int) -> None:
        self.rows_done += amount


class StreamExportSite:
    """Binds a row source to a text sink for the exporter."""

    def __init__(self, source: RowSource, sink: TextSink, dialect: SQLDialect) -> None:
        self.source = source
        self.sink = sink
        self.dialect = dialect

    @property
    def columns(self) -> Sequence[ColumnDescriptor]:
        return self.source.columns

    def get_table_name(self, omit_schema: bool) -> str | None:
        return self.source.get_table_name(omit_schema)

    def get_writer(self) -> TextSink:
        return self.sink

    def write_binary_data(self, storage: ContentStorage) -> None:
        """Inline binary contents as a dialect binary literal."""
        with storage.get_content_stream() as stream:
            self.sink.write(self.dialect.format_binary(stream.read()))


@dataclass
class ExportResult:
    """Outcome of an export run."""

    table_name: str
    row_count: int
    statement_count: int
    canceled: bool = False


class ExportService:
    """Runs header, rows and footer of one export."""

    def __init__(
        self,
        settings: ExporterSettings | None = None,
        dialect: SQLDialect | None = None,
        renderer: ValueHandler | None = None,
    ) -> None:
        self.settings = settings or ExporterSettings()
        self.dialect = dialect or SQLDialect()
        self.renderer = renderer or LiteralRenderer(self.dialect)

    def export(
        self,
        source: RowSource,
        sink: TextSink,
        monitor: ProgressMonitor | None = None,
    ) -> ExportResult:
        """
        Export every row of a source as SQL into a sink.

        Cancellation is checked between rows; rows already written are
        closed by the footer so the output stays well-formed.

        Args:
            source: Row source
            sink: Text sink receiving the statements
            monitor: Optional progress monitor

        Returns:
            ExportResult with counts
        """
        monitor = monitor or ProgressMonitor()
        site = StreamExportSite(source, sink, self.dialect)
        exporter = SQLExporter(site, self.dialect, self.renderer, self.settings)

        exporter.export_header()
        table_name = exporter.table_identifier()
        logger.info(f"Exporting rows of {table_name} as {self.dialect.name} SQL")

        for row in source.rows():
            if monitor.is_canceled:
                logger.warning(
                    f"Export cancelled after {exporter.row_count} rows"
                )
                break
            exporter.export_row(row, monitor)
            monitor.worked(1)

        exporter.export_footer()

        result = ExportResult(
            table_name=table_name,
            row_count=exporter.row_count,
            statement_count=exporter.session.statement_count,
            canceled=monitor.is_canceled,
        )
        logger.info(
            f"Exported {result.row_count} rows in {result.statement_count} statements"
        )
        return result
