"""sqlexport: stream tabular rows as SQL INSERT statements."""

from .dialects import SQLDialect, get_dialect
from .exporter import ColumnDescriptor, ExporterSettings, InsertVariant, SQLExporter
from .rendering import LiteralRenderer
from .service import ExportResult, ExportService, ProgressMonitor

__all__ = [
    "ColumnDescriptor",
    "ExportResult",
    "ExportService",
    "ExporterSettings",
    "InsertVariant",
    "LiteralRenderer",
    "ProgressMonitor",
    "SQLDialect",
    "SQLExporter",
    "get_dialect",
]
