"""Row to SQL statement conversion."""

from .encoder import ValueEncoder
from .identifiers import IdentifierTransformer
from .models import (
    BinaryContent,
    ColumnDescriptor,
    Content,
    ContentStorage,
    DataKind,
    DisplayFormat,
    IdentifierCase,
    MultiValueInsertMode,
    TextContent,
)
from .settings import ExporterSettings
from .sql_exporter import ExportSession, RowAction, SQLExporter
from .variants import InsertVariant

__all__ = [
    "BinaryContent",
    "ColumnDescriptor",
    "Content",
    "ContentStorage",
    "DataKind",
    "DisplayFormat",
    "ExportSession",
    "ExporterSettings",
    "IdentifierCase",
    "IdentifierTransformer",
    "InsertVariant",
    "MultiValueInsertMode",
    "RowAction",
    "SQLExporter",
    "TextContent",
    "ValueEncoder",
]
