"""Row sources feeding the exporter."""

from .base import RowSource
from .csv_source import CSVSource
from .query_source import QuerySource

__all__ = ["CSVSource", "QuerySource", "RowSource"]
