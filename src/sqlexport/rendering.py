"""Default conversion of Python values into SQL literals."""

from __future__ import annotations

import json
import math
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any
from uuid import UUID

from .dialects import SQLDialect
from .exporter.models import ColumnDescriptor, DisplayFormat
from .utils.logging_config import get_logger

logger = get_logger(__name__)

UI_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"
UI_DATE_FORMAT = "%Y-%m-%d"
UI_TIME_FORMAT = "%H:%M:%S"


class LiteralRenderer:
    """
    Renders scalars as SQL literals for a dialect.

    Strings and other quoted types come back already quoted and escaped.
    Date/time values requested in UI format come back bare, the caller
    quotes them.
    """

    def __init__(
        self,
        dialect: SQLDialect | None = None,
        datetime_format: str = UI_DATETIME_FORMAT,
    ) -> None:
        self.dialect = dialect or SQLDialect()
        self.datetime_format = datetime_format
        self.use_native_datetime_format = False

    def set_use_native_datetime_format(self, enabled: bool) -> None:
        self.use_native_datetime_format = enabled

    def to_sql(
        self, column: ColumnDescriptor, value: Any, display_format: DisplayFormat
    ) -> str:
        """
        Format a value as a SQL literal.

        Args:
            column: Column the value belongs to
            value: Python value (never None for exporter calls, but handled)
            display_format: NATIVE for SQL literals, UI for display text

        Returns:
            Literal text
        """
        if value is None:
            return self.dialect.null_literal

        if isinstance(value, bool):
            return "TRUE" if value else "FALSE"

        if isinstance(value, int):
            return str(value)

        if isinstance(value, float):
            if math.isnan(value):
                return "'NaN'"
            if math.isinf(value):
                return "'Infinity'" if value > 0 else "'-Infinity'"
            return repr(value)

        if isinstance(value, Decimal):
            if not value.is_finite():
                return self._quote(str(value))
            return str(value)

        if isinstance(value, (datetime, date, time)):
            return self._format_temporal(value, display_format)

        if isinstance(value, UUID):
            return self._quote(str(value))

        if isinstance(value, (bytes, bytearray, memoryview)):
            return self.dialect.format_binary(bytes(value))

        if isinstance(value, (dict, list)):
            return self._quote(json.dumps(value, default=str))

        if isinstance(value, str):
            return self._quote(value)

        logger.debug(f"Rendering {type(value).__name__} value of {column.name} as text")
        return self._quote(str(value))

    def _quote(self, text: str) -> str:
        return "'" + self.dialect.escape_string(text) + "'"

    def _format_temporal(
        self, value: datetime | date | time, display_format: DisplayFormat
    ) -> str:
        if display_format is DisplayFormat.NATIVE:
            if not self.use_native_datetime_format:
                return self._quote(self._format_temporal(value, DisplayFormat.UI))
            if isinstance(value, datetime):
                return self._quote(value.isoformat(sep=" "))
            return self._quote(value.isoformat())

        if isinstance(value, datetime):
            return value.strftime(self.datetime_format)
        if isinstance(value, date):
            return value.strftime(UI_DATE_FORMAT)
        return value.strftime(UI_TIME_FORMAT)
