"""Interfaces of the collaborators the exporter is wired with."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .models import (
        ColumnDescriptor,
        Content,
        ContentStorage,
        DisplayFormat,
        MultiValueInsertMode,
    )


class TextSink(Protocol):
    """Append-only character sink."""

    def write(self, text: str) -> Any: ...


class ProgressMonitorLike(Protocol):
    """Cooperative progress and cancellation signal."""

    @property
    def is_canceled(self) -> bool: ...

    def worked(self, amount: int) -> None: ...


class DialectLike(Protocol):
    """Quoting and escaping rules of the target database."""

    null_literal: str

    def escape_string(self, value: str) -> str: ...

    def quote_identifier(self, name: str) -> str: ...

    def is_quoted_identifier(self, name: str) -> bool: ...

    def split_identifier(self, name: str) -> list[str]: ...

    def qualified_name(self, parts: Sequence[str]) -> str: ...

    def default_multi_value_insert_mode(self) -> MultiValueInsertMode: ...

    def format_binary(self, data: bytes) -> str: ...


@runtime_checkable
class ValueHandler(Protocol):
    """Renders a scalar as a SQL literal."""

    def to_sql(
        self, column: ColumnDescriptor, value: Any, display_format: DisplayFormat
    ) -> str: ...


@runtime_checkable
class StreamingValueHandler(Protocol):
    """Value handler able to stream a large object straight into the sink."""

    def write_stream_value(
        self,
        monitor: ProgressMonitorLike | None,
        column: ColumnDescriptor,
        content: Content,
        out: TextSink,
    ) -> None: ...


class ExportSite(Protocol):
    """Where rows come from and where output goes."""

    @property
    def columns(self) -> Sequence[ColumnDescriptor]: ...

    def get_table_name(self, omit_schema: bool) -> str | None: ...

    def get_writer(self) -> TextSink: ...

    def write_binary_data(self, storage: ContentStorage) -> None: ...
