"""Data models for exported columns, rows and large objects."""

from __future__ import annotations

import io
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import IO, TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .protocols import ProgressMonitorLike, ValueHandler


class DataKind(Enum):
    """Coarse classification of a column's values."""

    BOOLEAN = "boolean"
    NUMERIC = "numeric"
    STRING = "string"
    DATETIME = "datetime"
    BINARY = "binary"
    CONTENT = "content"
    OBJECT = "object"
    UNKNOWN = "unknown"


class DisplayFormat(Enum):
    """Format requested from a value renderer."""

    UI = "ui"
    EDIT = "edit"
    NATIVE = "native"


class IdentifierCase(Enum):
    """Case policy for keywords and identifiers."""

    UPPER = "upper"
    LOWER = "lower"
    MIXED = "mixed"

    def transform(self, value: str) -> str:
        """Apply the case policy to a piece of text."""
        if self is IdentifierCase.UPPER:
            return value.upper()
        if self is IdentifierCase.LOWER:
            return value.lower()
        return value


class MultiValueInsertMode(Enum):
    """How a dialect groups several rows into one INSERT."""

    NOT_SUPPORTED = "not_supported"
    GROUP_ROWS = "group_rows"
    PLAIN = "plain"


@dataclass(frozen=True)
class ColumnDescriptor:
    """Represents one exported column."""

    name: str
    data_kind: DataKind = DataKind.STRING
    type_name: str = ""
    is_pseudo: bool = False  # rowid-like system column
    is_auto_generated: bool = False
    is_custom: bool = False  # computed, no backing source value
    value_handler: ValueHandler | None = field(default=None, compare=False)


Row = Sequence[Any]


class ContentStorage:
    """Materialized payload of a large object."""

    def __init__(self, data: str | bytes | Path, encoding: str = "utf-8") -> None:
        self._data = data
        self.encoding = encoding

    def get_content_reader(self) -> IO[str]:
        """Open the payload as a character stream."""
        if isinstance(self._data, Path):
            return self._data.open("r", encoding=self.encoding)
        if isinstance(self._data, bytes):
            return io.StringIO(self._data.decode(self.encoding))
        return io.StringIO(self._data)

    def get_content_stream(self) -> IO[bytes]:
        """Open the payload as a byte stream."""
        if isinstance(self._data, Path):
            return self._data.open("rb")
        if isinstance(self._data, str):
            return io.BytesIO(self._data.encode(self.encoding))
        return io.BytesIO(self._data)

    def get_content_length(self) -> int:
        if isinstance(self._data, Path):
            return self._data.stat().st_size
        return len(self._data)


class Content:
    """
    Lazily materialized large object attached to a row.

    The owner of a row must call release() exactly once after the value
    has been rendered.
    """

    is_text = False

    def __init__(self, data: str | bytes | Path, encoding: str = "utf-8") -> None:
        self._storage: ContentStorage | None = ContentStorage(data, encoding)
        self.release_count = 0

    @property
    def is_released(self) -> bool:
        return self._storage is None

    def get_contents(
        self, monitor: ProgressMonitorLike | None = None
    ) -> ContentStorage | None:
        """
        Get the underlying storage.

        Args:
            monitor: Optional progress monitor of the running export

        Returns:
            The storage, or None once the content has been released
        """
        return self._storage

    def release(self) -> None:
        """Drop the handle to the underlying storage."""
        self.release_count += 1
        self._storage = None

    def __repr__(self) -> str:
        state = "released" if self.is_released else "open"
        return f"{type(self).__name__}({state})"


class TextContent(Content):
    """Character large object (CLOB, long text)."""

    is_text = True


class BinaryContent(Content):
    """Binary large object (BLOB, bytea)."""

    is_text = False
