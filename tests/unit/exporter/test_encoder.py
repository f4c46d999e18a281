"""Tests for sqlexport.exporter.encoder module."""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Any

import pytest
from factories import ColumnFactory, MemorySite

from sqlexport.dialects import MySQLDialect, SQLDialect
from sqlexport.exporter.encoder import TRANSFER_BUFFER_SIZE, ValueEncoder
from sqlexport.exporter.models import (
    BinaryContent,
    ColumnDescriptor,
    Content,
    ContentStorage,
    DataKind,
    TextContent,
)
from sqlexport.exporter.settings import ExporterSettings
from sqlexport.rendering import LiteralRenderer


def _never_skip(column: ColumnDescriptor) -> bool:
    return False


class FailingContent(TextContent):
    """Text content whose storage cannot be read."""

    def get_contents(self, monitor: Any = None) -> ContentStorage | None:
        raise OSError("storage gone")


class CanceledMonitor:
    is_canceled = True

    def worked(self, amount: int) -> None:
        pass


class CancelAfterChecksMonitor:
    """Reports cancellation once is_canceled has been read a number of times."""

    def __init__(self, checks: int) -> None:
        self.remaining = checks

    @property
    def is_canceled(self) -> bool:
        self.remaining -= 1
        return self.remaining < 0

    def worked(self, amount: int) -> None:
        pass


class EchoStreamingHandler:
    """Value handler that streams content itself."""

    def __init__(self) -> None:
        self.streamed: list[Content] = []

    def to_sql(self, column: Any, value: Any, display_format: Any) -> str:
        return "unused"

    def write_stream_value(
        self, monitor: Any, column: Any, content: Content, out: Any
    ) -> None:
        self.streamed.append(content)
        out.write("<streamed>")


class TestValueEncoder:
    """Tests for ValueEncoder class."""

    @pytest.fixture
    def column(self) -> ColumnDescriptor:
        return ColumnFactory.create("doc", data_kind=DataKind.CONTENT)

    @pytest.fixture
    def site(self, column: ColumnDescriptor) -> MemorySite:
        return MemorySite([column])

    @pytest.fixture
    def encoder(
        self, dialect: SQLDialect, renderer: LiteralRenderer, site: MemorySite
    ) -> ValueEncoder:
        return ValueEncoder(dialect, renderer, site, ExporterSettings(), _never_skip)

    def render(
        self, encoder: ValueEncoder, column: ColumnDescriptor, value: Any, monitor: Any = None
    ) -> str:
        out = io.StringIO()
        encoder.write_value(out, column, value, monitor)
        return out.getvalue()


class TestScalars(TestValueEncoder):
    """Null, file references and renderer-delegated values."""

    def test_null(self, encoder: ValueEncoder, column: ColumnDescriptor) -> None:
        assert self.render(encoder, column, None) == "NULL"

    def test_file_reference(self, encoder: ValueEncoder, column: ColumnDescriptor) -> None:
        """Paths render as @ followed by the absolute path."""
        path = Path("data") / "blob.bin"

        result = self.render(encoder, column, path)

        assert result == "@" + str(path.absolute())

    def test_scalar_delegates_to_renderer(
        self, encoder: ValueEncoder, column: ColumnDescriptor
    ) -> None:
        assert self.render(encoder, column, "it's") == "'it''s'"
        assert self.render(encoder, column, 42) == "42"

    def test_column_value_handler_wins(
        self, encoder: ValueEncoder, mocker: Any
    ) -> None:
        handler = mocker.MagicMock()
        handler.to_sql.return_value = "CUSTOM"
        column = ColumnFactory.create("c", value_handler=handler)

        assert self.render(encoder, column, 1) == "CUSTOM"


class TestRowValues(TestValueEncoder):
    """Comma placement and skipping."""

    def test_commas_between_values_only(self, encoder: ValueEncoder) -> None:
        columns = [ColumnFactory.create("a"), ColumnFactory.create("b")]
        out = io.StringIO()

        encoder.write_row_values(out, columns, [1, None])

        assert out.getvalue() == "1,NULL"

    def test_skipped_columns_not_written(
        self, dialect: SQLDialect, renderer: LiteralRenderer, site: MemorySite
    ) -> None:
        columns = [
            ColumnFactory.create("hidden", is_pseudo=True),
            ColumnFactory.create("a"),
            ColumnFactory.create("b"),
        ]
        encoder = ValueEncoder(
            dialect, renderer, site, ExporterSettings(), lambda c: c.is_pseudo
        )
        out = io.StringIO()

        encoder.write_row_values(out, columns, ["ROWID", 1, 2])

        assert out.getvalue() == "1,2"

    def test_skipped_content_is_released(
        self, dialect: SQLDialect, renderer: LiteralRenderer, site: MemorySite
    ) -> None:
        """Large objects in skipped columns are released without being read."""
        columns = [
            ColumnFactory.create("hidden", is_custom=True),
            ColumnFactory.create("a"),
        ]
        encoder = ValueEncoder(
            dialect, renderer, site, ExporterSettings(), lambda c: c.is_custom
        )
        content = TextContent("big")
        out = io.StringIO()

        encoder.write_row_values(out, columns, [content, "x"])

        assert out.getvalue() == "'x'"
        assert content.release_count == 1


class TestTextContent(TestValueEncoder):
    """Streaming of large text objects."""

    def test_small_text(self, encoder: ValueEncoder, column: ColumnDescriptor) -> None:
        content = TextContent("hello 'world'")

        result = self.render(encoder, column, content)

        assert result == "'hello ''world'''"
        assert content.release_count == 1

    def test_text_larger_than_chunk(
        self, encoder: ValueEncoder, column: ColumnDescriptor, fake: Any
    ) -> None:
        """Multi-chunk content unescapes back to the original text."""
        text = "'" + fake.text(max_nb_chars=TRANSFER_BUFFER_SIZE * 3) + "'"
        while len(text) <= TRANSFER_BUFFER_SIZE * 2:
            text += " it's " + fake.sentence()
        content = TextContent(text)

        result = self.render(encoder, column, content)

        assert result.startswith("'") and result.endswith("'")
        assert result[1:-1].replace("''", "'") == text
        assert content.release_count == 1

    def test_file_backed_text(
        self, encoder: ValueEncoder, column: ColumnDescriptor, tmp_path: Path
    ) -> None:
        source = tmp_path / "clob.txt"
        source.write_text("line1\nline2", encoding="utf-8")

        result = self.render(encoder, column, TextContent(source))

        assert result == "'line1\nline2'"

    def test_dialect_escaping_applied_per_chunk(
        self, renderer: LiteralRenderer, site: MemorySite, column: ColumnDescriptor
    ) -> None:
        encoder = ValueEncoder(
            MySQLDialect(), renderer, site, ExporterSettings(), _never_skip
        )

        result = self.render(encoder, column, TextContent("a\\b"))

        assert result == "'a\\\\b'"

    def test_no_dialect_copies_raw(
        self, renderer: LiteralRenderer, site: MemorySite, column: ColumnDescriptor
    ) -> None:
        encoder = ValueEncoder(None, renderer, site, ExporterSettings(), _never_skip)

        assert self.render(encoder, column, TextContent("it's")) == "'it's'"

    def test_read_failure_logged_and_released(
        self,
        encoder: ValueEncoder,
        column: ColumnDescriptor,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """A failing read is a warning, not an error, and still releases."""
        content = FailingContent("ignored")

        with caplog.at_level(logging.WARNING):
            result = self.render(encoder, column, content)

        assert result == ""
        assert content.release_count == 1
        assert "storage gone" in caplog.text

    def test_cancellation_releases_content(
        self,
        encoder: ValueEncoder,
        column: ColumnDescriptor,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        content = TextContent("x" * 10)

        with caplog.at_level(logging.WARNING):
            result = self.render(encoder, column, content, CanceledMonitor())

        assert result == "''"
        assert result.count("'") % 2 == 0
        assert content.release_count == 1
        assert "cancelled" in caplog.text

    def test_cancellation_mid_content_closes_literal(
        self,
        encoder: ValueEncoder,
        column: ColumnDescriptor,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Stopping after the first chunk still terminates the string literal."""
        content = TextContent("x" * 5000)

        with caplog.at_level(logging.WARNING):
            result = self.render(encoder, column, content, CancelAfterChecksMonitor(1))

        assert result == "'" + "x" * TRANSFER_BUFFER_SIZE + "'"
        assert result.count("'") % 2 == 0
        assert content.release_count == 1
        assert "cancelled" in caplog.text

    def test_released_content_writes_nothing(
        self, encoder: ValueEncoder, column: ColumnDescriptor
    ) -> None:
        content = TextContent("gone")
        content.release()

        assert self.render(encoder, column, content) == ""
        assert content.release_count == 2

    def test_streaming_handler_delegation(self, encoder: ValueEncoder) -> None:
        """Handlers that stream content are used instead of chunked copying."""
        handler = EchoStreamingHandler()
        column = ColumnFactory.create("doc", value_handler=handler)
        content = TextContent("payload")

        result = self.render(encoder, column, content)

        assert result == "<streamed>"
        assert handler.streamed == [content]
        assert content.release_count == 1


class TestBinaryContent(TestValueEncoder):
    """Binary objects go to the site's binary sink."""

    def test_binary_delegated_to_site(
        self, encoder: ValueEncoder, column: ColumnDescriptor, site: MemorySite
    ) -> None:
        content = BinaryContent(b"\x00\x01\xff")

        encoder.write_value(site.out, column, content)

        assert site.binary_data == [b"\x00\x01\xff"]
        assert site.text == "X'0001ff'"
        assert content.release_count == 1
