"""Case normalization of table and column identifiers."""

from __future__ import annotations

from .models import ColumnDescriptor, IdentifierCase
from .protocols import DialectLike


class IdentifierTransformer:
    """Applies an identifier case policy while respecting quoted names."""

    def __init__(self, dialect: DialectLike, identifier_case: IdentifierCase) -> None:
        self.dialect = dialect
        self.identifier_case = identifier_case

    def transform_identifier(self, identifier: str) -> str:
        """Apply the case policy to a single, unqualified identifier."""
        if self.dialect.is_quoted_identifier(identifier):
            return identifier
        return self.identifier_case.transform(identifier)

    def quote_table_name(self, table_name: str) -> str:
        """
        Quote the parts of a discovered table name that cannot be written bare.

        Examples:
            >>> from sqlexport.dialects import SQLDialect
            >>> t = IdentifierTransformer(SQLDialect(), IdentifierCase.UPPER)
            >>> t.quote_table_name("sales.order items")
            'sales."order items"'
        """
        parts = [
            self.dialect.quote_identifier(part)
            for part in self.dialect.split_identifier(table_name)
        ]
        return self.dialect.qualified_name(parts)

    def transform_table_name(self, table_name: str) -> str:
        """
        Apply the case policy to a possibly qualified table name.

        Examples:
            >>> from sqlexport.dialects import SQLDialect
            >>> t = IdentifierTransformer(SQLDialect(), IdentifierCase.UPPER)
            >>> t.transform_table_name('public."Orders"')
            'PUBLIC."Orders"'
        """
        if self.identifier_case is IdentifierCase.MIXED:
            return table_name
        parts = [
            self.transform_identifier(part)
            for part in self.dialect.split_identifier(table_name)
        ]
        return self.dialect.qualified_name(parts)

    def column_identifier(self, column: ColumnDescriptor) -> str:
        """Quote a column name if needed, then apply the case policy."""
        quoted = self.dialect.quote_identifier(column.name)
        if self.identifier_case is IdentifierCase.MIXED:
            return quoted
        return self.transform_identifier(quoted)
