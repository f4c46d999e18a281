"""SQL dialects: identifier quoting, string escaping and insert capabilities."""

from __future__ import annotations

import re
from collections.abc import Sequence

from .exporter.models import MultiValueInsertMode
from .utils.exceptions import ConfigurationError

PLAIN_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_$]*$")

# Words that cannot be used bare as column or table names in any of the
# supported dialects.
RESERVED_KEYWORDS = frozenset(
    {
        "ALL", "AND", "AS", "ASC", "BETWEEN", "BY", "CASE", "CHECK", "COLUMN",
        "CONSTRAINT", "CREATE", "CROSS", "DEFAULT", "DELETE", "DESC",
        "DISTINCT", "DROP", "ELSE", "END", "EXISTS", "FALSE", "FOR",
        "FOREIGN", "FROM", "FULL", "GRANT", "GROUP", "HAVING", "IN", "INDEX",
        "INNER", "INSERT", "INTO", "IS", "JOIN", "KEY", "LEFT", "LIKE",
        "LIMIT", "NOT", "NULL", "ON", "OR", "ORDER", "OUTER", "PRIMARY",
        "REFERENCES", "RIGHT", "SELECT", "SET", "TABLE", "THEN", "TO",
        "TRUE", "UNION", "UNIQUE", "UPDATE", "USER", "USING", "VALUES",
        "WHEN", "WHERE", "WITH",
    }
)


class SQLDialect:
    """
    Generic ANSI SQL dialect.

    Subclasses override the class attributes and the few methods whose
    behaviour differs per database.
    """

    name = "generic"
    identifier_quote = '"'
    null_literal = "NULL"
    multi_value_insert_mode = MultiValueInsertMode.GROUP_ROWS
    reserved_keywords: frozenset[str] = RESERVED_KEYWORDS

    def escape_string(self, value: str) -> str:
        """Escape text for use inside a single-quoted literal."""
        return value.replace("'", "''")

    def quote_identifier(self, name: str) -> str:
        """
        Quote an identifier when it cannot be written bare.

        Already quoted identifiers and plain, non-reserved names are
        returned unchanged.
        """
        if self.is_quoted_identifier(name):
            return name
        if PLAIN_IDENTIFIER.match(name) and name.upper() not in self.reserved_keywords:
            return name
        quote = self.identifier_quote
        return quote + name.replace(quote, quote * 2) + quote

    def is_quoted_identifier(self, name: str) -> bool:
        quote = self.identifier_quote
        return len(name) >= 2 and name.startswith(quote) and name.endswith(quote)

    def split_identifier(self, name: str) -> list[str]:
        """
        Split a possibly qualified name into its parts.

        Dots inside quoted parts do not split.

        Examples:
            >>> SQLDialect().split_identifier('public."my.table"')
            ['public', '"my.table"']
        """
        quote = self.identifier_quote
        parts: list[str] = []
        current: list[str] = []
        in_quotes = False
        for char in name:
            if char == quote:
                in_quotes = not in_quotes
            if char == "." and not in_quotes:
                parts.append("".join(current))
                current = []
                continue
            current.append(char)
        parts.append("".join(current))
        return parts

    def qualified_name(self, parts: Sequence[str]) -> str:
        return ".".join(part for part in parts if part)

    def default_multi_value_insert_mode(self) -> MultiValueInsertMode:
        return self.multi_value_insert_mode

    def format_binary(self, data: bytes) -> str:
        """Binary literal for inline blob values."""
        return f"X'{data.hex()}'"

    def __str__(self) -> str:
        return self.name


class PostgreSQLDialect(SQLDialect):
    name = "postgresql"

    def format_binary(self, data: bytes) -> str:
        return f"'\\x{data.hex()}'"


class MySQLDialect(SQLDialect):
    name = "mysql"
    identifier_quote = "`"

    def escape_string(self, value: str) -> str:
        return value.replace("\\", "\\\\").replace("'", "''")


class OracleDialect(SQLDialect):
    name = "oracle"
    multi_value_insert_mode = MultiValueInsertMode.PLAIN

    def format_binary(self, data: bytes) -> str:
        return f"HEXTORAW('{data.hex().upper()}')"


class SQLiteDialect(SQLDialect):
    name = "sqlite"


_DIALECTS: dict[str, type[SQLDialect]] = {
    "generic": SQLDialect,
    "postgresql": PostgreSQLDialect,
    "postgres": PostgreSQLDialect,
    "mysql": MySQLDialect,
    "oracle": OracleDialect,
    "sqlite": SQLiteDialect,
}


def get_dialect(name: str | None) -> SQLDialect:
    """
    Get a dialect instance by name.

    Args:
        name: Dialect name (case insensitive); None means generic

    Raises:
        ConfigurationError: If the dialect is unknown
    """
    key = (name or "generic").strip().lower()
    try:
        return _DIALECTS[key]()
    except KeyError:
        known = ", ".join(sorted(_DIALECTS))
        raise ConfigurationError(
            f"Unknown SQL dialect: {name}. Expected one of: {known}"
        ) from None
