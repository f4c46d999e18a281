"""Exporter options and their parsing from key/value properties."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from ..utils.logging_config import get_logger
from .models import IdentifierCase
from .variants import InsertVariant

logger = get_logger(__name__)

DEFAULT_ROWS_IN_STATEMENT = 10

PROP_INCLUDE_AUTO_GENERATED = "include_auto_generated"
PROP_OMIT_SCHEMA = "omit_schema"
PROP_ROWS_IN_STATEMENT = "rows_in_statement"
PROP_NATIVE_FORMAT = "native_format"
PROP_LINE_BEFORE_ROWS = "line_before_rows"
PROP_USER_TABLE_NAME = "user_table_name"
PROP_KEYWORD_CASE = "keyword_case"
PROP_IDENTIFIER_CASE = "identifier_case"
PROP_INSERT_VARIANT = "insert_variant"
PROP_ON_CONFLICT = "on_conflict"
PROP_USE_DIALECT_DEFAULTS = "use_dialect_defaults"
PROP_LINE_SEPARATOR = "line_separator"

PROPERTY_NAMES = (
    PROP_INCLUDE_AUTO_GENERATED,
    PROP_OMIT_SCHEMA,
    PROP_ROWS_IN_STATEMENT,
    PROP_NATIVE_FORMAT,
    PROP_LINE_BEFORE_ROWS,
    PROP_USER_TABLE_NAME,
    PROP_KEYWORD_CASE,
    PROP_IDENTIFIER_CASE,
    PROP_INSERT_VARIANT,
    PROP_ON_CONFLICT,
    PROP_USE_DIALECT_DEFAULTS,
    PROP_LINE_SEPARATOR,
)


def to_bool(value: Any, default: bool = False) -> bool:
    """Lenient boolean conversion for property values."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if not text:
        return default
    return text in ("true", "1", "yes", "on")


def to_rows_in_statement(value: Any) -> int:
    """Parse a batch size, falling back to the default on bad input."""
    if value is None or value == "":
        return DEFAULT_ROWS_IN_STATEMENT
    try:
        rows = int(str(value).strip())
    except ValueError:
        logger.debug(f"Invalid rows per statement {value!r}, using default")
        return DEFAULT_ROWS_IN_STATEMENT
    if rows < 1:
        return DEFAULT_ROWS_IN_STATEMENT
    return rows


def parse_keyword_case(value: Any) -> IdentifierCase:
    """'lower' selects lower case keywords, anything else upper case."""
    if value is not None and str(value).strip().lower() == "lower":
        return IdentifierCase.LOWER
    return IdentifierCase.UPPER


def parse_identifier_case(value: Any) -> IdentifierCase:
    """'as is' keeps identifiers, 'lower' lowers them, anything else uppers."""
    text = "" if value is None else str(value).strip().lower()
    if text in ("as is", "as_is", "mixed"):
        return IdentifierCase.MIXED
    if text == "lower":
        return IdentifierCase.LOWER
    return IdentifierCase.UPPER


@dataclass
class ExporterSettings:
    """Options of one SQL export run."""

    include_auto_generated: bool = False
    omit_schema: bool = False
    rows_in_statement: int = DEFAULT_ROWS_IN_STATEMENT
    native_format: bool = True
    line_before_rows: bool = True
    user_table_name: str | None = None
    keyword_case: IdentifierCase = IdentifierCase.UPPER
    identifier_case: IdentifierCase = IdentifierCase.UPPER
    insert_variant: InsertVariant = InsertVariant.INSERT
    on_conflict: str = ""
    use_dialect_defaults: bool = False
    line_separator: str = "\n"

    def __post_init__(self) -> None:
        if self.rows_in_statement < 1:
            self.rows_in_statement = DEFAULT_ROWS_IN_STATEMENT

    @classmethod
    def from_properties(cls, properties: Mapping[str, Any]) -> ExporterSettings:
        """
        Build settings from loosely typed key/value properties.

        Malformed values never fail: they fall back to the defaults.

        Args:
            properties: Mapping of property name to value (strings or
                native types)

        Returns:
            ExporterSettings instance
        """
        defaults = cls()
        user_table_name = properties.get(PROP_USER_TABLE_NAME)
        line_separator = properties.get(PROP_LINE_SEPARATOR)
        return cls(
            include_auto_generated=to_bool(
                properties.get(PROP_INCLUDE_AUTO_GENERATED),
                defaults.include_auto_generated,
            ),
            omit_schema=to_bool(properties.get(PROP_OMIT_SCHEMA), defaults.omit_schema),
            rows_in_statement=to_rows_in_statement(
                properties.get(PROP_ROWS_IN_STATEMENT)
            ),
            native_format=to_bool(
                properties.get(PROP_NATIVE_FORMAT), defaults.native_format
            ),
            line_before_rows=to_bool(
                properties.get(PROP_LINE_BEFORE_ROWS), defaults.line_before_rows
            ),
            user_table_name=str(user_table_name) if user_table_name else None,
            keyword_case=parse_keyword_case(properties.get(PROP_KEYWORD_CASE)),
            identifier_case=parse_identifier_case(
                properties.get(PROP_IDENTIFIER_CASE)
            ),
            insert_variant=InsertVariant.from_value(
                properties.get(PROP_INSERT_VARIANT)
            ),
            on_conflict=str(properties.get(PROP_ON_CONFLICT) or ""),
            use_dialect_defaults=to_bool(
                properties.get(PROP_USE_DIALECT_DEFAULTS),
                defaults.use_dialect_defaults,
            ),
            line_separator=str(line_separator) if line_separator else "\n",
        )
