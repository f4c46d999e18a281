"""Keyword skeletons of the supported INSERT variants."""

from __future__ import annotations

from enum import Enum

from .models import IdentifierCase

KEYWORD_INSERT_INTO = "INSERT INTO"
KEYWORD_VALUES = "VALUES"
KEYWORD_INTO = "INTO"
KEYWORD_INSERT_ALL = "INSERT ALL"
KEYWORD_SELECT_FROM_DUAL = "SELECT 1 FROM DUAL"
KEYWORD_UPDATE_OR = "UPDATE OR"
KEYWORD_UPSERT_INTO = "UPSERT INTO"
KEYWORD_REPLACE_INTO = "REPLACE INTO"
KEYWORD_DUPLICATE_KEY = "ON DUPLICATE KEY UPDATE"
KEYWORD_ON_CONFLICT = "ON CONFLICT"


class InsertVariant(Enum):
    """SQL keyword family used to write rows."""

    INSERT = "INSERT"
    INSERT_ALL = KEYWORD_INSERT_ALL
    UPDATE = KEYWORD_UPDATE_OR
    UPSERT = KEYWORD_UPSERT_INTO
    REPLACE = KEYWORD_REPLACE_INTO
    ON_DUPLICATE = KEYWORD_DUPLICATE_KEY
    ON_CONFLICT = KEYWORD_ON_CONFLICT

    @classmethod
    def from_value(cls, value: str | None) -> InsertVariant:
        """
        Resolve a variant from its keyword or member name.

        Unknown values, including None, resolve to plain INSERT.

        Examples:
            >>> InsertVariant.from_value("ON CONFLICT")
            <InsertVariant.ON_CONFLICT: 'ON CONFLICT'>
            >>> InsertVariant.from_value("on_duplicate")
            <InsertVariant.ON_DUPLICATE: 'ON DUPLICATE KEY UPDATE'>
            >>> InsertVariant.from_value("MERGE")
            <InsertVariant.INSERT: 'INSERT'>
        """
        if not value:
            return cls.INSERT
        normalized = " ".join(value.strip().upper().split())
        for variant in cls:
            if normalized in (variant.value, variant.name, variant.name.replace("_", " ")):
                return variant
        return cls.INSERT

    @property
    def is_multi_table(self) -> bool:
        return self is InsertVariant.INSERT_ALL

    @property
    def has_conflict_clause(self) -> bool:
        return self in (InsertVariant.ON_DUPLICATE, InsertVariant.ON_CONFLICT)


def statement_keyword(
    variant: InsertVariant, keyword_case: IdentifierCase, batch_start: bool = True
) -> str:
    """
    Opening keywords of a statement, up to the table name.

    Args:
        variant: Active insert variant
        keyword_case: Case applied to every keyword
        batch_start: For INSERT ALL, whether this row opens a new batch

    Returns:
        Keyword text without trailing space
    """
    if variant is InsertVariant.UPDATE:
        return (
            keyword_case.transform(KEYWORD_UPDATE_OR)
            + " "
            + keyword_case.transform(KEYWORD_INSERT_INTO)
        )
    if variant is InsertVariant.UPSERT:
        return keyword_case.transform(KEYWORD_UPSERT_INTO)
    if variant is InsertVariant.REPLACE:
        return keyword_case.transform(KEYWORD_REPLACE_INTO)
    if variant is InsertVariant.INSERT_ALL:
        into = "\t" + keyword_case.transform(KEYWORD_INTO)
        if batch_start:
            return keyword_case.transform(KEYWORD_INSERT_ALL) + "\n" + into
        return into
    return keyword_case.transform(KEYWORD_INSERT_INTO)


def conflict_clause(
    variant: InsertVariant, expression: str | None, keyword_case: IdentifierCase
) -> str:
    """Trailing duplicate-key clause with a leading space, or an empty string."""
    if not expression:
        return ""
    if variant is InsertVariant.ON_CONFLICT:
        return f" {keyword_case.transform(KEYWORD_ON_CONFLICT)} {expression}"
    if variant is InsertVariant.ON_DUPLICATE:
        return f" {keyword_case.transform(KEYWORD_DUPLICATE_KEY)} {expression}"
    return ""


def values_keyword(keyword_case: IdentifierCase) -> str:
    return keyword_case.transform(KEYWORD_VALUES)


def closing_select(keyword_case: IdentifierCase) -> str:
    """Pseudo-select that terminates an INSERT ALL block."""
    return keyword_case.transform(KEYWORD_SELECT_FROM_DUAL)
