"""Custom exceptions for sqlexport."""


class SQLExportError(Exception):
    """Base exception for sqlexport."""

    pass


class ConfigurationError(SQLExportError):
    """Configuration error."""

    pass


class DBConnectionError(SQLExportError):
    """Database connection error."""

    pass


class ReadOnlyEnforcementError(SQLExportError):
    """Read-only connection required but not available."""

    pass


class SourceError(SQLExportError):
    """Row source could not be opened or read."""

    pass


class ExportCancelledError(SQLExportError):
    """Export was cancelled through the progress monitor."""

    pass
