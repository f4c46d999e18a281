"""CLI argument parsing and main entry point."""

from __future__ import annotations

import argparse
import dataclasses
import sys
from importlib.metadata import version as get_version

from rich.console import Console
from rich.table import Table as RichTable

from .config import AppConfig, load_config
from .db.connection import ConnectionManager
from .dialects import get_dialect
from .exporter.settings import (
    ExporterSettings,
    parse_identifier_case,
    parse_keyword_case,
    to_rows_in_statement,
)
from .exporter.variants import InsertVariant
from .service import ExportResult, ExportService
from .sources import CSVSource, QuerySource
from .sources.base import RowSource
from .utils.exceptions import ConfigurationError, SQLExportError
from .utils.logging_config import get_logger, setup_logging
from .utils.security import SecureCredentials
from .writer import SQLWriter

logger = get_logger(__name__)


def apply_exporter_overrides(
    settings: ExporterSettings, args: argparse.Namespace
) -> ExporterSettings:
    """
    Overlay command line options on the configured exporter settings.

    Args:
        settings: Settings loaded from the environment
        args: Parsed command line arguments

    Returns:
        New ExporterSettings instance
    """
    overrides: dict[str, object] = {}
    if args.table:
        overrides["user_table_name"] = args.table
    if args.rows_per_statement is not None:
        overrides["rows_in_statement"] = to_rows_in_statement(args.rows_per_statement)
    if args.variant:
        overrides["insert_variant"] = InsertVariant.from_value(args.variant)
    if args.on_conflict:
        overrides["on_conflict"] = args.on_conflict
    if args.keyword_case:
        overrides["keyword_case"] = parse_keyword_case(args.keyword_case)
    if args.identifier_case:
        overrides["identifier_case"] = parse_identifier_case(args.identifier_case)
    if args.include_auto_generated:
        overrides["include_auto_generated"] = True
    if args.omit_schema:
        overrides["omit_schema"] = True
    if args.no_native_format:
        overrides["native_format"] = False
    if args.no_line_before_rows:
        overrides["line_before_rows"] = False
    if args.use_dialect_defaults:
        overrides["use_dialect_defaults"] = True
    return dataclasses.replace(settings, **overrides)


def build_source(
    args: argparse.Namespace, config: AppConfig, credentials: SecureCredentials
) -> tuple[RowSource, ConnectionManager | None]:
    """
    Create the row source selected on the command line.

    Args:
        args: Parsed command line arguments
        config: Application configuration
        credentials: Password holder used by a query source

    Raises:
        ConfigurationError: If the query source lacks connection parameters
    """
    if args.csv:
        source = CSVSource(
            args.csv,
            delimiter=args.delimiter,
            lob_threshold=config.lob_threshold,
        )
        return source, None

    if not config.db.host or not config.db.user or not config.db.database:
        raise ConfigurationError("Missing required connection parameters")

    conn_manager = ConnectionManager(
        config.db,
        credentials,
        ttl_minutes=config.connection_ttl_minutes,
    )
    source = QuerySource(
        conn_manager,
        args.query,
        lob_threshold=config.lob_threshold,
    )
    return source, conn_manager


def print_summary(result: ExportResult, destination: str) -> None:
    """Print an export summary table to stderr."""
    console = Console(stderr=True)
    table = RichTable(title="SQL export", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Table", result.table_name)
    table.add_row("Rows", f"{result.row_count:,}")
    table.add_row("Statements", f"{result.statement_count:,}")
    table.add_row("Output", destination)
    if result.canceled:
        table.add_row("Status", "[yellow]cancelled[/yellow]")
    console.print(table)


def run_export(args: argparse.Namespace, config: AppConfig) -> int:
    """
    Execute the export.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    dialect = get_dialect(config.dialect)
    service = ExportService(config.exporter, dialect)
    credentials = SecureCredentials()
    conn_manager: ConnectionManager | None = None

    try:
        source, conn_manager = build_source(args, config, credentials)
        output = args.output
        if args.save and not output:
            table_name = (
                config.exporter.user_table_name
                or source.get_table_name(config.exporter.omit_schema)
                or "export"
            )
            output = str(SQLWriter.get_default_output_path(config.output_dir, table_name))

        if output:
            with SQLWriter.open_file(output, append=args.append) as sink:
                result = service.export(source, sink)
            print_summary(result, output)
        else:
            with SQLWriter.open_stdout() as sink:
                service.export(source, sink)
    finally:
        if conn_manager is not None:
            conn_manager.close()
        credentials.clear()

    return 0


def main() -> int:
    """
    Main entry point for sqlexport CLI.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = argparse.ArgumentParser(
        description="Export tabular rows as SQL INSERT statements",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # CSV file to stdout, 100 rows per INSERT
  %(prog)s --csv users.csv --rows-per-statement 100

  # PostgreSQL query to a file, one statement per row, MySQL syntax
  PGPASSWORD=xxx %(prog)s --host localhost --database mydb --user me \\
      --query "SELECT * FROM users" --dialect mysql --rows-per-statement 1 -o users.sql

  # Upsert statements appended to an existing script
  %(prog)s --csv users.csv --variant "ON CONFLICT" --on-conflict "(id) DO NOTHING" \\
      -o seed.sql --append
        """,
    )

    source_group = parser.add_argument_group("Source")
    source_mode = source_group.add_mutually_exclusive_group(required=True)
    source_mode.add_argument("--csv", help="CSV file with a header line")
    source_mode.add_argument("--query", help="SELECT query run against PostgreSQL")
    source_group.add_argument(
        "--delimiter",
        default=",",
        help="CSV field delimiter (default: ,)",
    )

    db_group = parser.add_argument_group("Database connection (--query)")
    db_group.add_argument("--host", help="Database host (default: from .env or localhost)")
    db_group.add_argument("--port", type=int, help="Database port (default: from .env or 5432)")
    db_group.add_argument("--user", help="Database user (default: from .env)")
    db_group.add_argument("--database", help="Database name (default: from .env)")

    sql_group = parser.add_argument_group("SQL format")
    sql_group.add_argument("--table", help="Target table name (default: from source)")
    sql_group.add_argument(
        "--dialect",
        help="SQL dialect: generic, postgresql, mysql, oracle, sqlite",
    )
    sql_group.add_argument(
        "--rows-per-statement",
        help="Rows per INSERT statement (default: 10, 1 writes a statement per row)",
    )
    sql_group.add_argument(
        "--variant",
        help=(
            "Insert keyword: INSERT, 'INSERT ALL', 'UPDATE OR', 'UPSERT INTO', "
            "'REPLACE INTO', 'ON DUPLICATE KEY UPDATE', 'ON CONFLICT'"
        ),
    )
    sql_group.add_argument(
        "--on-conflict",
        help="Expression after ON CONFLICT / ON DUPLICATE KEY UPDATE",
    )
    sql_group.add_argument("--keyword-case", choices=["upper", "lower"])
    sql_group.add_argument("--identifier-case", choices=["as is", "upper", "lower"])
    sql_group.add_argument(
        "--include-auto-generated",
        action="store_true",
        help="Export auto-generated columns",
    )
    sql_group.add_argument(
        "--omit-schema",
        action="store_true",
        help="Drop the schema from the table name",
    )
    sql_group.add_argument(
        "--no-native-format",
        action="store_true",
        help="Write date/time values in display format",
    )
    sql_group.add_argument(
        "--no-line-before-rows",
        action="store_true",
        help="Keep all rows of a statement on one line",
    )
    sql_group.add_argument(
        "--use-dialect-defaults",
        action="store_true",
        help="One row per statement unless the dialect groups rows",
    )

    output_group = parser.add_argument_group("Output")
    output_group.add_argument("--output", "-o", help="Output file path (default: stdout)")
    output_group.add_argument(
        "--save",
        action="store_true",
        help="Write to a timestamped file in the output directory",
    )
    output_group.add_argument(
        "--append",
        action="store_true",
        help="Append to the output file instead of replacing it",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Log level (default: warnings only)",
    )
    try:
        pkg_version = get_version("sqlexport")
    except Exception:
        pkg_version = "development"

    parser.add_argument(
        "--version",
        action="version",
        version=f"sqlexport {pkg_version}",
    )

    args = parser.parse_args()

    setup_logging(args.log_level)

    try:
        config = load_config()

        if args.host:
            config.db.host = args.host
        if args.port:
            config.db.port = args.port
        if args.user:
            config.db.user = args.user
        if args.database:
            config.db.database = args.database
        if args.dialect:
            config.dialect = args.dialect
        if args.log_level:
            config.log_level = args.log_level

        config.exporter = apply_exporter_overrides(config.exporter, args)

        return run_export(args, config)

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130

    except SQLExportError as e:
        logger.error(f"Application error: {e}")
        return 1

    except Exception:
        logger.exception("Unexpected error")
        return 1


if __name__ == "__main__":
    sys.exit(main())
