"""File output handling for SQL exports."""

from __future__ import annotations

import re
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import TextIO

from .utils.logging_config import get_logger

logger = get_logger(__name__)


class SQLWriter:
    """Opens the text sinks SQL statements are streamed into."""

    @staticmethod
    @contextmanager
    def open_file(output_path: str | Path, append: bool = False) -> Iterator[TextIO]:
        """
        Open an output file for streaming.

        Args:
            output_path: Output file path
            append: Keep existing statements and add new ones at the end

        Raises:
            IOError: If file cannot be opened
        """
        output_path = Path(output_path)
        mode = "a" if append else "w"

        logger.info(f"Writing SQL to {output_path} ({'append' if append else 'truncate'})")

        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            f = output_path.open(mode, encoding="utf-8", newline="")
        except OSError as e:
            logger.error(f"Failed to open {output_path}: {e}")
            raise

        try:
            yield f
        finally:
            f.close()

        file_size = output_path.stat().st_size
        logger.info(f"Successfully wrote {output_path} ({file_size:,} bytes)")

    @staticmethod
    @contextmanager
    def open_stdout() -> Iterator[TextIO]:
        """Stream SQL to stdout."""
        logger.debug("Writing SQL to stdout")
        try:
            yield sys.stdout
        finally:
            sys.stdout.flush()

    @staticmethod
    def generate_default_filename(table_name: str) -> str:
        """
        Generate an output filename from the table name and current time.

        Examples:
            users -> users_20240315_143052.sql
            public.users -> public_users_20240315_143052.sql
        """
        safe_name = re.sub(r"[^\w\-]+", "_", table_name).strip("_") or "export"
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        return f"{safe_name}_{timestamp}.sql"

    @staticmethod
    def get_default_output_path(output_dir: str | Path, table_name: str) -> Path:
        """Build the default output path, creating the directory."""
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        return output_dir / SQLWriter.generate_default_filename(table_name)
