"""Credential handling."""

from __future__ import annotations

import getpass
import os


class SecureCredentials:
    """Holds the database password for the lifetime of a run."""

    def __init__(self, password: str | None = None) -> None:
        self._password = password

    def get_password(self) -> str:
        """
        Get the password.

        Uses, in order: the password given at construction, the PGPASSWORD
        environment variable, an interactive prompt. The result is cached.
        """
        if self._password is None:
            self._password = os.getenv("PGPASSWORD") or getpass.getpass(
                "Database password: "
            )
        return self._password

    def clear(self) -> None:
        """Remove the password from memory."""
        self._password = None
