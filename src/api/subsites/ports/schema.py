"""Schema access port used by setup-time data migrations."""

from __future__ import annotations

from typing import Any, Protocol

from sqlalchemy.engine import Result
from sqlalchemy.sql import Executable


class SchemaInspector(Protocol):
    """Introspects and alters tables, and runs SQL against them.

    Errors raised by implementations are left to propagate; migrations run
    at startup where a failure should stop the process.
    """

    def columns_of(self, table: str) -> set[str]:
        """Return the names of the columns currently on ``table``."""
        ...

    def rename_column(self, table: str, old: str, new: str) -> None:
        """Rename a column in place."""
        ...

    def execute(self, statement: Executable) -> Result[Any]:
        """Execute a statement and return its result."""
        ...
