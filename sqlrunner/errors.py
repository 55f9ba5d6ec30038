"""
Exception hierarchy shared by every sub‑module.

Library code only raises; turning errors into messages and exit codes is
the job of :mod:`sqlrunner.cli`.
"""
from __future__ import annotations

import typing as t

COMPONENT = "sqlrunner"


class SqlRunnerError(RuntimeError):
    """Base class for everything sqlrunner raises on purpose."""


class ConfigError(SqlRunnerError):
    """Raised for any user‑visible configuration problem."""


class DelimiterError(ConfigError):
    """A ``DELIMITER`` directive that cannot be honoured."""

    def __init__(self, message: str, line: int) -> None:
        super().__init__(f"{message} (line {line})")
        self.line: int = line


class DatabaseConnectionError(SqlRunnerError):
    """The database connection could not be established."""


class StatementTimeout(SqlRunnerError):
    """A statement did not complete within its timeout."""


class StatementExecutionError(SqlRunnerError):
    """
    One statement of a script failed.  Remaining statements were **not**
    attempted.
    """

    def __init__(
        self,
        index: int,
        statement: str,
        cause: BaseException | str,
        script: str | None = None,
    ) -> None:
        self.index: int = index
        self.statement: str = statement
        self.cause: t.Any = cause
        self.script: str | None = script
        super().__init__(self._describe())

    @property
    def number(self) -> int:
        """1‑based position of the failing statement."""
        return self.index + 1

    def _describe(self) -> str:
        source = f" from the file '{self.script}'" if self.script is not None else ""
        return (
            f"{COMPONENT}: Cannot execute SQL command '{self.statement}'{source}. "
            f"Underlying error: {self.cause}"
        )


class ScriptAborted(StatementExecutionError):
    """
    Non‑continuable statement failure (``continue_on_error`` disabled).

    The caller decides whether this ends the process; it must release the
    connection first.
    """
