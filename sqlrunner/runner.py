"""
Process one SQL script end to end: scan it, open a connection, execute the
statements and release the connection again.
"""
from __future__ import annotations

import pathlib
import typing as t

import click

from sqlrunner import driver
from sqlrunner.config import Settings, Verbosity
from sqlrunner.errors import SqlRunnerError, StatementExecutionError
from sqlrunner.executor import FailedAt, execute
from sqlrunner.scanner import scan


class ScriptFile:
    """
    A script travelling through a pipeline: an optional path (used only in
    messages) and its contents as ``bytes``, ``str`` or a binary stream.
    """

    def __init__(self, path: pathlib.Path | str | None = None, contents: t.Any = None) -> None:
        self.path: pathlib.Path | None = pathlib.Path(path) if path else None
        self.contents: t.Any = contents

    @classmethod
    def from_path(cls, path: pathlib.Path | str) -> "ScriptFile":
        path = pathlib.Path(path)
        return cls(path, path.read_bytes())

    @property
    def name(self) -> str | None:
        return str(self.path) if self.path else None

    def read_text(self) -> str:
        data = self.contents
        if data is None:
            raise SqlRunnerError(f"Script {self.name or '<anonymous>'} has no contents")
        if hasattr(data, "read"):
            # keep what was read so the item passes through intact
            data = self.contents = data.read()
        if isinstance(data, (bytes, bytearray)):
            try:
                return bytes(data).decode("utf-8-sig")
            except UnicodeDecodeError as exc:
                raise SqlRunnerError(
                    f"Script {self.name or '<anonymous>'} is not valid UTF-8 "
                    f"(byte offset {exc.start}: {exc.reason})"
                ) from exc
        return str(data)

    def __repr__(self) -> str:
        return f"ScriptFile({self.name!r})"


class ScriptRunner:
    """
    Runs scripts with one :class:`Settings`.  Every :meth:`process` call
    uses its own connection.
    """

    def __init__(
        self,
        settings: Settings,
        connect: t.Callable[[Settings], t.Any] | None = None,
    ) -> None:
        self.settings: Settings = settings.validate()
        self._connect = connect or driver.connect

    def _echo(self, level: Verbosity, msg: str) -> None:
        if self.settings.verbosity >= level:
            click.echo(msg)

    def process(self, script: ScriptFile) -> ScriptFile:
        """
        Execute every statement of *script* and hand *script* back unchanged.

        Raises:
            DelimiterError: the script contains an unreadable directive.
            DatabaseConnectionError: no statement was attempted.
            StatementExecutionError: a statement failed (continue mode).
            ScriptAborted: a statement failed (abort mode).
        """
        cfg = self.settings
        statements = scan(script.read_text())

        self._echo(Verbosity.FULL, "Connecting to a database...")
        with driver.connection(cfg, connect=self._connect) as conn:
            self._echo(Verbosity.FULL, "Connection to the database was established.")
            if script.name:
                self._echo(Verbosity.LOW, f"Processing '{script.name}'...")
            else:
                self._echo(Verbosity.LOW, "Processing an SQL script...")

            try:
                outcome = execute(
                    statements,
                    conn,
                    continue_on_error=cfg.continue_on_error,
                    verbosity=cfg.verbosity,
                    timeout=cfg.timeout,
                    delay=cfg.delay,
                    script=script.name,
                )
            finally:
                self._echo(Verbosity.FULL, "Close the database connection.")

        if isinstance(outcome, FailedAt):
            raise StatementExecutionError(
                outcome.index, outcome.statement, outcome.error, outcome.script
            ) from outcome.error
        return script


def process_command_file(
    username: str | None,
    password: str | None,
    host: str | None = None,
    port: int | None = None,
    verbosity: t.Any = None,
    database: str | None = None,
    force: bool | None = None,
) -> t.Callable[[ScriptFile], ScriptFile]:
    """
    Build a pipeline step from positional connection parameters.

    Only an explicit ``force=False`` disables continue‑on‑error.  Credentials
    are checked immediately, before any script is seen.
    """
    settings = Settings(
        {
            "user": username,
            "password": password,
            "host": host,
            "port": port,
            "database": database,
            "verbosity": verbosity,
            "continue_on_error": force,
        }
    )
    return ScriptRunner(settings).process
