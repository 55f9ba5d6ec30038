"""
Sequential statement executor.

Runs the statements recovered by :func:`sqlrunner.scanner.scan` one at a
time on a single connection and reports one terminal outcome.  The first
failing statement always stops the run; ``continue_on_error`` only decides
whether that failure is *returned* (:class:`FailedAt`) or *raised*
(:class:`~sqlrunner.errors.ScriptAborted`).
"""
from __future__ import annotations

import time
import typing as t
from dataclasses import dataclass

import click

from sqlrunner.config import DEFAULT_DELAY, DEFAULT_TIMEOUT, Verbosity
from sqlrunner.errors import ScriptAborted


class Connection(t.Protocol):
    """What the executor needs from an open database connection."""

    def query(self, sql: str, timeout: float) -> None:
        """Run *sql*; raise on failure or when *timeout* seconds elapse."""

    def close(self) -> None:
        ...


@dataclass(frozen=True)
class AllSucceeded:
    count: int

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class FailedAt:
    index: int
    statement: str
    error: BaseException
    script: str | None = None

    @property
    def ok(self) -> bool:
        return False

    @property
    def number(self) -> int:
        return self.index + 1


ExecutionOutcome = t.Union[AllSucceeded, FailedAt]


def execute(
    statements: t.Sequence[str],
    connection: Connection,
    *,
    continue_on_error: bool = True,
    verbosity: Verbosity = Verbosity.LOW,
    timeout: float = DEFAULT_TIMEOUT,
    delay: float = DEFAULT_DELAY,
    script: str | None = None,
    sleep: t.Callable[[float], None] = time.sleep,
) -> ExecutionOutcome:
    """
    Execute *statements* in order on *connection*.

    Every statement gets *timeout* seconds.  After each successful statement
    except the last one the executor pauses *delay* seconds (``0`` disables
    the pause).  The connection is never closed here.

    Raises:
        ScriptAborted: a statement failed and *continue_on_error* is False.
    """
    total = len(statements)
    for index, sql in enumerate(statements):
        number = index + 1
        if verbosity >= Verbosity.MED:
            msg = f"Executing '{script}' query #{number} ........ "
            if verbosity == Verbosity.FULL:
                msg += sql
            click.echo(msg)

        try:
            connection.query(sql, timeout)
        except Exception as err:
            if not continue_on_error:
                raise ScriptAborted(index, sql, err, script) from err
            if verbosity > Verbosity.SILENT:
                click.echo(f"Failed executed query #{number}", err=True)
            return FailedAt(index, sql, err, script)

        if verbosity == Verbosity.FULL:
            click.echo(f"Successfully executed query #{number}")

        if number < total and delay > 0:
            sleep(delay)

    if total and verbosity == Verbosity.FULL:
        click.echo(f"Executed {total} commands from file '{script}'")
    return AllSucceeded(total)
