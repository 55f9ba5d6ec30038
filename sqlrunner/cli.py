#!/usr/bin/env python3
"""
sqlrunner – execute SQL scripts statement by statement.

    sqlrunner run schema.sql seed.sql -u app -p secret -d shop
    sqlrunner -c sqlrunner.config.yml -e dev run routines.sql -v FULL
    sqlrunner split routines.sql --pretty

Connection settings come from the config file (``sqlrunner.config.yml`` in
the working directory when present), overridden by command‑line options and
``SQLRUNNER_*`` environment variables.
"""
from __future__ import annotations

import pathlib
import sys

import click
import sqlparse

from sqlrunner import __version__
from sqlrunner.config import Verbosity, load
from sqlrunner.errors import ConfigError, ScriptAborted, SqlRunnerError
from sqlrunner.runner import ScriptFile, ScriptRunner
from sqlrunner.scanner import scan

EXIT_FAILED = 1
EXIT_ABORTED = 2

_VERBOSITY_CHOICES = ["NONE", "LOW", "MED", "M", "FULL", "F"]


@click.group()
@click.option(
    "-c", "--config", "config_path", type=click.Path(), help="settings YAML / TOML"
)
@click.option("-e", "--env", help="environment inside the config file")
@click.pass_context
def main(ctx, config_path, env):
    ctx.obj = {
        "config_path": pathlib.Path(config_path) if config_path else None,
        "env": env,
    }


@main.command()
def version():
    click.echo(__version__)


@main.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("-u", "--user", envvar="SQLRUNNER_USER")
@click.option("-p", "--password", envvar="SQLRUNNER_PASSWORD")
@click.option("--host", envvar="SQLRUNNER_HOST")
@click.option("--port", type=int, envvar="SQLRUNNER_PORT")
@click.option("-d", "--database", envvar="SQLRUNNER_DATABASE")
@click.option(
    "--continue-on-error/--abort-on-error",
    "continue_on_error",
    default=None,
    help="report a failing script and go on with the next one (default), "
    "or stop everything at the first failure",
)
@click.option(
    "-v", "--verbosity", type=click.Choice(_VERBOSITY_CHOICES, case_sensitive=False)
)
@click.option("--timeout", type=float, help="per‑statement timeout in seconds")
@click.option("--delay", type=float, help="pause in seconds between statements")
@click.pass_context
def run(ctx, files, user, password, host, port, database, continue_on_error,
        verbosity, timeout, delay):
    """Execute FILES in order."""
    try:
        settings = load(
            ctx.obj["config_path"],
            ctx.obj["env"],
            user=user,
            password=password,
            host=host,
            port=port,
            database=database,
            continue_on_error=continue_on_error,
            verbosity=verbosity,
            timeout=timeout,
            delay=delay,
        )
        runner = ScriptRunner(settings)
    except ConfigError as exc:
        click.echo(f"Config error: {exc}", err=True)
        sys.exit(EXIT_FAILED)

    failed = 0
    for path in files:
        try:
            runner.process(ScriptFile.from_path(path))
        except ScriptAborted as exc:
            click.echo(str(exc), err=True)
            sys.exit(EXIT_ABORTED)
        except SqlRunnerError as exc:
            click.echo(str(exc), err=True)
            failed += 1
            if not settings.continue_on_error:
                sys.exit(EXIT_FAILED)

    if failed:
        click.echo(f"{failed} of {len(files)} script(s) failed.", err=True)
        sys.exit(EXIT_FAILED)
    if settings.verbosity >= Verbosity.MED:
        click.echo(f"✅  Executed {len(files)} script(s).")


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--pretty", is_flag=True, help="re‑indent statements with sqlparse")
def split(file, pretty):
    """Print the statements FILE is split into."""
    try:
        statements = scan(ScriptFile.from_path(file).read_text())
    except SqlRunnerError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(EXIT_FAILED)

    for number, stmt in enumerate(statements, 1):
        text = stmt.strip()
        if pretty:
            text = sqlparse.format(text, reindent=True, keyword_case="upper")
        click.echo(f"-- #{number}\n{text}\n")
    click.echo(f"-- {len(statements)} statement(s)")


if __name__ == "__main__":
    main()
