"""
sqlrunner – execute multi‑statement SQL scripts against MariaDB / MySQL.
"""
from __future__ import annotations

__version__ = "0.1.0"

from sqlrunner.config import Settings, Verbosity, load
from sqlrunner.errors import (
    ConfigError,
    DatabaseConnectionError,
    DelimiterError,
    ScriptAborted,
    SqlRunnerError,
    StatementExecutionError,
    StatementTimeout,
)
from sqlrunner.executor import AllSucceeded, FailedAt, execute
from sqlrunner.runner import ScriptFile, ScriptRunner, process_command_file
from sqlrunner.scanner import scan

__all__ = [
    "AllSucceeded",
    "ConfigError",
    "DatabaseConnectionError",
    "DelimiterError",
    "FailedAt",
    "ScriptAborted",
    "ScriptFile",
    "ScriptRunner",
    "Settings",
    "SqlRunnerError",
    "StatementExecutionError",
    "StatementTimeout",
    "Verbosity",
    "execute",
    "load",
    "process_command_file",
    "scan",
]
