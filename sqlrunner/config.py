from __future__ import annotations
import enum
import os
import pathlib
import typing as t
import yaml

try:
    import tomllib as _toml                              # Py ≥3.11
except ModuleNotFoundError:                              # pragma: no cover
    import tomli as _toml                                # type: ignore[no-redef]

from sqlrunner.errors import ConfigError

_DEFAULT_PATH = pathlib.Path("sqlrunner.config.yml")

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 3306
DEFAULT_TIMEOUT = 60.0          # seconds, per statement
DEFAULT_DELAY = 0.04            # seconds between two successful statements


class Verbosity(enum.IntEnum):
    SILENT = 0
    LOW = 1
    MED = 2
    FULL = 3

    @classmethod
    def parse(cls, value: t.Any) -> "Verbosity":
        """
        Map a user supplied level onto a :class:`Verbosity`.

        ``NONE`` → SILENT, ``MED``/``M`` → MED, ``FULL``/``F`` → FULL and
        anything else (including ``None``) → LOW.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            return cls(min(max(value, cls.SILENT), cls.FULL))
        name = str(value).strip().upper() if value is not None else ""
        if name == "NONE":
            return cls.SILENT
        if name in ("MED", "M"):
            return cls.MED
        if name in ("FULL", "F"):
            return cls.FULL
        return cls.LOW


def _resolve_secret(raw: t.Any) -> str | None:
    # Allow `${ENV_VAR}` syntax for secrets
    if raw is None:
        return None
    raw = str(raw)
    if raw.startswith("${") and raw.endswith("}"):
        return os.getenv(raw[2:-1])
    return raw


def _number(kind: type, key: str, raw: t.Any, default: t.Any) -> t.Any:
    if raw is None or raw == "":
        return kind(default)
    try:
        return kind(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {key} {raw!r}: expected a number") from exc


class Settings:
    """
    A thin value‑object holding everything needed to run a script: the
    connection attributes plus the execution policy.  Nothing here talks to
    the database.
    """

    def __init__(self, d: dict[str, t.Any] | None = None, name: str | None = None) -> None:
        d = d or {}
        self.name: str | None = name
        self.user: str | None = d.get("user")
        self.password: str | None = _resolve_secret(d.get("password"))
        self.host: str = d.get("host") or DEFAULT_HOST
        self.port: int = _number(int, "port", d.get("port"), DEFAULT_PORT)
        self.database: str | None = d.get("database")

        continue_on_error = d.get("continue_on_error")
        self.continue_on_error: bool = continue_on_error is not False
        self.verbosity: Verbosity = Verbosity.parse(d.get("verbosity"))
        timeout, delay = d.get("timeout"), d.get("delay")
        self.timeout: float = _number(float, "timeout", timeout, DEFAULT_TIMEOUT)
        self.delay: float = _number(float, "delay", delay, DEFAULT_DELAY)

    def validate(self) -> "Settings":
        if not (self.user and self.password):
            raise ConfigError("Both database username and password must be defined")
        if self.timeout <= 0:
            raise ConfigError(f"Statement timeout must be positive, got {self.timeout}")
        if self.delay < 0:
            raise ConfigError(f"Statement delay cannot be negative, got {self.delay}")
        return self

    def dsn(self) -> dict[str, t.Any]:
        """Return kwargs that mysql‑connector understands."""
        dsn: dict[str, t.Any] = {
            "host": self.host,
            "port": self.port,
            "user": self.user,
            "password": self.password,
        }
        if self.database:
            dsn["database"] = self.database
        return dsn

    def __repr__(self) -> str:
        return (
            f"Settings(user={self.user!r}, host={self.host!r}, port={self.port}, "
            f"database={self.database!r}, continue_on_error={self.continue_on_error}, "
            f"verbosity={self.verbosity.name})"
        )


def _read(cfg_file: pathlib.Path) -> dict[str, t.Any]:
    if cfg_file.suffix.lower() == ".toml":
        with cfg_file.open("rb") as fh:
            return _toml.load(fh)
    with cfg_file.open(encoding="utf-8") as fh:
        return yaml.safe_load(fh) or {}


def load(
    path: pathlib.Path | str | None = None,
    env: str | None = None,
    **overrides: t.Any,
) -> Settings:
    """
    Parse *path* (or the default YAML, when present) and return
    :class:`Settings` for *env*.  Keyword *overrides* that are not ``None``
    win over the file, which is how command‑line options are applied.
    """
    values: dict[str, t.Any] = {}
    env_name: str | None = None

    cfg_file = pathlib.Path(path) if path else _DEFAULT_PATH
    if cfg_file.exists():
        raw = _read(cfg_file)
        env_name = env or raw.get("default_env")
        if not env_name:
            raise ConfigError("No environment specified and no default_env in config")
        try:
            values.update(raw["environments"][env_name])
        except (KeyError, TypeError) as exc:
            raise ConfigError(f"Environment {env_name!r} not found in config") from exc
    elif path:
        raise ConfigError(f"Config file {cfg_file} not found.")

    values.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(values, name=env_name)
