import pytest

from sqlrunner.config import DEFAULT_DELAY, DEFAULT_TIMEOUT, Settings, Verbosity, load
from sqlrunner.errors import ConfigError


@pytest.mark.parametrize(
    "value, expected",
    [
        ("NONE", Verbosity.SILENT),
        ("MED", Verbosity.MED),
        ("M", Verbosity.MED),
        ("FULL", Verbosity.FULL),
        ("f", Verbosity.FULL),
        (None, Verbosity.LOW),
        ("LOW", Verbosity.LOW),
        ("whatever", Verbosity.LOW),
        (2, Verbosity.MED),
        (Verbosity.FULL, Verbosity.FULL),
    ],
)
def test_verbosity_parse(value, expected):
    assert Verbosity.parse(value) is expected


def test_defaults():
    s = Settings({"user": "app", "password": "pw"})
    assert s.host == "localhost"
    assert s.port == 3306
    assert s.database is None
    assert s.continue_on_error is True
    assert s.verbosity is Verbosity.LOW
    assert s.timeout == DEFAULT_TIMEOUT
    assert s.delay == DEFAULT_DELAY
    assert s.dsn() == {"host": "localhost", "port": 3306, "user": "app", "password": "pw"}


def test_only_explicit_false_disables_continue_on_error():
    assert Settings({"continue_on_error": None}).continue_on_error is True
    assert Settings({"continue_on_error": False}).continue_on_error is False


@pytest.mark.parametrize("d", [{}, {"user": "app"}, {"password": "pw"}, {"user": "", "password": "pw"}])
def test_missing_credentials(d):
    with pytest.raises(ConfigError, match="username and password"):
        Settings(d).validate()


def test_password_from_environment(monkeypatch):
    monkeypatch.setenv("APP_DB_PASSWORD", "s3cret")
    assert Settings({"password": "${APP_DB_PASSWORD}"}).password == "s3cret"


def test_load_yaml_with_overrides(tmp_path):
    cfg = tmp_path / "sqlrunner.config.yml"
    cfg.write_text(
        "default_env: dev\n"
        "environments:\n"
        "  dev:\n"
        "    user: app\n"
        "    password: pw\n"
        "    database: shop\n"
        "    verbosity: MED\n"
        "  ci:\n"
        "    user: ci\n"
        "    password: ci\n"
        "    port: 3307\n"
    )
    dev = load(cfg, port=None, host="db.internal")
    assert dev.name == "dev"
    assert (dev.user, dev.database, dev.host, dev.port) == ("app", "shop", "db.internal", 3306)
    assert dev.verbosity is Verbosity.MED

    ci = load(cfg, "ci", continue_on_error=False)
    assert (ci.user, ci.port, ci.continue_on_error) == ("ci", 3307, False)


def test_load_toml(tmp_path):
    cfg = tmp_path / "settings.toml"
    cfg.write_text(
        'default_env = "dev"\n'
        "[environments.dev]\n"
        'user = "app"\n'
        'password = "pw"\n'
        "timeout = 5\n"
    )
    s = load(cfg)
    assert s.user == "app" and s.timeout == 5.0


def test_load_errors(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load(tmp_path / "missing.yml")

    cfg = tmp_path / "c.yml"
    cfg.write_text("environments:\n  dev:\n    user: app\n")
    with pytest.raises(ConfigError, match="default_env"):
        load(cfg)
    with pytest.raises(ConfigError, match="'prod' not found"):
        load(cfg, "prod")


def test_load_without_file_uses_overrides(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    s = load(user="app", password="pw")
    assert s.name is None and s.user == "app"


def test_validate_rejects_bad_timing():
    with pytest.raises(ConfigError):
        Settings({"user": "a", "password": "b", "timeout": 0}).validate()
    with pytest.raises(ConfigError):
        Settings({"user": "a", "password": "b", "delay": -1}).validate()


@pytest.mark.parametrize("key", ["port", "timeout", "delay"])
def test_non_numeric_values_are_config_errors(key):
    with pytest.raises(ConfigError, match=f"Invalid {key} 'abc'"):
        Settings({key: "abc"})


def test_non_numeric_port_in_file(tmp_path):
    cfg = tmp_path / "c.yml"
    cfg.write_text("default_env: dev\nenvironments:\n  dev:\n    user: a\n    password: b\n    port: db\n")
    with pytest.raises(ConfigError, match="Invalid port"):
        load(cfg)
