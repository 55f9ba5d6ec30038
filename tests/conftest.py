from __future__ import annotations

import pytest

from sqlrunner.config import Settings


class FakeConnection:
    """Records statements; fails on the statements listed in *fail_on*."""

    def __init__(self, fail_on: tuple[str, ...] = ()) -> None:
        self.fail_on = fail_on
        self.queries: list[tuple[str, float]] = []
        self.close_calls = 0

    def query(self, sql: str, timeout: float) -> None:
        self.queries.append((sql, timeout))
        if sql.strip() in self.fail_on:
            raise RuntimeError(f"ER_PARSE_ERROR near {sql.strip()!r}")

    def close(self) -> None:
        self.close_calls += 1

    @property
    def executed(self) -> list[str]:
        return [sql for sql, _ in self.queries]


@pytest.fixture
def fake_connection():
    return FakeConnection()


@pytest.fixture
def settings():
    return Settings({"user": "app", "password": "secret", "delay": 0})
