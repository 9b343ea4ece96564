# tests/conftest.py

from __future__ import annotations

from datetime import UTC, datetime
from collections.abc import Iterator
from pathlib import Path

import pytest

from taskledger.application import CreateTagRequest, CreateTaskRequest, add_tag, add_task
from taskledger.domain.shared import unwrap
from taskledger.infrastructure.storage import (
    Repositories,
    in_memory_repositories,
    sql_repositories,
)

# Later than any timestamp utc_now() can return while the tests run
UPDATE_TIME = datetime(2099, 1, 1, 12, 0, tzinfo=UTC)


def fixed_clock() -> datetime:
    return UPDATE_TIME


@pytest.fixture(params=["memory", "sqlite"])
def repos(request: pytest.FixtureRequest, tmp_path: Path) -> Repositories:
    """Task and tag repositories over each backend.

    Every contract test runs once per backend; both must behave the same.
    """
    if request.param == "memory":
        return in_memory_repositories(clock=fixed_clock)
    return sql_repositories(f"sqlite:///{tmp_path / 'tasks.db'}", clock=fixed_clock)


@pytest.fixture()
def make_tag(repos: Repositories):
    """Create a tag through the use case and return its id."""

    def _make(name: str, description: str | None = None) -> int:
        return unwrap(add_tag(repos.tags, CreateTagRequest(name=name, description=description))).id

    return _make


@pytest.fixture()
def make_task(repos: Repositories):
    """Create a task through the use case and return its DTO."""

    def _make(title: str, **fields):
        return unwrap(add_task(repos.tasks, repos.tags, CreateTaskRequest(title=title, **fields)))

    return _make


@pytest.fixture()
def cli_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point the CLI at a private config dir and database."""
    from taskledger.interfaces.cli.common import reset_repositories

    home = tmp_path / "home"
    monkeypatch.setenv("TASKLEDGER_HOME", str(home))
    monkeypatch.setenv("TASKLEDGER_DATABASE_URL", f"sqlite:///{tmp_path / 'cli.db'}")
    reset_repositories()
    yield home
    reset_repositories()
