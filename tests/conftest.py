from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.pool import StaticPool

from convergent.adapters.sqlalchemy import start_mappers
from convergent.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyStateUnitOfWork,
    shutdown,
    startup,
)
from convergent.config import WaitConfig
from tests.helpers.fakes import FakeClock

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

_WAIT_ENV_VARS = (
    "CONVERGENT_POLL_INTERVAL",
    "CONVERGENT_MAX_POLL_INTERVAL",
    "CONVERGENT_POLL_BACKOFF",
    "CONVERGENT_WAIT_TIMEOUT",
    "CONVERGENT_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_wait_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _WAIT_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fast_waits() -> WaitConfig:
    return WaitConfig(poll_interval=1.0, max_poll_interval=4.0, backoff=2.0)


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    start_mappers()
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyStateUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyStateUnitOfWork:
        return SqlAlchemyStateUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()
