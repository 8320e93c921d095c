from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002

from graphform.adapters.sqlalchemy.mappings import create_all_tables
from graphform.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyStateUnitOfWork,
    shutdown,
    startup,
)
from tests.support.platform import FakePlatformClient
from tests.support.state import FakeStateUnitOfWork, InMemoryResourceStateRepository

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    create_all_tables(engine)
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


@pytest.fixture
def platform() -> FakePlatformClient:
    return FakePlatformClient()


@pytest.fixture
def state_repository() -> InMemoryResourceStateRepository:
    return InMemoryResourceStateRepository()


@pytest.fixture
def state_unit_of_work(
    state_repository: InMemoryResourceStateRepository,
) -> Callable[[], FakeStateUnitOfWork]:
    def factory() -> FakeStateUnitOfWork:
        return FakeStateUnitOfWork(state_repository)

    return factory
