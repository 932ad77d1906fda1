from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker

from contentsync.adapters.serialization import RecordDenormalizer
from contentsync.adapters.sqlalchemy.migrations import upgrade_head
from contentsync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyContentUnitOfWork,
    shutdown,
    startup,
)
from contentsync.domain.model import EntityKindRegistry, default_registry
from tests.helpers.entities import InMemoryEntityStore

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture
def registry() -> EntityKindRegistry:
    return default_registry()


@pytest.fixture
def denormalizer(registry: EntityKindRegistry) -> RecordDenormalizer:
    return RecordDenormalizer(registry)


@pytest.fixture
def memory_store(registry: EntityKindRegistry) -> InMemoryEntityStore:
    return InMemoryEntityStore(registry)


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    upgrade_head(engine=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, future=True)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
    registry: EntityKindRegistry,
) -> Iterator[Callable[[], SqlAlchemyContentUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyContentUnitOfWork:
        return SqlAlchemyContentUnitOfWork(registry)

    try:
        yield factory
    finally:
        shutdown()
