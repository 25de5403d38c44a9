from typing import Generator

import pytest
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from db.models import Base
from db.repositories import SqlOracleStore
from domain.relay_ledger import StaleRelayPolicy
from services.oracle_store import InMemoryOracleStore
from services.reference_service import StdReferenceService
from tests.constants import OWNER, RELAYER

engine: Engine = create_engine("sqlite:///:memory:", connect_args={"check_same_thread": False})
session_factory = sessionmaker(engine)


@pytest.fixture(scope="function")
def test_session() -> Generator[Session, None, None]:
    with session_factory() as session:
        yield session


@pytest.fixture(scope="function", autouse=True)
def reset_db() -> Generator[None, None, None]:
    Base.metadata.create_all(engine)
    yield
    Base.metadata.drop_all(engine)


@pytest.fixture(scope="function")
def memory_store() -> InMemoryOracleStore:
    return InMemoryOracleStore()


@pytest.fixture(scope="function")
def sql_store(test_session: Session) -> SqlOracleStore:
    return SqlOracleStore(test_session)


@pytest.fixture(scope="function")
def service(memory_store: InMemoryOracleStore) -> StdReferenceService:
    """Instantiated by OWNER with RELAYER in the relayer set."""
    service = StdReferenceService(memory_store)
    service.instantiate(OWNER)
    service.add_relayers(OWNER, [RELAYER])
    return service


@pytest.fixture(scope="function")
def strict_service(memory_store: InMemoryOracleStore) -> StdReferenceService:
    service = StdReferenceService(memory_store, stale_policy=StaleRelayPolicy.REJECT)
    service.instantiate(OWNER)
    service.add_relayers(OWNER, [RELAYER])
    return service
