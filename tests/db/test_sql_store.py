import pytest
from sqlalchemy.orm import Session

from db.repositories import SqlOracleStore
from domain.errors import StaleObservationError, UnauthorizedError
from domain.reference import MAX_RATE, MAX_U64, SCALE, Config, Identity, Observation
from domain.relay_ledger import StaleRelayPolicy
from services.reference_service import StdReferenceService
from tests.constants import OTHER_RELAYER, OWNER, RELAYER, USER


def test_config_round_trip(sql_store: SqlOracleStore) -> None:
    assert sql_store.load_config() is None

    with sql_store.transaction():
        sql_store.save_config(Config(owner=OWNER))
    with sql_store.transaction():
        sql_store.save_config(Config(owner=USER))

    assert sql_store.load_config() == Config(owner=USER)


def test_relayer_rows(sql_store: SqlOracleStore) -> None:
    with sql_store.transaction():
        sql_store.add_relayer(RELAYER)
        sql_store.add_relayer(OTHER_RELAYER)
        sql_store.add_relayer(RELAYER)

    assert sql_store.list_relayers() == [RELAYER, OTHER_RELAYER]

    with sql_store.transaction():
        sql_store.remove_relayer(RELAYER)
        sql_store.remove_relayer(Identity("missing"))

    assert not sql_store.has_relayer(RELAYER)
    assert sql_store.has_relayer(OTHER_RELAYER)


def test_wide_integers_survive_storage(sql_store: SqlOracleStore, test_session: Session) -> None:
    observation = Observation(rate=MAX_RATE, resolve_time=MAX_U64, request_id=MAX_U64)
    with sql_store.transaction():
        sql_store.save_observation("BIG", observation)
    test_session.expire_all()

    assert sql_store.load_observation("BIG") == observation
    assert sql_store.load_observation("NOPE") is None


def test_transaction_rollback_discards_writes(sql_store: SqlOracleStore) -> None:
    with sql_store.transaction():
        sql_store.save_observation("BTC", Observation(rate=1, resolve_time=1, request_id=1))

    with pytest.raises(RuntimeError):
        with sql_store.transaction():
            sql_store.save_observation("BTC", Observation(rate=2, resolve_time=2, request_id=2))
            sql_store.add_relayer(RELAYER)
            raise RuntimeError("boom")

    assert sql_store.load_observation("BTC") == Observation(rate=1, resolve_time=1, request_id=1)
    assert not sql_store.has_relayer(RELAYER)


def test_service_over_sql_store(sql_store: SqlOracleStore) -> None:
    service = StdReferenceService(sql_store, stale_policy=StaleRelayPolicy.REJECT)
    service.instantiate(OWNER)
    service.add_relayers(OWNER, [RELAYER])

    with pytest.raises(UnauthorizedError):
        service.add_relayers(USER, [USER])
    assert not service.is_relayer(USER)

    service.relay(RELAYER, ["BTC", "ETH"], [60_000 * SCALE, 3_000 * SCALE], resolve_time=100, request_id=1)
    with pytest.raises(StaleObservationError):
        service.relay(RELAYER, ["SOL", "ETH"], [150 * SCALE, 1], resolve_time=100, request_id=2)

    assert sql_store.load_observation("SOL") is None
    assert service.get_reference_data("ETH", "BTC").rate == 3_000 * SCALE * SCALE // 60_000
