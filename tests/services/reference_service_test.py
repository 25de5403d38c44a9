import pytest

from domain.errors import (
    AlreadyInitializedError,
    ConfigNotInitializedError,
    StaleObservationError,
    SymbolNotFoundError,
    UnauthorizedError,
)
from domain.reference import MAX_U64, SCALE, Config, Observation, ReferenceData
from services.oracle_store import InMemoryOracleStore
from services.reference_service import StdReferenceService
from tests.constants import AAA_RATE, BBB_RATE, CCC_RATE, NEW_OWNER, OWNER, RELAYER, USER


def test_instantiate_sets_caller_as_owner(memory_store: InMemoryOracleStore) -> None:
    service = StdReferenceService(memory_store)

    with pytest.raises(ConfigNotInitializedError):
        service.get_config()

    service.instantiate(OWNER)

    assert service.get_config() == Config(owner=OWNER)
    with pytest.raises(AlreadyInitializedError):
        service.instantiate(USER)
    assert service.get_config() == Config(owner=OWNER)


def test_relay_then_query(service: StdReferenceService) -> None:
    service.relay(RELAYER, ["AAA"], [1000 * SCALE], resolve_time=100, request_id=1)

    assert service.get_reference_data("AAA", "USD") == ReferenceData(
        rate=1000 * SCALE * SCALE,
        last_updated_base=100,
        last_updated_quote=MAX_U64,
    )
    assert service.get_observation("AAA") == Observation(rate=1000 * SCALE, resolve_time=100, request_id=1)


def test_bulk_query_reports_missing_symbols_once(service: StdReferenceService) -> None:
    service.relay(RELAYER, ["AAA", "BBB"], [AAA_RATE, BBB_RATE], resolve_time=100, request_id=1)

    with pytest.raises(SymbolNotFoundError) as exc_info:
        service.get_reference_data_bulk(["AAA", "BBB"], ["ZZZ", "WWW"])

    assert exc_info.value.symbols == ("WWW", "ZZZ")


def test_bulk_query_returns_rates_against_usd(service: StdReferenceService) -> None:
    symbols = ["AAA", "BBB", "CCC"]
    rates = [AAA_RATE, BBB_RATE, CCC_RATE]
    service.relay(RELAYER, symbols, rates, resolve_time=100, request_id=1)

    results = service.get_reference_data_bulk(symbols, ["USD"] * len(symbols))

    assert [r.rate // SCALE for r in results] == rates


def test_removed_relayer_cannot_relay(service: StdReferenceService) -> None:
    service.relay(RELAYER, ["AAA"], [AAA_RATE], resolve_time=100, request_id=1)
    service.remove_relayers(OWNER, [RELAYER])

    assert not service.is_relayer(RELAYER)
    with pytest.raises(UnauthorizedError):
        service.relay(RELAYER, ["AAA"], [BBB_RATE], resolve_time=200, request_id=2)
    assert service.get_observation("AAA").rate == AAA_RATE


def test_new_owner_manages_relayers(service: StdReferenceService) -> None:
    service.transfer_ownership(OWNER, NEW_OWNER)

    with pytest.raises(UnauthorizedError):
        service.add_relayers(OWNER, [USER])
    service.add_relayers(NEW_OWNER, [USER])

    assert service.get_config() == Config(owner=NEW_OWNER)
    assert service.is_relayer(USER)
    assert service.is_relayer(RELAYER)


def test_rejected_relay_rolls_back_whole_batch(strict_service: StdReferenceService) -> None:
    strict_service.relay(RELAYER, ["BBB"], [BBB_RATE], resolve_time=100, request_id=1)

    # AAA is fresh and written first, then BBB is stale and fails the call.
    with pytest.raises(StaleObservationError):
        strict_service.relay(RELAYER, ["AAA", "BBB"], [AAA_RATE, 1], resolve_time=100, request_id=2)

    with pytest.raises(SymbolNotFoundError):
        strict_service.get_observation("AAA")
    assert strict_service.get_observation("BBB") == Observation(rate=BBB_RATE, resolve_time=100, request_id=1)


def test_force_relay_corrects_data(service: StdReferenceService) -> None:
    service.relay(RELAYER, ["AAA"], [AAA_RATE], resolve_time=200, request_id=1)

    assert service.relay(RELAYER, ["AAA"], [1], resolve_time=150, request_id=2) == []
    assert service.force_relay(RELAYER, ["AAA"], [1], resolve_time=150, request_id=2) == ["AAA"]

    assert service.get_observation("AAA") == Observation(rate=1, resolve_time=150, request_id=2)
