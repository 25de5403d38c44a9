from __future__ import annotations

import logging
from typing import Iterable, Sequence

from domain.access_control import AccessControl
from domain.bulk_query import BulkQueryAggregator
from domain.errors import AlreadyInitializedError
from domain.rate_engine import RateEngine
from domain.reference import Config, Identity, Observation, ReferenceData
from domain.relay_ledger import RelayLedger, StaleRelayPolicy
from domain.store import OracleStore

logger = logging.getLogger(__name__)


class StdReferenceService:
    """Caller-facing surface of the reference oracle.

    Every write runs inside a single store transaction: if any step raises,
    nothing the call wrote is kept. Reads need no authorization.
    """

    def __init__(
        self,
        store: OracleStore,
        *,
        stale_policy: StaleRelayPolicy = StaleRelayPolicy.SKIP,
    ) -> None:
        self.store = store
        self.access_control = AccessControl(store)
        self.ledger = RelayLedger(store, access_control=self.access_control, stale_policy=stale_policy)
        self.rate_engine = RateEngine(self.ledger)
        self.bulk_query = BulkQueryAggregator(self.rate_engine)

    # Writes

    def instantiate(self, caller: Identity) -> Config:
        with self.store.transaction():
            if self.store.load_config() is not None:
                raise AlreadyInitializedError()
            config = Config(owner=caller)
            self.store.save_config(config)
        logger.info("Reference oracle instantiated with owner %s", caller)
        return config

    def transfer_ownership(self, caller: Identity, new_owner: Identity) -> Config:
        with self.store.transaction():
            return self.access_control.transfer_ownership(caller, new_owner)

    def add_relayers(self, caller: Identity, identities: Iterable[Identity]) -> None:
        with self.store.transaction():
            self.access_control.add_relayers(caller, identities)

    def remove_relayers(self, caller: Identity, identities: Iterable[Identity]) -> None:
        with self.store.transaction():
            self.access_control.remove_relayers(caller, identities)

    def relay(
        self,
        caller: Identity,
        symbols: Sequence[str],
        rates: Sequence[int],
        *,
        resolve_time: int,
        request_id: int,
    ) -> list[str]:
        with self.store.transaction():
            return self.ledger.relay(caller, symbols, rates, resolve_time=resolve_time, request_id=request_id)

    def force_relay(
        self,
        caller: Identity,
        symbols: Sequence[str],
        rates: Sequence[int],
        *,
        resolve_time: int,
        request_id: int,
    ) -> list[str]:
        with self.store.transaction():
            return self.ledger.force_relay(caller, symbols, rates, resolve_time=resolve_time, request_id=request_id)

    # Reads

    def get_config(self) -> Config:
        return self.access_control.config()

    def is_relayer(self, identity: Identity) -> bool:
        return self.access_control.is_relayer(identity)

    def get_observation(self, symbol: str) -> Observation:
        return self.ledger.get_observation(symbol)

    def get_reference_data(self, base_symbol: str, quote_symbol: str) -> ReferenceData:
        return self.rate_engine.cross_rate(base_symbol, quote_symbol)

    def get_reference_data_bulk(
        self, base_symbols: Sequence[str], quote_symbols: Sequence[str]
    ) -> list[ReferenceData]:
        return self.bulk_query.cross_rate_bulk(base_symbols, quote_symbols)


__all__ = ["StdReferenceService"]
