from __future__ import annotations

import logging
from enum import StrEnum
from typing import Sequence

from pydantic import ValidationError

from .access_control import AccessControl
from .errors import InvalidObservationError, SizeMismatchError, StaleObservationError, SymbolNotFoundError
from .reference import USD_OBSERVATION, USD_SYMBOL, Identity, Observation
from .store import OracleStore

logger = logging.getLogger(__name__)


class StaleRelayPolicy(StrEnum):
    """What ``relay`` does with an entry that is not newer than the stored one.

    SKIP leaves the stored observation in place and keeps writing the rest of
    the batch. REJECT fails the whole call.
    """

    SKIP = "skip"
    REJECT = "reject"


class RelayLedger:
    """Symbol -> observation map guarded by relayer authorization.

    A symbol moves from absent to present on its first relay and never goes
    back. Once present, ``relay`` only replaces the observation with a strictly
    newer ``resolve_time``; ``force_relay`` replaces it unconditionally.
    """

    def __init__(
        self,
        store: OracleStore,
        *,
        access_control: AccessControl,
        stale_policy: StaleRelayPolicy = StaleRelayPolicy.SKIP,
    ) -> None:
        self._store = store
        self._access_control = access_control
        self.stale_policy = stale_policy

    def relay(
        self,
        caller: Identity,
        symbols: Sequence[str],
        rates: Sequence[int],
        *,
        resolve_time: int,
        request_id: int,
    ) -> list[str]:
        """Write every entry that is fresher than what is stored.

        Returns the symbols that were written, in input order.
        """
        entries = self._prepare(caller, symbols, rates, resolve_time=resolve_time, request_id=request_id)

        written: list[str] = []
        for symbol, observation in entries:
            existing = self._store.load_observation(symbol)
            if existing is not None and existing.resolve_time >= observation.resolve_time:
                if self.stale_policy == StaleRelayPolicy.REJECT:
                    raise StaleObservationError(
                        symbol=symbol,
                        stored_resolve_time=existing.resolve_time,
                        resolve_time=observation.resolve_time,
                    )
                logger.debug(
                    "Skipping %s: stored resolve_time=%d is not older than %d",
                    symbol,
                    existing.resolve_time,
                    observation.resolve_time,
                )
                continue
            self._store.save_observation(symbol, observation)
            written.append(symbol)

        logger.info(
            "Relay by %s request_id=%d resolve_time=%d: wrote %d, skipped %d",
            caller,
            request_id,
            resolve_time,
            len(written),
            len(entries) - len(written),
        )
        return written

    def force_relay(
        self,
        caller: Identity,
        symbols: Sequence[str],
        rates: Sequence[int],
        *,
        resolve_time: int,
        request_id: int,
    ) -> list[str]:
        entries = self._prepare(caller, symbols, rates, resolve_time=resolve_time, request_id=request_id)

        for symbol, observation in entries:
            existing = self._store.load_observation(symbol)
            if existing is not None and existing.resolve_time > observation.resolve_time:
                logger.warning(
                    "Force relay moves %s back in time: %d -> %d",
                    symbol,
                    existing.resolve_time,
                    observation.resolve_time,
                )
            self._store.save_observation(symbol, observation)

        logger.info(
            "Force relay by %s request_id=%d resolve_time=%d: wrote %d",
            caller,
            request_id,
            resolve_time,
            len(entries),
        )
        return [symbol for symbol, _ in entries]

    def get_observation(self, symbol: str) -> Observation:
        if symbol == USD_SYMBOL:
            return USD_OBSERVATION
        observation = self._store.load_observation(symbol)
        if observation is None:
            raise SymbolNotFoundError([symbol])
        return observation

    def _prepare(
        self,
        caller: Identity,
        symbols: Sequence[str],
        rates: Sequence[int],
        *,
        resolve_time: int,
        request_id: int,
    ) -> list[tuple[str, Observation]]:
        self._access_control.require_relayer(caller)
        if len(rates) != len(symbols):
            raise SizeMismatchError(expected=len(symbols), actual=len(rates))

        # Validate the whole batch before anything is written.
        entries: list[tuple[str, Observation]] = []
        for symbol, rate in zip(symbols, rates):
            if isinstance(rate, bool) or not isinstance(rate, int):
                raise InvalidObservationError(f"rate for {symbol} must be an integer", symbol=symbol)
            if rate == 0:
                raise InvalidObservationError(f"rate for {symbol} must be non-zero", symbol=symbol)
            try:
                observation = Observation(rate=rate, resolve_time=resolve_time, request_id=request_id)
            except ValidationError as exc:
                raise InvalidObservationError(f"invalid observation for {symbol}: {exc}", symbol=symbol) from exc
            if symbol == USD_SYMBOL:
                logger.warning("Relaying reserved symbol %s; reads keep returning the unit rate", USD_SYMBOL)
            entries.append((symbol, observation))
        return entries


__all__ = ["RelayLedger", "StaleRelayPolicy"]
