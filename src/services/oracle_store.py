from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from domain.reference import Config, Identity, Observation
from domain.store import OracleStore

CONFIG_KEY = "config"
RELAYERS_PREFIX = "relayers/"
REFDATA_PREFIX = "refdata/"


class InMemoryOracleStore(OracleStore):
    def __init__(self) -> None:
        self._data: dict[str, object] = {}

    def load_config(self) -> Config | None:
        config = self._data.get(CONFIG_KEY)
        return config if isinstance(config, Config) else None

    def save_config(self, config: Config) -> None:
        self._data[CONFIG_KEY] = config

    def has_relayer(self, identity: Identity) -> bool:
        return self._data.get(RELAYERS_PREFIX + identity) is True

    def add_relayer(self, identity: Identity) -> None:
        self._data[RELAYERS_PREFIX + identity] = True

    def remove_relayer(self, identity: Identity) -> None:
        self._data.pop(RELAYERS_PREFIX + identity, None)

    def load_observation(self, symbol: str) -> Observation | None:
        observation = self._data.get(REFDATA_PREFIX + symbol)
        return observation if isinstance(observation, Observation) else None

    def save_observation(self, symbol: str, observation: Observation) -> None:
        self._data[REFDATA_PREFIX + symbol] = observation

    @contextmanager
    def transaction(self) -> Iterator[None]:
        # Stored values are frozen models, so a shallow copy is a full snapshot.
        snapshot = dict(self._data)
        try:
            yield
        except BaseException:
            self._data = snapshot
            raise

    def keys(self) -> list[str]:
        return sorted(self._data)


__all__ = ["CONFIG_KEY", "REFDATA_PREFIX", "RELAYERS_PREFIX", "InMemoryOracleStore"]
