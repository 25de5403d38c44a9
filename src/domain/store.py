from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Protocol

from .reference import Config, Identity, Observation


class OracleStore(Protocol):
    """Key-value persistence for the oracle.

    Logical layout: ``config`` holds the singleton ``Config``,
    ``relayers/<identity>`` marks relayer membership and
    ``refdata/<symbol>`` holds the latest ``Observation`` of a symbol.
    Writes made inside ``transaction()`` are committed together or not at all.
    """

    def load_config(self) -> Config | None: ...

    def save_config(self, config: Config) -> None: ...

    def has_relayer(self, identity: Identity) -> bool: ...

    def add_relayer(self, identity: Identity) -> None: ...

    def remove_relayer(self, identity: Identity) -> None: ...

    def load_observation(self, symbol: str) -> Observation | None: ...

    def save_observation(self, symbol: str, observation: Observation) -> None: ...

    def transaction(self) -> AbstractContextManager[None]: ...


__all__ = ["OracleStore"]
