from __future__ import annotations

import logging
from typing import Iterable

from .errors import ConfigNotInitializedError, UnauthorizedError
from .reference import Config, Identity
from .store import OracleStore

logger = logging.getLogger(__name__)


class AccessControl:
    """Owner and relayer-set bookkeeping."""

    OWNER_ROLE = "owner"
    RELAYER_ROLE = "relayer"

    def __init__(self, store: OracleStore) -> None:
        self._store = store

    def config(self) -> Config:
        config = self._store.load_config()
        if config is None:
            raise ConfigNotInitializedError()
        return config

    def is_owner(self, caller: Identity) -> bool:
        return self.config().owner == caller

    def is_relayer(self, caller: Identity) -> bool:
        return self._store.has_relayer(caller)

    def require_owner(self, caller: Identity) -> None:
        if not self.is_owner(caller):
            raise UnauthorizedError(caller=caller, required_role=self.OWNER_ROLE)

    def require_relayer(self, caller: Identity) -> None:
        if not self.is_relayer(caller):
            raise UnauthorizedError(caller=caller, required_role=self.RELAYER_ROLE)

    def transfer_ownership(self, caller: Identity, new_owner: Identity) -> Config:
        self.require_owner(caller)
        config = Config(owner=new_owner)
        self._store.save_config(config)
        logger.info("Ownership transferred from %s to %s", caller, new_owner)
        return config

    def add_relayers(self, caller: Identity, identities: Iterable[Identity]) -> None:
        self.require_owner(caller)
        added = 0
        for identity in identities:
            self._store.add_relayer(identity)
            added += 1
        logger.info("Owner %s added %d relayer(s)", caller, added)

    def remove_relayers(self, caller: Identity, identities: Iterable[Identity]) -> None:
        self.require_owner(caller)
        removed = 0
        for identity in identities:
            self._store.remove_relayer(identity)
            removed += 1
        logger.info("Owner %s removed %d relayer(s)", caller, removed)


__all__ = ["AccessControl"]
