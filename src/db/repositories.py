from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session

from db import models
from domain.reference import Config, Identity, Observation
from domain.store import OracleStore

CONFIG_ROW_ID = 1


class SqlOracleStore(OracleStore):
    """OracleStore over a SQLAlchemy session.

    Writes are flushed into the session and only committed when the
    surrounding ``transaction()`` exits cleanly; any exception rolls the
    whole call back.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def load_config(self) -> Config | None:
        orm_config = self._session.get(models.ConfigOrm, CONFIG_ROW_ID)
        if orm_config is None:
            return None
        return Config(owner=Identity(orm_config.owner))

    def save_config(self, config: Config) -> None:
        self._session.merge(models.ConfigOrm(id=CONFIG_ROW_ID, owner=config.owner))
        self._session.flush()

    def has_relayer(self, identity: Identity) -> bool:
        return self._session.get(models.RelayerOrm, identity) is not None

    def add_relayer(self, identity: Identity) -> None:
        self._session.merge(models.RelayerOrm(identity=identity))
        self._session.flush()

    def remove_relayer(self, identity: Identity) -> None:
        orm_relayer = self._session.get(models.RelayerOrm, identity)
        if orm_relayer is not None:
            self._session.delete(orm_relayer)
            self._session.flush()

    def list_relayers(self) -> list[Identity]:
        rows = self._session.query(models.RelayerOrm).order_by(models.RelayerOrm.identity.asc()).all()
        return [Identity(row.identity) for row in rows]

    def load_observation(self, symbol: str) -> Observation | None:
        orm_observation = self._session.get(models.ObservationOrm, symbol)
        if orm_observation is None:
            return None
        return self._to_domain(orm_observation)

    def save_observation(self, symbol: str, observation: Observation) -> None:
        self._session.merge(
            models.ObservationOrm(
                symbol=symbol,
                rate=observation.rate,
                resolve_time=observation.resolve_time,
                request_id=observation.request_id,
            )
        )
        self._session.flush()

    @contextmanager
    def transaction(self) -> Iterator[None]:
        try:
            yield
        except BaseException:
            self._session.rollback()
            raise
        self._session.commit()

    @staticmethod
    def _to_domain(orm_observation: models.ObservationOrm) -> Observation:
        return Observation(
            rate=orm_observation.rate,
            resolve_time=orm_observation.resolve_time,
            request_id=orm_observation.request_id,
        )


__all__ = ["SqlOracleStore"]
