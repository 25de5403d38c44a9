from __future__ import annotations

from sqlalchemy import Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator


class IntAsString(TypeDecorator):
    """Unsigned integers wider than SQLite's signed 64-bit INTEGER."""

    impl = String
    cache_ok = True

    def process_bind_param(self, value: int | None, dialect: object) -> str | None:
        if value is None:
            return None
        return str(value)

    def process_result_value(self, value: str | None, dialect: object) -> int | None:
        if value is None:
            return None
        return int(value)


class Base(DeclarativeBase):
    pass


class ConfigOrm(Base):
    __tablename__ = "config"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=1)
    owner: Mapped[str] = mapped_column(String, nullable=False)


class RelayerOrm(Base):
    __tablename__ = "relayers"

    identity: Mapped[str] = mapped_column(String, primary_key=True)


class ObservationOrm(Base):
    __tablename__ = "refdata"

    symbol: Mapped[str] = mapped_column(String, primary_key=True)
    rate: Mapped[int] = mapped_column(IntAsString, nullable=False)
    resolve_time: Mapped[int] = mapped_column(IntAsString, nullable=False)
    request_id: Mapped[int] = mapped_column(IntAsString, nullable=False)
