from __future__ import annotations

from typing import NewType

from pydantic import BaseModel, ConfigDict, model_validator

Identity = NewType("Identity", str)

SCALE = 10**9
USD_SYMBOL = "USD"

MAX_U64 = 2**64 - 1
MAX_RATE = 2**128 - 1


class Config(BaseModel):
    model_config = ConfigDict(frozen=True)

    owner: Identity

    @model_validator(mode="after")
    def _validate_owner(self) -> Config:
        if not self.owner:
            raise ValueError("owner must be non-empty")
        return self


class Observation(BaseModel):
    """Rate relayed for one symbol.

    ``rate`` is a fixed-point integer scaled by ``SCALE`` (1 USD == 1e9).
    ``resolve_time`` is the unix second at which the off-chain request
    resolved and orders successive relays of the same symbol.
    """

    model_config = ConfigDict(frozen=True)

    rate: int
    resolve_time: int
    request_id: int

    @model_validator(mode="after")
    def _validate_ranges(self) -> Observation:
        if not 0 <= self.rate <= MAX_RATE:
            raise ValueError("rate must fit in 128 bits")
        if not 0 <= self.resolve_time <= MAX_U64:
            raise ValueError("resolve_time must fit in an unsigned 64-bit integer")
        if not 0 <= self.request_id <= MAX_U64:
            raise ValueError("request_id must fit in an unsigned 64-bit integer")
        return self


class ReferenceData(BaseModel):
    model_config = ConfigDict(frozen=True)

    rate: int
    last_updated_base: int
    last_updated_quote: int


# USD is never stored: it is always worth one unit and always fresh.
USD_OBSERVATION = Observation(rate=SCALE, resolve_time=MAX_U64, request_id=0)


__all__ = [
    "MAX_RATE",
    "MAX_U64",
    "SCALE",
    "USD_OBSERVATION",
    "USD_SYMBOL",
    "Config",
    "Identity",
    "Observation",
    "ReferenceData",
]
