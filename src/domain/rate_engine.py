from __future__ import annotations

from .errors import RateArithmeticError, SymbolNotFoundError
from .reference import SCALE, Observation, ReferenceData
from .relay_ledger import RelayLedger


class RateEngine:
    """Derive base/quote cross rates from two USD-denominated observations."""

    def __init__(self, ledger: RelayLedger) -> None:
        self._ledger = ledger

    def cross_rate(self, base_symbol: str, quote_symbol: str) -> ReferenceData:
        observations: list[Observation] = []
        missing: list[str] = []
        # Look up both sides so a single error names every absent symbol.
        for symbol in (base_symbol, quote_symbol):
            try:
                observations.append(self._ledger.get_observation(symbol))
            except SymbolNotFoundError:
                if symbol not in missing:
                    missing.append(symbol)
        if missing:
            raise SymbolNotFoundError(missing)

        base, quote = observations
        return ReferenceData(
            rate=compute_cross_rate(base.rate, quote.rate, base_symbol=base_symbol, quote_symbol=quote_symbol),
            last_updated_base=base.resolve_time,
            last_updated_quote=quote.resolve_time,
        )


def compute_cross_rate(base_rate: int, quote_rate: int, *, base_symbol: str = "", quote_symbol: str = "") -> int:
    """Return ``base_rate * SCALE**2 / quote_rate`` truncated toward zero.

    Python integers do not overflow, so the intermediate product keeps its
    full width before the division.
    """
    if quote_rate <= 0:
        raise RateArithmeticError(
            f"cannot divide by quote rate {quote_rate} for {base_symbol}/{quote_symbol}",
            base_symbol=base_symbol,
            quote_symbol=quote_symbol,
        )
    if base_rate < 0:
        raise RateArithmeticError(
            f"negative base rate {base_rate} for {base_symbol}/{quote_symbol}",
            base_symbol=base_symbol,
            quote_symbol=quote_symbol,
        )
    return base_rate * SCALE * SCALE // quote_rate


__all__ = ["RateEngine", "compute_cross_rate"]
