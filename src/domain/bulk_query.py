from __future__ import annotations

from typing import Sequence

from .errors import SizeMismatchError, SymbolNotFoundError
from .rate_engine import RateEngine
from .reference import ReferenceData


class BulkQueryAggregator:
    """Evaluate many cross rates and report missing symbols as one failure."""

    def __init__(self, engine: RateEngine) -> None:
        self._engine = engine

    def cross_rate_bulk(self, base_symbols: Sequence[str], quote_symbols: Sequence[str]) -> list[ReferenceData]:
        if len(base_symbols) != len(quote_symbols):
            raise SizeMismatchError(expected=len(base_symbols), actual=len(quote_symbols))

        results: list[ReferenceData] = []
        missing: set[str] = set()
        for base_symbol, quote_symbol in zip(base_symbols, quote_symbols):
            try:
                results.append(self._engine.cross_rate(base_symbol, quote_symbol))
            except SymbolNotFoundError as exc:
                missing.update(exc.symbols)

        if missing:
            raise SymbolNotFoundError(sorted(missing))
        return results

    def cross_rate_pairs(self, pairs: Sequence[tuple[str, str]]) -> list[ReferenceData]:
        return self.cross_rate_bulk([base for base, _ in pairs], [quote for _, quote in pairs])


__all__ = ["BulkQueryAggregator"]
