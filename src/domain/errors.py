from __future__ import annotations

from typing import Iterable


class OracleError(Exception):
    """Base class for every failure raised by the reference oracle."""


class UnauthorizedError(OracleError):
    def __init__(self, *, caller: str, required_role: str) -> None:
        self.caller = caller
        self.required_role = required_role
        super().__init__(f"NOT_AUTHORIZED: {caller} is not the {required_role}")


class SizeMismatchError(OracleError):
    def __init__(self, *, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"MISMATCHED_INPUT_SIZES: expected {expected} entries, got {actual}")


class SymbolNotFoundError(OracleError, LookupError):
    def __init__(self, symbols: Iterable[str]) -> None:
        self.symbols = tuple(symbols)
        super().__init__(f"DATA_NOT_AVAILABLE_FOR_{'_'.join(self.symbols)}")


class RateArithmeticError(OracleError, ArithmeticError):
    def __init__(self, message: str, *, base_symbol: str, quote_symbol: str) -> None:
        super().__init__(message)
        self.base_symbol = base_symbol
        self.quote_symbol = quote_symbol


class InvalidObservationError(OracleError, ValueError):
    def __init__(self, message: str, *, symbol: str | None = None) -> None:
        super().__init__(message)
        self.symbol = symbol


class StaleObservationError(OracleError):
    def __init__(self, *, symbol: str, stored_resolve_time: int, resolve_time: int) -> None:
        self.symbol = symbol
        self.stored_resolve_time = stored_resolve_time
        self.resolve_time = resolve_time
        message = (
            f"INVALID_RESOLVE_TIME: symbol={symbol} stored={stored_resolve_time} "
            f"incoming={resolve_time}"
        )
        super().__init__(message)


class ConfigNotInitializedError(OracleError):
    def __init__(self) -> None:
        super().__init__("CONFIG_NOT_INITIALIZED")


class AlreadyInitializedError(OracleError):
    def __init__(self) -> None:
        super().__init__("CONFIG_ALREADY_INITIALIZED")


__all__ = [
    "AlreadyInitializedError",
    "ConfigNotInitializedError",
    "InvalidObservationError",
    "OracleError",
    "RateArithmeticError",
    "SizeMismatchError",
    "StaleObservationError",
    "SymbolNotFoundError",
    "UnauthorizedError",
]
