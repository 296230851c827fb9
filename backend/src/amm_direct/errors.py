"""
Typed failures for the adaptation layer.

Every error carries the ``stage`` it came from so callers can tell a bad
request apart from a missing pool, a layout mismatch or a ledger failure.
Nothing in the package retries or recovers locally; errors surface as-is.
"""

from __future__ import annotations

from typing import List, Optional


class TradeError(Exception):
    stage = "trade"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidInput(TradeError):
    """Rejected before any I/O: slippage, malformed keys, unknown tags."""

    stage = "input"


class UnsupportedProtocol(InvalidInput):
    def __init__(self, market: object) -> None:
        super().__init__(f"Unsupported market: {market}")
        self.market = market


class UnsupportedDirection(InvalidInput):
    def __init__(self, direction: object) -> None:
        super().__init__(f"Unsupported direction: {direction}")
        self.direction = direction


class AccountNotFound(TradeError):
    stage = "fetch"

    def __init__(self, address: object, what: str = "account") -> None:
        super().__init__(f"{what} {address} not found")
        self.address = address


class PoolNotFound(AccountNotFound):
    """No usable pool address could be resolved for a mint."""


class DecodeError(TradeError):
    stage = "decode"


class QuoteError(TradeError):
    stage = "quote"


class LedgerError(TradeError):
    stage = "ledger"


class SendFailure(TradeError):
    stage = "send"

    def __init__(self, message: str, logs: Optional[List[str]] = None) -> None:
        super().__init__(message)
        self.logs = list(logs or [])

    def __str__(self) -> str:
        if not self.logs:
            return self.message
        return f"{self.message} (logs: {' | '.join(self.logs)})"
