from .builder import build_transaction
from .errors import (
    AccountNotFound,
    DecodeError,
    InvalidInput,
    LedgerError,
    PoolNotFound,
    QuoteError,
    SendFailure,
    TradeError,
    UnsupportedDirection,
    UnsupportedProtocol,
)
from .fees import estimate_fee, micro_lamports_per_cu
from .markets import BoopFunClient, HeavenClient, MarketClient, create_market_client
from .models import (
    BoopBondingCurve,
    FeeEstimate,
    HeavenPoolReserve,
    Market,
    PriceQuote,
    PriceUnit,
    SimulationResult,
    SwapDirection,
    TransactionPlan,
)
from .registry import BoopPoolRegistry

__all__ = [
    "build_transaction",
    "estimate_fee",
    "micro_lamports_per_cu",
    "create_market_client",
    "MarketClient",
    "HeavenClient",
    "BoopFunClient",
    "BoopPoolRegistry",
    "Market",
    "SwapDirection",
    "PriceUnit",
    "PriceQuote",
    "HeavenPoolReserve",
    "BoopBondingCurve",
    "TransactionPlan",
    "FeeEstimate",
    "SimulationResult",
    "TradeError",
    "InvalidInput",
    "UnsupportedProtocol",
    "UnsupportedDirection",
    "AccountNotFound",
    "PoolNotFound",
    "DecodeError",
    "QuoteError",
    "LedgerError",
    "SendFailure",
]
