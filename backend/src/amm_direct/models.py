from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Union

from solders.hash import Hash
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.message import Message
from solders.pubkey import Pubkey
from solders.transaction import Transaction

from .constants import LAMPORTS_PER_SOL
from .errors import UnsupportedDirection, UnsupportedProtocol


class Market(str, Enum):
    HEAVEN = "HEAVEN"
    BOOP_FUN = "BOOP_FUN"

    @classmethod
    def parse(cls, value: Union[str, "Market"]) -> "Market":
        if isinstance(value, cls):
            return value
        try:
            return cls((value or "").upper())
        except (ValueError, AttributeError):
            raise UnsupportedProtocol(value) from None


class SwapDirection(str, Enum):
    BUY = "buy"
    SELL = "sell"

    @classmethod
    def parse(cls, value: Union[str, "SwapDirection"]) -> "SwapDirection":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnsupportedDirection(value) from None


class PriceUnit(str, Enum):
    SOL = "SOL"
    LAMPORTS = "LAMPORTS"

    @classmethod
    def parse(cls, value: Optional[str]) -> "PriceUnit":
        # anything that is not LAMPORTS is quoted in SOL
        return cls.LAMPORTS if (value or "SOL").upper() == "LAMPORTS" else cls.SOL


@dataclass(frozen=True)
class HeavenPoolReserve:
    """LiquidityPoolReserve block of a Heaven pool. Token A is the launched mint, B is WSOL."""

    token_a_reserve: int
    token_b_reserve: int
    initial_token_a_reserve: int
    initial_token_b_reserve: int


@dataclass(frozen=True)
class BoopBondingCurve:
    virtual_sol_reserves: int
    virtual_token_reserves: int
    graduation_target: int
    sol_reserves: int
    token_reserves: int
    damping_term: int
    swap_fee_basis_points: int


ReserveSnapshot = Union[HeavenPoolReserve, BoopBondingCurve]


@dataclass(frozen=True)
class PriceQuote:
    lamports_per_token: int
    bonding_curve_percent: Optional[float]

    def price_in(self, unit: Union[str, PriceUnit, None] = PriceUnit.SOL) -> Union[int, float]:
        if PriceUnit.parse(unit) is PriceUnit.LAMPORTS:
            return self.lamports_per_token
        return self.lamports_per_token / LAMPORTS_PER_SOL


@dataclass
class TransactionPlan:
    """
    Ordered instructions for one swap, ready for a blockhash and signatures.
    Compute-budget instructions come first, then market instructions, then extras.
    """

    instructions: List[Instruction]
    fee_payer: Pubkey
    pool_address: Optional[Pubkey] = None
    micro_lamports_per_cu: int = 0
    compute_unit_limit: Optional[int] = None

    def to_message(self, recent_blockhash: Hash) -> Message:
        return Message.new_with_blockhash(self.instructions, self.fee_payer, recent_blockhash)

    def to_transaction(self, signers: Sequence[Keypair], recent_blockhash: Hash) -> Transaction:
        return Transaction(list(signers), self.to_message(recent_blockhash), recent_blockhash)


@dataclass
class FeeEstimate:
    base_fee_lamports: int
    priority_fee_lamports: int
    total_lamports: int
    total_sol: float
    micro_lamports_per_cu: int
    units_consumed: Optional[int] = None

    def to_dict(self) -> dict:
        """JSON shape of the CLI output."""
        return {
            "baseFeeLamports": self.base_fee_lamports,
            "priorityFeeLamports": self.priority_fee_lamports,
            "totalLamports": self.total_lamports,
            "totalSol": self.total_sol,
            "unitsConsumed": self.units_consumed,
            "microLamportsPerCU": self.micro_lamports_per_cu,
        }


@dataclass
class SimulationResult:
    units_consumed: Optional[int] = None
    logs: List[str] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error is None
