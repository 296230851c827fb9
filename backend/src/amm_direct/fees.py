from __future__ import annotations

from decimal import ROUND_FLOOR, Decimal
from typing import Optional, Union

from .constants import COMPUTE_UNIT_BUDGET, LAMPORTS_PER_SOL, MICRO_LAMPORTS_PER_LAMPORT
from .errors import InvalidInput
from .models import FeeEstimate


def micro_lamports_per_cu(priority_fee_sol: Union[float, Decimal, None], compute_units: int = COMPUTE_UNIT_BUDGET) -> int:
    """
    Spread a priority budget in SOL over the compute-unit budget.
    Returns 0 when no budget is requested, and never less than 1 otherwise.
    """
    if not priority_fee_sol or priority_fee_sol <= 0:
        return 0
    fee = Decimal(repr(priority_fee_sol)) if isinstance(priority_fee_sol, float) else Decimal(priority_fee_sol)
    if not fee.is_finite():
        raise InvalidInput(f"priority fee must be finite, got {priority_fee_sol!r}")
    rate = (fee * LAMPORTS_PER_SOL / compute_units).to_integral_value(rounding=ROUND_FLOOR)
    return max(1, int(rate))


def priority_fee_lamports(units_consumed: Optional[int], micro_lamports: int) -> int:
    if not units_consumed or micro_lamports <= 0:
        return 0
    return (units_consumed * micro_lamports) // MICRO_LAMPORTS_PER_LAMPORT


def estimate_fee(
    base_fee_lamports: Optional[int],
    units_consumed: Optional[int],
    priority_fee_sol: Union[float, Decimal, None] = 0,
) -> FeeEstimate:
    """
    Estimate only: the ledger decides what is charged when the transaction lands.
    """
    base = base_fee_lamports or 0
    rate = micro_lamports_per_cu(priority_fee_sol)
    priority = priority_fee_lamports(units_consumed, rate)
    total = base + priority
    return FeeEstimate(
        base_fee_lamports=base,
        priority_fee_lamports=priority,
        total_lamports=total,
        total_sol=total / LAMPORTS_PER_SOL,
        micro_lamports_per_cu=rate,
        units_consumed=units_consumed,
    )
