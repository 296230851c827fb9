from __future__ import annotations

import logging
import math
from typing import Optional, Sequence

from solders.instruction import Instruction
from solders.pubkey import Pubkey

from .constants import COMPUTE_UNIT_BUDGET
from .errors import InvalidInput
from .fees import micro_lamports_per_cu
from .ix_builder import compute_budget_ixs
from .markets import create_market_client, direction_invoker
from .models import TransactionPlan

logger = logging.getLogger(__name__)


def _priority_fee(priority_fee_sol) -> float:
    if priority_fee_sol is None:
        return 0
    try:
        value = float(priority_fee_sol)
    except (TypeError, ValueError):
        raise InvalidInput(f"Invalid priority fee: {priority_fee_sol!r}") from None
    if not math.isfinite(value) or value < 0:
        raise InvalidInput(f"priority fee must be a finite amount of SOL >= 0, got {priority_fee_sol!r}")
    return value


async def build_transaction(
    ledger,
    market,
    direction,
    wallet: Pubkey,
    mint: Pubkey,
    amount: float,
    slippage: float,
    priority_fee_sol: float = 0,
    pool_address: Optional[Pubkey] = None,
    additional_instructions: Sequence[Instruction] = (),
    registry=None,
) -> TransactionPlan:
    """
    Build the unsigned plan for one buy or sell: compute budget (only with a priority
    fee), the market's instructions, then caller extras as given. No blockhash is set.
    """
    if slippage is None or not math.isfinite(slippage) or slippage < 0 or slippage > 1:
        raise InvalidInput("slippage must be between 0 and 1")
    priority_fee_sol = _priority_fee(priority_fee_sol)

    client = create_market_client(market, ledger, registry=registry)
    invoke = direction_invoker(client, direction)

    instructions = []
    rate = 0
    compute_units = None
    if priority_fee_sol > 0:
        compute_units = COMPUTE_UNIT_BUDGET
        rate = micro_lamports_per_cu(priority_fee_sol, compute_units)
        instructions.extend(compute_budget_ixs(compute_units, rate))

    pool, market_ixs = await invoke(mint, wallet, amount, slippage, pool_address=pool_address)
    instructions.extend(market_ixs)
    instructions.extend(additional_instructions or ())

    logger.debug(
        f"[BUILDER] {client.market.value} pool={pool} ixs={len(instructions)} "
        f"market_ixs={len(market_ixs)} extra={len(additional_instructions or ())} cu_price={rate}"
    )
    return TransactionPlan(
        instructions=instructions,
        fee_payer=wallet,
        pool_address=pool,
        micro_lamports_per_cu=rate,
        compute_unit_limit=compute_units,
    )
