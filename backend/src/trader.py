from __future__ import annotations

import logging
import math
from typing import Optional, Sequence, Tuple, Union

from solana.rpc.commitment import Finalized, Processed
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.pubkey import Pubkey

from amm_direct.builder import build_transaction
from amm_direct.errors import InvalidInput
from amm_direct.fees import estimate_fee
from amm_direct.markets import create_market_client
from amm_direct.models import FeeEstimate, PriceUnit, SwapDirection, TransactionPlan
from amm_direct.pda import parse_optional_pubkey, parse_pubkey
from amm_direct.registry import BoopPoolRegistry
from trade_config import TraderConfig
from ledger_client import SolanaLedgerClient

logger = logging.getLogger(__name__)

PubkeyLike = Union[Pubkey, str]


def normalize_slippage(slippage_percent: float) -> float:
    """Percent in [0, 100] to a fraction; anything else is rejected."""
    try:
        value = float(slippage_percent)
    except (TypeError, ValueError):
        raise InvalidInput(f"Invalid slippage: {slippage_percent!r}") from None
    if not math.isfinite(value) or value < 0 or value > 100:
        raise InvalidInput(f"slippage must be between 0 and 100 percent, got {slippage_percent!r}")
    return value / 100


class LaunchpadTrader:
    """
    Quotes, fee estimates and swaps against Heaven and Boop.fun pools.

    Every call is independent: pools are re-resolved and accounts re-read each time.
    """

    def __init__(self, ledger=None, config: Optional[TraderConfig] = None, registry=None):
        self.config = config or TraderConfig.from_env()
        self.ledger = ledger or SolanaLedgerClient(
            rpc_url=self.config.rpc_url,
            commitment=self.config.commitment,
            timeout=self.config.rpc_timeout_sec,
            skip_preflight=self.config.skip_preflight,
        )
        if registry is None and self.config.boop_registry_url:
            registry = BoopPoolRegistry(self.config.boop_registry_url, timeout=self.config.registry_timeout_sec)
        self.registry = registry

    async def __aenter__(self) -> "LaunchpadTrader":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()

    async def close(self) -> None:
        close = getattr(self.ledger, "close", None)
        if close is not None:
            await close()

    async def price(
        self,
        market: str,
        mint: PubkeyLike,
        unit: Optional[str] = "SOL",
        pool_address: Optional[PubkeyLike] = None,
    ) -> Tuple[Union[int, float], Optional[float]]:
        """
        Returns (price, bonding_curve_percent); price is SOL per token unless unit is LAMPORTS.
        """
        client = create_market_client(market, self.ledger, registry=self.registry)
        mint_key = parse_pubkey(mint, "mint")
        pool = parse_optional_pubkey(pool_address, "poolAddress")
        quote = await client.get_price(mint_key, pool)
        return quote.price_in(PriceUnit.parse(unit)), quote.bonding_curve_percent

    async def buy(
        self,
        market: str,
        wallet: Keypair,
        mint: PubkeyLike,
        amount: float,
        slippage: float,
        priority_fee_sol: float = 0,
        pool_address: Optional[PubkeyLike] = None,
        send: bool = True,
        additional_instructions: Sequence[Instruction] = (),
    ) -> Union[str, TransactionPlan]:
        return await self.trade(
            market, SwapDirection.BUY, wallet, mint, amount, slippage,
            priority_fee_sol=priority_fee_sol,
            pool_address=pool_address,
            send=send,
            additional_instructions=additional_instructions,
        )

    async def sell(
        self,
        market: str,
        wallet: Keypair,
        mint: PubkeyLike,
        amount: float,
        slippage: float,
        priority_fee_sol: float = 0,
        pool_address: Optional[PubkeyLike] = None,
        send: bool = True,
        additional_instructions: Sequence[Instruction] = (),
    ) -> Union[str, TransactionPlan]:
        return await self.trade(
            market, SwapDirection.SELL, wallet, mint, amount, slippage,
            priority_fee_sol=priority_fee_sol,
            pool_address=pool_address,
            send=send,
            additional_instructions=additional_instructions,
        )

    async def trade(
        self,
        market: str,
        direction,
        wallet: Keypair,
        mint: PubkeyLike,
        amount: float,
        slippage: float,
        priority_fee_sol: float = 0,
        pool_address: Optional[PubkeyLike] = None,
        send: bool = True,
        additional_instructions: Sequence[Instruction] = (),
    ) -> Union[str, TransactionPlan]:
        plan = await self._build(
            market, direction, wallet, mint, amount, slippage, priority_fee_sol, pool_address, additional_instructions
        )
        if not send:
            return plan

        blockhash, last_valid_block_height = await self.ledger.get_latest_blockhash(Finalized)
        signature = await self.ledger.send(plan, [wallet], blockhash)
        await self.ledger.confirm(signature, last_valid_block_height)
        logger.info(f"[TRADER] {SwapDirection.parse(direction).value} {market} {mint} landed: {signature}")
        return signature

    async def estimate_fees(
        self,
        market: str,
        direction,
        wallet: Keypair,
        mint: PubkeyLike,
        amount: float,
        slippage: float,
        priority_fee_sol: float = 0,
        pool_address: Optional[PubkeyLike] = None,
        additional_instructions: Sequence[Instruction] = (),
    ) -> FeeEstimate:
        plan = await self._build(
            market, direction, wallet, mint, amount, slippage, priority_fee_sol, pool_address, additional_instructions
        )
        blockhash, _ = await self.ledger.get_latest_blockhash(Processed)
        base_fee = await self.ledger.get_fee_for_message(plan.to_message(blockhash))

        # signed so the simulation passes signature verification
        sim = await self.ledger.simulate(plan, [wallet], blockhash)
        if not sim.success:
            logger.warning(f"[TRADER] Simulation reported {sim.error}; fee estimate uses reported units only")

        estimate = estimate_fee(base_fee, sim.units_consumed, priority_fee_sol)
        logger.info(
            f"[TRADER] Fee estimate base={estimate.base_fee_lamports} priority={estimate.priority_fee_lamports} "
            f"units={estimate.units_consumed} cu_price={estimate.micro_lamports_per_cu}"
        )
        return estimate

    async def _build(
        self,
        market,
        direction,
        wallet: Keypair,
        mint: PubkeyLike,
        amount: float,
        slippage: float,
        priority_fee_sol: float,
        pool_address: Optional[PubkeyLike],
        additional_instructions: Sequence[Instruction],
    ) -> TransactionPlan:
        mint_key = parse_pubkey(mint, "mint")
        pool = parse_optional_pubkey(pool_address, "poolAddress")
        slippage_fraction = normalize_slippage(slippage)
        return await build_transaction(
            self.ledger,
            market,
            direction,
            wallet=wallet.pubkey(),
            mint=mint_key,
            amount=amount,
            slippage=slippage_fraction,
            priority_fee_sol=priority_fee_sol or 0,
            pool_address=pool,
            additional_instructions=additional_instructions,
            registry=self.registry,
        )
