"""
Per-protocol market clients.

Each client resolves its pool, reads on-chain state through the ledger client
and encodes buy/sell instructions with a slippage-protected minimum output.
``create_market_client`` is the only place that maps a market to a client.
"""

from __future__ import annotations

import logging
import math
from typing import Callable, Dict, List, Optional, Tuple, Type

from solders.instruction import Instruction
from solders.pubkey import Pubkey

from . import amm_math
from .constants import DEFAULT_TOKEN_DECIMALS, SOL_DECIMALS, U64_MAX
from .errors import AccountNotFound, DecodeError, InvalidInput, PoolNotFound, QuoteError
from .ix_builder import build_boop_buy_ixs, build_boop_sell_ixs, build_heaven_buy_ixs, build_heaven_sell_ixs
from .models import BoopBondingCurve, HeavenPoolReserve, Market, PriceQuote, SwapDirection
from .pda import derive_boop_bonding_curve, derive_heaven_pool, resolve_pool_address
from .pool_parser import parse_boop_bonding_curve, parse_heaven_pool, parse_mint_decimals

logger = logging.getLogger(__name__)


async def read_mint_decimals(ledger, mint: Pubkey) -> int:
    """Mint decimals, or 9 when the mint account cannot be read or decoded."""
    data = await ledger.get_account(mint)
    if data is None:
        return DEFAULT_TOKEN_DECIMALS
    try:
        return parse_mint_decimals(data)
    except DecodeError:
        logger.warning(f"[MARKETS] Could not decode mint {mint}; assuming {DEFAULT_TOKEN_DECIMALS} decimals")
        return DEFAULT_TOKEN_DECIMALS


def _require_positive(amount: float, what: str) -> None:
    try:
        value = float(amount)
    except (TypeError, ValueError):
        raise InvalidInput(f"{what} is not a number: {amount!r}") from None
    if not math.isfinite(value) or value <= 0:
        raise InvalidInput(f"{what} must be greater than 0")


def _require_u64(value: int, what: str) -> int:
    if value < 0 or value > U64_MAX:
        raise InvalidInput(f"{what} does not fit in a u64: {value}")
    return value


class MarketClient:
    market: Market
    tag = "MARKET"

    def __init__(self, ledger, registry=None) -> None:
        self.ledger = ledger
        self.registry = registry

    def derive_pool(self, mint: Pubkey) -> Pubkey:
        raise NotImplementedError

    def decode_state(self, data: bytes):
        raise NotImplementedError

    def quote_state(self, state, decimals: int) -> PriceQuote:
        raise NotImplementedError

    def buy_output(self, state, lamports_in: int) -> int:
        raise NotImplementedError

    def sell_output(self, state, tokens_in: int) -> int:
        raise NotImplementedError

    def encode_buy(self, pool: Pubkey, wallet: Pubkey, mint: Pubkey, amount: int, min_out: int) -> List[Instruction]:
        raise NotImplementedError

    def encode_sell(self, pool: Pubkey, wallet: Pubkey, mint: Pubkey, amount: int, min_out: int) -> List[Instruction]:
        raise NotImplementedError

    async def resolve_pool(self, mint: Pubkey, pool_address: Optional[Pubkey] = None) -> Pubkey:
        return resolve_pool_address(self.derive_pool(mint), pool_address)

    async def fetch_state(self, mint: Pubkey, pool: Pubkey, explicit: bool = False):
        data = await self.ledger.get_account(pool)
        if data is None:
            if explicit:
                raise AccountNotFound(pool, f"{self.market.value} pool")
            raise PoolNotFound(pool, f"{self.market.value} pool for mint {mint}:")
        return self.decode_state(data)

    async def locate(self, mint: Pubkey, pool_address: Optional[Pubkey] = None):
        """
        Returns (pool, decoded_state). A caller-supplied address whose account is
        absent is AccountNotFound; a derived one is PoolNotFound.
        """
        pool = await self.resolve_pool(mint, pool_address)
        return pool, await self.fetch_state(mint, pool, explicit=pool_address is not None)

    async def get_price(self, mint: Pubkey, pool_address: Optional[Pubkey] = None) -> PriceQuote:
        try:
            pool, state = await self.locate(mint, pool_address)
        except (AccountNotFound, DecodeError) as e:
            raise QuoteError(f"{self.market.value} price unavailable for {mint}: {e}") from e
        decimals = await read_mint_decimals(self.ledger, mint)
        quote = self.quote_state(state, decimals)
        logger.debug(
            f"[{self.tag}] price mint={mint} pool={pool} lamports/token={quote.lamports_per_token} "
            f"curve={quote.bonding_curve_percent}"
        )
        return quote

    async def plan_buy(
        self,
        mint: Pubkey,
        wallet: Pubkey,
        sol_amount: float,
        slippage: float,
        pool_address: Optional[Pubkey] = None,
    ) -> Tuple[Pubkey, List[Instruction]]:
        """Returns (pool, instructions) for spending ``sol_amount`` SOL."""
        _require_positive(sol_amount, "SOL amount")
        pool, state = await self.locate(mint, pool_address)
        lamports_in = _require_u64(amm_math.to_base_units(sol_amount, SOL_DECIMALS), "SOL amount")
        expected = self.buy_output(state, lamports_in)
        min_out = _require_u64(amm_math.apply_slippage(expected, slippage), "minimum token output")
        logger.info(f"[{self.tag}] buy pool={pool} in={lamports_in} expected_out={expected} min_out={min_out}")
        return pool, self.encode_buy(pool, wallet, mint, lamports_in, min_out)

    async def plan_sell(
        self,
        mint: Pubkey,
        wallet: Pubkey,
        token_amount: float,
        slippage: float,
        pool_address: Optional[Pubkey] = None,
    ) -> Tuple[Pubkey, List[Instruction]]:
        """Returns (pool, instructions) for selling ``token_amount`` whole tokens."""
        _require_positive(token_amount, "token amount")
        pool, state = await self.locate(mint, pool_address)
        decimals = await read_mint_decimals(self.ledger, mint)
        tokens_in = _require_u64(amm_math.to_base_units(token_amount, decimals), "token amount")
        expected = self.sell_output(state, tokens_in)
        min_out = _require_u64(amm_math.apply_slippage(expected, slippage), "minimum SOL output")
        logger.info(f"[{self.tag}] sell pool={pool} in={tokens_in} expected_out={expected} min_out={min_out}")
        return pool, self.encode_sell(pool, wallet, mint, tokens_in, min_out)

    async def get_buy_instructions(self, mint, wallet, sol_amount, slippage, pool_address=None) -> List[Instruction]:
        _, instructions = await self.plan_buy(mint, wallet, sol_amount, slippage, pool_address)
        return instructions

    async def get_sell_instructions(self, mint, wallet, token_amount, slippage, pool_address=None) -> List[Instruction]:
        _, instructions = await self.plan_sell(mint, wallet, token_amount, slippage, pool_address)
        return instructions


class HeavenClient(MarketClient):
    market = Market.HEAVEN
    tag = "HEAVEN"

    def derive_pool(self, mint: Pubkey) -> Pubkey:
        return derive_heaven_pool(mint)

    def decode_state(self, data: bytes) -> HeavenPoolReserve:
        return parse_heaven_pool(data)

    def quote_state(self, state: HeavenPoolReserve, decimals: int) -> PriceQuote:
        return amm_math.heaven_price(state, decimals)

    def buy_output(self, state: HeavenPoolReserve, lamports_in: int) -> int:
        return amm_math.heaven_buy_output(state, lamports_in)

    def sell_output(self, state: HeavenPoolReserve, tokens_in: int) -> int:
        return amm_math.heaven_sell_output(state, tokens_in)

    def encode_buy(self, pool, wallet, mint, amount, min_out):
        return build_heaven_buy_ixs(pool, wallet, mint, amount, min_out)

    def encode_sell(self, pool, wallet, mint, amount, min_out):
        return build_heaven_sell_ixs(pool, wallet, mint, amount, min_out)


class BoopFunClient(MarketClient):
    market = Market.BOOP_FUN
    tag = "BOOP"

    def derive_pool(self, mint: Pubkey) -> Pubkey:
        return derive_boop_bonding_curve(mint)

    def decode_state(self, data: bytes) -> BoopBondingCurve:
        return parse_boop_bonding_curve(data)

    def quote_state(self, state: BoopBondingCurve, decimals: int) -> PriceQuote:
        return amm_math.boop_price(state, decimals)

    def buy_output(self, state: BoopBondingCurve, lamports_in: int) -> int:
        return amm_math.boop_buy_output(state, lamports_in)

    def sell_output(self, state: BoopBondingCurve, tokens_in: int) -> int:
        return amm_math.boop_sell_output(state, tokens_in)

    def encode_buy(self, pool, wallet, mint, amount, min_out):
        return build_boop_buy_ixs(pool, wallet, mint, amount, min_out)

    def encode_sell(self, pool, wallet, mint, amount, min_out):
        return build_boop_sell_ixs(pool, wallet, mint, amount, min_out)

    async def resolve_pool(self, mint: Pubkey, pool_address: Optional[Pubkey] = None) -> Pubkey:
        if pool_address is not None:
            return pool_address
        derived = self.derive_pool(mint)
        if self.registry is None:
            return derived
        if await self.ledger.get_account(derived) is not None:
            return derived
        return await self._registered_pool(mint, derived)

    async def locate(self, mint: Pubkey, pool_address: Optional[Pubkey] = None):
        if pool_address is not None or self.registry is None:
            return await super().locate(mint, pool_address)
        derived = self.derive_pool(mint)
        data = await self.ledger.get_account(derived)
        if data is not None:
            return derived, self.decode_state(data)
        registered = await self._registered_pool(mint, derived)
        return registered, await self.fetch_state(mint, registered)

    async def _registered_pool(self, mint: Pubkey, derived: Pubkey) -> Pubkey:
        registered = await self.registry.lookup_pool(mint)
        if registered is None:
            raise PoolNotFound(derived, f"BOOP_FUN bonding curve for mint {mint}:")
        logger.info(f"[BOOP] Derived curve {derived} missing; registry returned {registered}")
        return registered


MARKET_CLIENTS: Dict[Market, Type[MarketClient]] = {
    Market.HEAVEN: HeavenClient,
    Market.BOOP_FUN: BoopFunClient,
}


def create_market_client(market, ledger, registry=None) -> MarketClient:
    return MARKET_CLIENTS[Market.parse(market)](ledger, registry=registry)


def direction_invoker(client: MarketClient, direction) -> Callable:
    """
    Returns the client's coroutine for the direction:
    (mint, wallet, amount, slippage, pool_address=None) -> (pool, instructions).
    """
    direction = SwapDirection.parse(direction)
    if direction is SwapDirection.BUY:
        return client.plan_buy
    return client.plan_sell
