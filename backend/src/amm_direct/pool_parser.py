from __future__ import annotations

from construct import Bytes, ConstructError, Int8ul, Int16ul, Int32ul, Int64ul, Padding, Struct

from .models import BoopBondingCurve, HeavenPoolReserve
from .errors import DecodeError

# Anchor discriminator (8) + LiquidityPoolInfo (88) + LiquidityPoolMarketCapBasedFees (360)
HEAVEN_RESERVE_OFFSET = 8 + 88 + 360

HEAVEN_POOL_LAYOUT = Struct(
    Padding(HEAVEN_RESERVE_OFFSET),
    "token_a_reserve" / Int64ul,
    "token_b_reserve" / Int64ul,
    Padding(32),
    "initial_token_a_reserve" / Int64ul,
    "initial_token_b_reserve" / Int64ul,
)

BOOP_BONDING_CURVE_LAYOUT = Struct(
    Padding(8),  # anchor discriminator
    Padding(64),  # creator + mint
    "virtual_sol_reserves" / Int64ul,
    "virtual_token_reserves" / Int64ul,
    "graduation_target" / Int64ul,
    Padding(8),  # graduation fee
    "sol_reserves" / Int64ul,
    "token_reserves" / Int64ul,
    "damping_term" / Int8ul,
    "swap_fee_basis_points" / Int16ul,
)

# SPL Token mint (82 bytes)
MINT_LAYOUT = Struct(
    "mint_authority_option" / Int32ul,
    "mint_authority" / Bytes(32),
    "supply" / Int64ul,
    "decimals" / Int8ul,
    "is_initialized" / Int8ul,
    "freeze_authority_option" / Int32ul,
    "freeze_authority" / Bytes(32),
)

HEAVEN_POOL_MIN_SIZE = HEAVEN_POOL_LAYOUT.sizeof()
BOOP_BONDING_CURVE_MIN_SIZE = BOOP_BONDING_CURVE_LAYOUT.sizeof()
MINT_SIZE = MINT_LAYOUT.sizeof()


def _parse(layout: Struct, data: bytes, what: str):
    if data is None:
        raise DecodeError(f"{what}: no account data")
    if len(data) < layout.sizeof():
        raise DecodeError(f"{what}: expected at least {layout.sizeof()} bytes, got {len(data)}")
    try:
        return layout.parse(bytes(data))
    except (ConstructError, TypeError, ValueError) as e:
        raise DecodeError(f"{what}: {e}") from e


def parse_heaven_pool(data: bytes) -> HeavenPoolReserve:
    parsed = _parse(HEAVEN_POOL_LAYOUT, data, "Heaven liquidity pool state")
    return HeavenPoolReserve(
        token_a_reserve=int(parsed.token_a_reserve),
        token_b_reserve=int(parsed.token_b_reserve),
        initial_token_a_reserve=int(parsed.initial_token_a_reserve),
        initial_token_b_reserve=int(parsed.initial_token_b_reserve),
    )


def parse_boop_bonding_curve(data: bytes) -> BoopBondingCurve:
    parsed = _parse(BOOP_BONDING_CURVE_LAYOUT, data, "Boop bonding curve")
    return BoopBondingCurve(
        virtual_sol_reserves=int(parsed.virtual_sol_reserves),
        virtual_token_reserves=int(parsed.virtual_token_reserves),
        graduation_target=int(parsed.graduation_target),
        sol_reserves=int(parsed.sol_reserves),
        token_reserves=int(parsed.token_reserves),
        damping_term=int(parsed.damping_term),
        swap_fee_basis_points=int(parsed.swap_fee_basis_points),
    )


def parse_mint_decimals(data: bytes) -> int:
    return int(_parse(MINT_LAYOUT, data, "SPL mint").decimals)
