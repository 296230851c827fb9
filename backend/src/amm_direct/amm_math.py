from __future__ import annotations

from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal
from fractions import Fraction
from typing import Optional, Union

from .constants import BPS_DENOMINATOR, HEAVEN_MAX_FEE_BPS, LAMPORTS_PER_SOL
from .models import BoopBondingCurve, HeavenPoolReserve, PriceQuote

Number = Union[int, float, Fraction, Decimal]


def _fraction(value: Number) -> Fraction:
    if isinstance(value, float):
        return Fraction(Decimal(repr(value)))
    return Fraction(value)


def round_lamports(value: Number) -> int:
    """
    Floor, then add one only when the remainder is strictly above one half.
    A remainder of exactly 0.5 rounds down.
    """
    v = _fraction(value)
    floor = v.numerator // v.denominator
    if v - floor > Fraction(1, 2):
        return floor + 1
    return floor


def round_percent(value: Number) -> float:
    """Two decimal places, halves rounded up."""
    v = _fraction(value)
    exact = Decimal(v.numerator) / Decimal(v.denominator)
    return float(exact.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def clamp01(value: Fraction) -> Fraction:
    return max(Fraction(0), min(Fraction(1), value))


def heaven_price(reserve: HeavenPoolReserve, decimals: int) -> PriceQuote:
    token_a = reserve.token_a_reserve
    if token_a > 0:
        lamports_per_token = round_lamports(Fraction(reserve.token_b_reserve * 10**decimals, token_a))
    else:
        lamports_per_token = 0

    initial_a = reserve.initial_token_a_reserve
    bonding_curve_percent = 0.0
    if initial_a > 0:
        sold = max(0, initial_a - token_a)
        bonding_curve_percent = round_percent(clamp01(Fraction(sold, initial_a)) * 100)
    return PriceQuote(lamports_per_token=lamports_per_token, bonding_curve_percent=bonding_curve_percent)


def boop_price(curve: BoopBondingCurve, decimals: int) -> PriceQuote:
    sol_side = curve.virtual_sol_reserves + curve.sol_reserves
    token_side = curve.token_reserves
    if token_side > 0:
        price_sol = Fraction(sol_side, LAMPORTS_PER_SOL) / Fraction(token_side, 10**decimals)
    else:
        price_sol = Fraction(0)
    lamports_per_token = round_lamports(max(Fraction(0), price_sol * LAMPORTS_PER_SOL))

    # an unknown graduation target is reported as unknown, never as 0%
    bonding_curve_percent: Optional[float] = None
    if curve.graduation_target > 0:
        ratio = clamp01(Fraction(curve.sol_reserves, curve.graduation_target))
        bonding_curve_percent = round_percent(ratio * 100)
    return PriceQuote(lamports_per_token=lamports_per_token, bonding_curve_percent=bonding_curve_percent)


def calculate_swap_output(amount_in: int, reserve_in: int, reserve_out: int, fee_bps: int = 0) -> int:
    """
    x*y=k output with the fee taken from the input side.
    """
    amount_in_with_fee = amount_in * (BPS_DENOMINATOR - fee_bps)
    numerator = amount_in_with_fee * reserve_out
    denominator = (reserve_in * BPS_DENOMINATOR) + amount_in_with_fee
    return numerator // denominator if denominator else 0


def deduct_fee(amount: int, fee_bps: int) -> int:
    return amount * (BPS_DENOMINATOR - fee_bps) // BPS_DENOMINATOR


def heaven_buy_output(reserve: HeavenPoolReserve, lamports_in: int) -> int:
    return calculate_swap_output(lamports_in, reserve.token_b_reserve, reserve.token_a_reserve, HEAVEN_MAX_FEE_BPS)


def heaven_sell_output(reserve: HeavenPoolReserve, tokens_in: int) -> int:
    gross = calculate_swap_output(tokens_in, reserve.token_a_reserve, reserve.token_b_reserve)
    return deduct_fee(gross, HEAVEN_MAX_FEE_BPS)


def boop_buy_output(curve: BoopBondingCurve, lamports_in: int) -> int:
    sol_side = curve.virtual_sol_reserves + curve.sol_reserves
    return calculate_swap_output(lamports_in, sol_side, curve.token_reserves, curve.swap_fee_basis_points)


def boop_sell_output(curve: BoopBondingCurve, tokens_in: int) -> int:
    sol_side = curve.virtual_sol_reserves + curve.sol_reserves
    gross = calculate_swap_output(tokens_in, curve.token_reserves, sol_side)
    # only real SOL can leave the curve
    return min(deduct_fee(gross, curve.swap_fee_basis_points), curve.sol_reserves)


def apply_slippage(amount: int, slippage: float) -> int:
    """Minimum acceptable output: floor(amount * (1 - slippage))."""
    factor = Decimal(1) - Decimal(repr(float(slippage)))
    return int((Decimal(amount) * factor).to_integral_value(rounding=ROUND_FLOOR))


def to_base_units(amount: Union[int, float, Decimal, str], decimals: int) -> int:
    """Whole units (SOL, tokens) to the smallest on-chain unit, floored."""
    value = Decimal(repr(amount)) if isinstance(amount, float) else Decimal(amount)
    return int((value * (Decimal(10) ** decimals)).to_integral_value(rounding=ROUND_FLOOR))
