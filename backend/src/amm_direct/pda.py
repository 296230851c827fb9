from __future__ import annotations

from typing import Optional, Union

from solders.pubkey import Pubkey
from spl.token.instructions import get_associated_token_address

from .constants import (
    BOOP_BONDING_CURVE_SEED,
    BOOP_CONFIG_SEED,
    BOOP_CURVE_SOL_VAULT_SEED,
    BOOP_CURVE_VAULT_SEED,
    BOOP_FUN_PROGRAM_ID,
    BOOP_TRADING_FEES_VAULT_SEED,
    BOOP_VAULT_AUTHORITY_SEED,
    EVENT_AUTHORITY_SEED,
    HEAVEN_POOL_SEED,
    HEAVEN_PROGRAM_ID,
    HEAVEN_PROTOCOL_CONFIG_SEED,
    SOL_MINT,
)
from .errors import InvalidInput


def parse_pubkey(value: Union[str, Pubkey], what: str = "address") -> Pubkey:
    if isinstance(value, Pubkey):
        return value
    try:
        return Pubkey.from_string(str(value).strip())
    except (ValueError, TypeError):
        raise InvalidInput(f"Invalid {what}: {value!r}") from None


def parse_optional_pubkey(value: Optional[Union[str, Pubkey]], what: str = "address") -> Optional[Pubkey]:
    if value is None or value == "":
        return None
    return parse_pubkey(value, what)


def derive_heaven_pool(mint: Pubkey, program_id: Pubkey = HEAVEN_PROGRAM_ID) -> Pubkey:
    seeds = [HEAVEN_POOL_SEED, bytes(mint), bytes(SOL_MINT)]
    pool, _ = Pubkey.find_program_address(seeds, program_id)
    return pool


def derive_boop_bonding_curve(mint: Pubkey, program_id: Pubkey = BOOP_FUN_PROGRAM_ID) -> Pubkey:
    curve, _ = Pubkey.find_program_address([BOOP_BONDING_CURVE_SEED, bytes(mint)], program_id)
    return curve


def resolve_pool_address(derived: Pubkey, override: Optional[Pubkey] = None) -> Pubkey:
    """An explicitly supplied pool address always wins over derivation."""
    return override if override is not None else derived


def derive_event_authority(program_id: Pubkey) -> Pubkey:
    return Pubkey.find_program_address([EVENT_AUTHORITY_SEED], program_id)[0]


def derive_heaven_protocol_config(program_id: Pubkey = HEAVEN_PROGRAM_ID) -> Pubkey:
    return Pubkey.find_program_address([HEAVEN_PROTOCOL_CONFIG_SEED], program_id)[0]


def derive_boop_config(program_id: Pubkey = BOOP_FUN_PROGRAM_ID) -> Pubkey:
    return Pubkey.find_program_address([BOOP_CONFIG_SEED], program_id)[0]


def derive_boop_vault_authority(program_id: Pubkey = BOOP_FUN_PROGRAM_ID) -> Pubkey:
    return Pubkey.find_program_address([BOOP_VAULT_AUTHORITY_SEED], program_id)[0]


def derive_boop_mint_vaults(mint: Pubkey, program_id: Pubkey = BOOP_FUN_PROGRAM_ID) -> tuple[Pubkey, Pubkey, Pubkey]:
    """
    Returns (token_vault, sol_vault, trading_fees_vault) of a mint's bonding curve.
    """
    token_vault = Pubkey.find_program_address([BOOP_CURVE_VAULT_SEED, bytes(mint)], program_id)[0]
    sol_vault = Pubkey.find_program_address([BOOP_CURVE_SOL_VAULT_SEED, bytes(mint)], program_id)[0]
    fees_vault = Pubkey.find_program_address([BOOP_TRADING_FEES_VAULT_SEED, bytes(mint)], program_id)[0]
    return token_vault, sol_vault, fees_vault


def associated_token_address(owner: Pubkey, mint: Pubkey) -> Pubkey:
    return get_associated_token_address(owner, mint)
