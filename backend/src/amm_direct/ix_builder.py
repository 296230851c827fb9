from __future__ import annotations

import hashlib
import struct
from typing import List

from solders.compute_budget import set_compute_unit_limit, set_compute_unit_price
from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey
from solders.system_program import TransferParams, transfer
from spl.token.instructions import close_account, sync_native
from spl.token.models import CloseAccountParams, SyncNativeParams

from .constants import (
    ASSOCIATED_TOKEN_PROGRAM,
    BOOP_FUN_PROGRAM_ID,
    HEAVEN_PROGRAM_ID,
    SOL_MINT,
    SYSTEM_PROGRAM,
    TOKEN_PROGRAM,
)
from .pda import (
    associated_token_address,
    derive_boop_config,
    derive_boop_mint_vaults,
    derive_boop_vault_authority,
    derive_event_authority,
    derive_heaven_protocol_config,
)

CREATE_ATA_IDEMPOTENT_IX = 1


def anchor_discriminator(name: str) -> bytes:
    return hashlib.sha256(f"global:{name}".encode()).digest()[:8]


HEAVEN_BUY_DISCRIMINATOR = anchor_discriminator("buy")
HEAVEN_SELL_DISCRIMINATOR = anchor_discriminator("sell")
BOOP_BUY_DISCRIMINATOR = anchor_discriminator("buy_token")
BOOP_SELL_DISCRIMINATOR = anchor_discriminator("sell_token")


def encode_swap_args(discriminator: bytes, amount: int, min_amount_out: int) -> bytes:
    return discriminator + struct.pack("<QQ", amount, min_amount_out)


def compute_budget_ixs(compute_units: int, micro_lamports: int) -> List[Instruction]:
    """Limit first, then price."""
    return [set_compute_unit_limit(compute_units), set_compute_unit_price(micro_lamports)]


def create_ata_idempotent_ix(payer: Pubkey, owner: Pubkey, mint: Pubkey) -> tuple[Pubkey, Instruction]:
    """
    Returns (ata_address, create_ix). The instruction is a no-op when the account exists.
    """
    ata = associated_token_address(owner, mint)
    accounts = [
        AccountMeta(pubkey=payer, is_signer=True, is_writable=True),
        AccountMeta(pubkey=ata, is_signer=False, is_writable=True),
        AccountMeta(pubkey=owner, is_signer=False, is_writable=False),
        AccountMeta(pubkey=mint, is_signer=False, is_writable=False),
        AccountMeta(pubkey=SYSTEM_PROGRAM, is_signer=False, is_writable=False),
        AccountMeta(pubkey=TOKEN_PROGRAM, is_signer=False, is_writable=False),
    ]
    create_ix = Instruction(
        program_id=ASSOCIATED_TOKEN_PROGRAM,
        accounts=accounts,
        data=bytes([CREATE_ATA_IDEMPOTENT_IX]),
    )
    return ata, create_ix


def wrap_sol_ixs(wallet: Pubkey, wsol_ata: Pubkey, lamports: int) -> List[Instruction]:
    return [
        transfer(TransferParams(from_pubkey=wallet, to_pubkey=wsol_ata, lamports=lamports)),
        sync_native(SyncNativeParams(program_id=TOKEN_PROGRAM, account=wsol_ata)),
    ]


def close_wsol_ix(wallet: Pubkey, wsol_ata: Pubkey) -> Instruction:
    return close_account(
        CloseAccountParams(program_id=TOKEN_PROGRAM, account=wsol_ata, dest=wallet, owner=wallet)
    )


def _heaven_swap_ix(
    discriminator: bytes,
    pool: Pubkey,
    wallet: Pubkey,
    mint: Pubkey,
    user_token_ata: Pubkey,
    user_wsol_ata: Pubkey,
    amount_in: int,
    min_amount_out: int,
) -> Instruction:
    accounts = [
        AccountMeta(pool, is_signer=False, is_writable=True),
        AccountMeta(wallet, is_signer=True, is_writable=True),
        AccountMeta(mint, is_signer=False, is_writable=False),
        AccountMeta(SOL_MINT, is_signer=False, is_writable=False),
        AccountMeta(user_token_ata, is_signer=False, is_writable=True),
        AccountMeta(user_wsol_ata, is_signer=False, is_writable=True),
        AccountMeta(associated_token_address(pool, mint), is_signer=False, is_writable=True),
        AccountMeta(associated_token_address(pool, SOL_MINT), is_signer=False, is_writable=True),
        AccountMeta(derive_heaven_protocol_config(), is_signer=False, is_writable=False),
        AccountMeta(TOKEN_PROGRAM, is_signer=False, is_writable=False),
        AccountMeta(ASSOCIATED_TOKEN_PROGRAM, is_signer=False, is_writable=False),
        AccountMeta(SYSTEM_PROGRAM, is_signer=False, is_writable=False),
        AccountMeta(derive_event_authority(HEAVEN_PROGRAM_ID), is_signer=False, is_writable=False),
        AccountMeta(HEAVEN_PROGRAM_ID, is_signer=False, is_writable=False),
    ]
    data = encode_swap_args(discriminator, amount_in, min_amount_out)
    return Instruction(program_id=HEAVEN_PROGRAM_ID, data=data, accounts=accounts)


def build_heaven_buy_ixs(
    pool: Pubkey,
    wallet: Pubkey,
    mint: Pubkey,
    lamports_in: int,
    min_tokens_out: int,
) -> List[Instruction]:
    token_ata, create_token_ata = create_ata_idempotent_ix(wallet, wallet, mint)
    wsol_ata, create_wsol_ata = create_ata_idempotent_ix(wallet, wallet, SOL_MINT)
    return [
        create_token_ata,
        create_wsol_ata,
        *wrap_sol_ixs(wallet, wsol_ata, lamports_in),
        _heaven_swap_ix(HEAVEN_BUY_DISCRIMINATOR, pool, wallet, mint, token_ata, wsol_ata, lamports_in, min_tokens_out),
        close_wsol_ix(wallet, wsol_ata),
    ]


def build_heaven_sell_ixs(
    pool: Pubkey,
    wallet: Pubkey,
    mint: Pubkey,
    tokens_in: int,
    min_lamports_out: int,
) -> List[Instruction]:
    token_ata = associated_token_address(wallet, mint)
    wsol_ata, create_wsol_ata = create_ata_idempotent_ix(wallet, wallet, SOL_MINT)
    return [
        create_wsol_ata,
        _heaven_swap_ix(HEAVEN_SELL_DISCRIMINATOR, pool, wallet, mint, token_ata, wsol_ata, tokens_in, min_lamports_out),
        close_wsol_ix(wallet, wsol_ata),
    ]


def build_boop_buy_ixs(
    bonding_curve: Pubkey,
    wallet: Pubkey,
    mint: Pubkey,
    lamports_in: int,
    min_tokens_out: int,
) -> List[Instruction]:
    recipient_ata, create_ata = create_ata_idempotent_ix(wallet, wallet, mint)
    token_vault, sol_vault, fees_vault = derive_boop_mint_vaults(mint)
    accounts = [
        AccountMeta(mint, is_signer=False, is_writable=False),
        AccountMeta(bonding_curve, is_signer=False, is_writable=True),
        AccountMeta(fees_vault, is_signer=False, is_writable=True),
        AccountMeta(token_vault, is_signer=False, is_writable=True),
        AccountMeta(sol_vault, is_signer=False, is_writable=True),
        AccountMeta(recipient_ata, is_signer=False, is_writable=True),
        AccountMeta(wallet, is_signer=True, is_writable=True),
        AccountMeta(derive_boop_config(), is_signer=False, is_writable=False),
        AccountMeta(derive_boop_vault_authority(), is_signer=False, is_writable=False),
        AccountMeta(SOL_MINT, is_signer=False, is_writable=False),
        AccountMeta(SYSTEM_PROGRAM, is_signer=False, is_writable=False),
        AccountMeta(TOKEN_PROGRAM, is_signer=False, is_writable=False),
        AccountMeta(ASSOCIATED_TOKEN_PROGRAM, is_signer=False, is_writable=False),
    ]
    data = encode_swap_args(BOOP_BUY_DISCRIMINATOR, lamports_in, min_tokens_out)
    return [create_ata, Instruction(program_id=BOOP_FUN_PROGRAM_ID, data=data, accounts=accounts)]


def build_boop_sell_ixs(
    bonding_curve: Pubkey,
    wallet: Pubkey,
    mint: Pubkey,
    tokens_in: int,
    min_lamports_out: int,
) -> List[Instruction]:
    seller_ata = associated_token_address(wallet, mint)
    token_vault, sol_vault, fees_vault = derive_boop_mint_vaults(mint)
    accounts = [
        AccountMeta(mint, is_signer=False, is_writable=False),
        AccountMeta(bonding_curve, is_signer=False, is_writable=True),
        AccountMeta(fees_vault, is_signer=False, is_writable=True),
        AccountMeta(token_vault, is_signer=False, is_writable=True),
        AccountMeta(sol_vault, is_signer=False, is_writable=True),
        AccountMeta(seller_ata, is_signer=False, is_writable=True),
        AccountMeta(wallet, is_signer=True, is_writable=True),
        AccountMeta(wallet, is_signer=False, is_writable=True),  # recipient
        AccountMeta(derive_boop_config(), is_signer=False, is_writable=False),
        AccountMeta(derive_boop_vault_authority(), is_signer=False, is_writable=False),
        AccountMeta(SYSTEM_PROGRAM, is_signer=False, is_writable=False),
        AccountMeta(TOKEN_PROGRAM, is_signer=False, is_writable=False),
        AccountMeta(ASSOCIATED_TOKEN_PROGRAM, is_signer=False, is_writable=False),
    ]
    data = encode_swap_args(BOOP_SELL_DISCRIMINATOR, tokens_in, min_lamports_out)
    return [Instruction(program_id=BOOP_FUN_PROGRAM_ID, data=data, accounts=accounts)]
