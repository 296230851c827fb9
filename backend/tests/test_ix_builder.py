import hashlib
import struct

from solders.compute_budget import set_compute_unit_limit, set_compute_unit_price
from solders.pubkey import Pubkey

from amm_direct.constants import (
    ASSOCIATED_TOKEN_PROGRAM,
    BOOP_FUN_PROGRAM_ID,
    HEAVEN_PROGRAM_ID,
    SYSTEM_PROGRAM,
    TOKEN_PROGRAM,
)
from amm_direct.ix_builder import (
    BOOP_BUY_DISCRIMINATOR,
    BOOP_SELL_DISCRIMINATOR,
    HEAVEN_BUY_DISCRIMINATOR,
    anchor_discriminator,
    build_boop_buy_ixs,
    build_boop_sell_ixs,
    build_heaven_buy_ixs,
    build_heaven_sell_ixs,
    compute_budget_ixs,
    encode_swap_args,
)


def _args(data: bytes):
    return struct.unpack("<QQ", bytes(data)[8:24])


class TestEncoding:
    def test_discriminator_is_sha256_prefix(self) -> None:
        assert anchor_discriminator("buy_token") == hashlib.sha256(b"global:buy_token").digest()[:8]
        assert BOOP_SELL_DISCRIMINATOR == anchor_discriminator("sell_token")

    def test_swap_args_little_endian(self) -> None:
        data = encode_swap_args(HEAVEN_BUY_DISCRIMINATOR, 1, 2**64 - 1)
        assert len(data) == 24
        assert data[:8] == HEAVEN_BUY_DISCRIMINATOR
        assert _args(data) == (1, 2**64 - 1)

    def test_compute_budget_limit_then_price(self) -> None:
        assert compute_budget_ixs(300_000, 7) == [set_compute_unit_limit(300_000), set_compute_unit_price(7)]


class TestHeaven:
    def test_buy_wraps_sol_around_swap(self) -> None:
        pool, wallet, mint = Pubkey.new_unique(), Pubkey.new_unique(), Pubkey.new_unique()
        ixs = build_heaven_buy_ixs(pool, wallet, mint, 1_000, 900)
        assert [ix.program_id for ix in ixs] == [
            ASSOCIATED_TOKEN_PROGRAM,
            ASSOCIATED_TOKEN_PROGRAM,
            SYSTEM_PROGRAM,
            TOKEN_PROGRAM,
            HEAVEN_PROGRAM_ID,
            TOKEN_PROGRAM,
        ]
        swap = ixs[4]
        assert len(swap.accounts) == 14
        assert swap.accounts[0].pubkey == pool
        assert swap.accounts[1].pubkey == wallet and swap.accounts[1].is_signer
        assert _args(swap.data) == (1_000, 900)

    def test_sell_creates_and_closes_wsol(self) -> None:
        ixs = build_heaven_sell_ixs(Pubkey.new_unique(), Pubkey.new_unique(), Pubkey.new_unique(), 5, 1)
        assert [ix.program_id for ix in ixs] == [ASSOCIATED_TOKEN_PROGRAM, HEAVEN_PROGRAM_ID, TOKEN_PROGRAM]
        assert bytes(ixs[1].data)[:8] == anchor_discriminator("sell")


class TestBoop:
    def test_buy_creates_ata_first(self) -> None:
        curve, wallet, mint = Pubkey.new_unique(), Pubkey.new_unique(), Pubkey.new_unique()
        ixs = build_boop_buy_ixs(curve, wallet, mint, 10, 3)
        assert [ix.program_id for ix in ixs] == [ASSOCIATED_TOKEN_PROGRAM, BOOP_FUN_PROGRAM_ID]
        buy = ixs[1]
        assert bytes(buy.data)[:8] == BOOP_BUY_DISCRIMINATOR
        assert buy.accounts[0].pubkey == mint
        assert buy.accounts[1].pubkey == curve
        assert len(buy.accounts) == 13

    def test_sell_is_single_instruction(self) -> None:
        curve, wallet, mint = Pubkey.new_unique(), Pubkey.new_unique(), Pubkey.new_unique()
        ixs = build_boop_sell_ixs(curve, wallet, mint, 10, 3)
        assert len(ixs) == 1
        assert ixs[0].program_id == BOOP_FUN_PROGRAM_ID
        assert _args(ixs[0].data) == (10, 3)
