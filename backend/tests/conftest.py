"""Shared test fixtures: an in-memory ledger and raw account builders."""

import struct
from typing import Dict, List, Optional

import pytest
from solders.hash import Hash
from solders.keypair import Keypair
from solders.pubkey import Pubkey

from amm_direct.models import SimulationResult


def heaven_pool_bytes(
    token_a: int,
    token_b: int,
    initial_a: int = 0,
    initial_b: int = 0,
) -> bytes:
    return (
        bytes(456)
        + struct.pack("<QQ", token_a, token_b)
        + bytes(32)
        + struct.pack("<QQ", initial_a, initial_b)
    )


def boop_curve_bytes(
    virtual_sol: int,
    virtual_token: int,
    graduation_target: int,
    sol: int,
    token: int,
    damping: int = 0,
    fee_bps: int = 0,
) -> bytes:
    return (
        bytes(8 + 64)
        + struct.pack("<QQQ", virtual_sol, virtual_token, graduation_target)
        + bytes(8)
        + struct.pack("<QQBH", sol, token, damping, fee_bps)
    )


def mint_bytes(decimals: int, supply: int = 1_000_000_000) -> bytes:
    return struct.pack("<I32sQBBI32s", 0, bytes(32), supply, decimals, 1, 0, bytes(32))


class FakeLedger:
    """Ledger client double: accounts live in a dict, every call is recorded."""

    def __init__(self, accounts: Optional[Dict[Pubkey, bytes]] = None) -> None:
        self.accounts: Dict[Pubkey, bytes] = dict(accounts or {})
        self.calls: List[tuple] = []
        self.base_fee = 5000
        self.simulation = SimulationResult(units_consumed=120_000, logs=["Program log: ok"])
        self.signature = "5" * 64
        self.sent = []
        self.confirmed = []
        self.closed = False

    async def get_account(self, address: Pubkey) -> Optional[bytes]:
        self.calls.append(("get_account", address))
        return self.accounts.get(address)

    async def get_latest_blockhash(self, commitment=None):
        self.calls.append(("get_latest_blockhash", commitment))
        return Hash.default(), 100

    async def get_fee_for_message(self, message) -> int:
        self.calls.append(("get_fee_for_message", message))
        return self.base_fee

    async def simulate(self, plan, signers, blockhash) -> SimulationResult:
        self.calls.append(("simulate", plan))
        return self.simulation

    async def send(self, plan, signers, blockhash) -> str:
        self.calls.append(("send", plan))
        self.sent.append((plan, list(signers), blockhash))
        return self.signature

    async def confirm(self, signature, last_valid_block_height=None, commitment=None) -> None:
        self.calls.append(("confirm", signature))
        self.confirmed.append((signature, last_valid_block_height))

    async def close(self) -> None:
        self.closed = True


class FakeRegistry:
    def __init__(self, answer: Optional[Pubkey]) -> None:
        self.answer = answer
        self.lookups: List[Pubkey] = []

    async def lookup_pool(self, mint: Pubkey) -> Optional[Pubkey]:
        self.lookups.append(mint)
        return self.answer


@pytest.fixture
def ledger() -> FakeLedger:
    return FakeLedger()


@pytest.fixture
def mint() -> Pubkey:
    return Pubkey.new_unique()


@pytest.fixture
def wallet() -> Keypair:
    return Keypair()
