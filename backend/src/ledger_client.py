"""
Async Solana RPC adapter used by the trader.

Everything the adaptation layer needs from the ledger goes through here:
account bytes, blockhashes, message fees, simulation, send and confirm.
RPC/transport failures become LedgerError; a rejected or failed transaction
becomes SendFailure carrying whatever program logs the node returned.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from solana.exceptions import SolanaRpcException
from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment, Confirmed, Finalized, Processed
from solana.rpc.core import RPCException, TransactionExpiredBlockheightExceededError, UnconfirmedTxError
from solana.rpc.models import TxOpts
from solders.hash import Hash
from solders.keypair import Keypair
from solders.message import Message
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction import Transaction

from amm_direct.errors import LedgerError, SendFailure
from amm_direct.models import SimulationResult, TransactionPlan

logger = logging.getLogger(__name__)

DEFAULT_RPC_URL = "https://api.mainnet-beta.solana.com"


def _logs_from_rpc_error(exc: Exception) -> List[str]:
    # preflight failures carry the simulation result (and its logs) as the first arg
    data = exc.args[0] if exc.args else None
    for candidate in (getattr(data, "data", None), data):
        logs = getattr(candidate, "logs", None)
        if logs:
            return list(logs)
    return []


class SolanaLedgerClient:
    def __init__(
        self,
        rpc_url: str = DEFAULT_RPC_URL,
        commitment: Commitment = Confirmed,
        timeout: float = 10.0,
        skip_preflight: bool = False,
        client: Optional[AsyncClient] = None,
    ):
        self.rpc_url = rpc_url
        self.commitment = commitment
        self.skip_preflight = skip_preflight
        self.client = client or AsyncClient(rpc_url, commitment=commitment, timeout=timeout)

    async def close(self) -> None:
        await self.client.close()

    async def get_account(self, address: Pubkey) -> Optional[bytes]:
        try:
            resp = await self.client.get_account_info(address, commitment=Processed, encoding="base64")
        except (SolanaRpcException, RPCException) as e:
            raise LedgerError(f"getAccountInfo failed for {address}: {e}") from e
        value = getattr(resp, "value", None)
        if value is None:
            return None
        return bytes(value.data)

    async def get_latest_blockhash(self, commitment: Commitment = Finalized) -> Tuple[Hash, int]:
        try:
            resp = await self.client.get_latest_blockhash(commitment)
        except (SolanaRpcException, RPCException) as e:
            raise LedgerError(f"getLatestBlockhash failed: {e}") from e
        return resp.value.blockhash, resp.value.last_valid_block_height

    async def get_fee_for_message(self, message: Message) -> int:
        try:
            resp = await self.client.get_fee_for_message(message, commitment=Processed)
        except (SolanaRpcException, RPCException) as e:
            raise LedgerError(f"getFeeForMessage failed: {e}") from e
        return getattr(resp, "value", None) or 0

    async def simulate(
        self,
        plan: TransactionPlan,
        signers: Sequence[Keypair],
        recent_blockhash: Hash,
    ) -> SimulationResult:
        """
        Simulate the plan. A program error is reported in the result, not raised.
        """
        if signers:
            tx = plan.to_transaction(signers, recent_blockhash)
        else:
            tx = Transaction.new_unsigned(plan.to_message(recent_blockhash))
        try:
            resp = await self.client.simulate_transaction(tx, sig_verify=bool(signers), commitment=Processed)
        except (SolanaRpcException, RPCException) as e:
            raise LedgerError(f"simulateTransaction failed: {e}") from e

        value = getattr(resp, "value", None)
        if value is None:
            raise LedgerError("simulateTransaction returned no result")
        err = getattr(value, "err", None)
        return SimulationResult(
            units_consumed=getattr(value, "units_consumed", None),
            logs=list(getattr(value, "logs", None) or []),
            error=str(err) if err else None,
        )

    async def send(self, plan: TransactionPlan, signers: Sequence[Keypair], recent_blockhash: Hash) -> str:
        tx = plan.to_transaction(signers, recent_blockhash)
        opts = TxOpts(skip_preflight=self.skip_preflight, preflight_commitment=Processed)
        try:
            resp = await self.client.send_raw_transaction(bytes(tx), opts=opts)
        except RPCException as e:
            raise SendFailure(f"Transaction rejected: {e}", logs=_logs_from_rpc_error(e)) from e
        except SolanaRpcException as e:
            raise LedgerError(f"sendTransaction failed: {e}") from e
        signature = str(resp.value)
        logger.info(f"[LEDGER] Sent {signature}")
        return signature

    async def confirm(
        self,
        signature: str,
        last_valid_block_height: Optional[int] = None,
        commitment: Commitment = Confirmed,
    ) -> None:
        sig = Signature.from_string(signature)
        try:
            resp = await self.client.confirm_transaction(
                sig, commitment, last_valid_block_height=last_valid_block_height
            )
        except (UnconfirmedTxError, TransactionExpiredBlockheightExceededError) as e:
            raise SendFailure(f"Transaction {signature} was not confirmed: {e}") from e
        except (SolanaRpcException, RPCException) as e:
            raise LedgerError(f"confirmTransaction failed: {e}") from e

        statuses = getattr(resp, "value", None) or []
        status = statuses[0] if statuses else None
        err = getattr(status, "err", None) if status is not None else None
        if err:
            raise SendFailure(f"Transaction {signature} failed: {err}", logs=await self._transaction_logs(sig))
        logger.info(f"[LEDGER] Confirmed {signature}")

    async def _transaction_logs(self, sig: Signature) -> List[str]:
        try:
            resp = await self.client.get_transaction(sig, commitment=Confirmed, max_supported_transaction_version=0)
        except (SolanaRpcException, RPCException) as e:
            logger.warning(f"[LEDGER] Could not fetch logs for {sig}: {e}")
            return []
        meta = getattr(getattr(getattr(resp, "value", None), "transaction", None), "meta", None)
        return list(getattr(meta, "log_messages", None) or [])
