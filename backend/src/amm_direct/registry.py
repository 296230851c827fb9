from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

import aiohttp
from solders.pubkey import Pubkey

from .errors import LedgerError

logger = logging.getLogger(__name__)

POOL_ADDRESS_KEYS = ("poolAddress", "bondingCurve", "address")


def extract_pool_address(payload: Optional[Dict[str, Any]]) -> Optional[Pubkey]:
    """
    Pull the pool address out of a registry response; None when absent or malformed.
    """
    if not isinstance(payload, dict):
        return None
    body = payload.get("data") if isinstance(payload.get("data"), dict) else payload
    for key in POOL_ADDRESS_KEYS:
        value = body.get(key)
        if not value:
            continue
        try:
            return Pubkey.from_string(str(value))
        except ValueError:
            logger.warning(f"[REGISTRY] Ignoring malformed {key}={value!r}")
    return None


class BoopPoolRegistry:
    """
    Off-chain pool lookup for Boop.fun mints whose curve cannot be derived on-chain.
    """

    def __init__(self, base_url: str, timeout: float = 5.0, user_agent: str = "launchpad-trader/1.0"):
        self.base_url = base_url.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.headers = {"User-Agent": user_agent, "Accept": "application/json"}

    async def lookup_pool(self, mint: Pubkey) -> Optional[Pubkey]:
        url = f"{self.base_url}/pools/{mint}"
        try:
            async with aiohttp.ClientSession(timeout=self.timeout, headers=self.headers) as session:
                async with session.get(url) as resp:
                    if resp.status == 404:
                        return None
                    resp.raise_for_status()
                    payload = await resp.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise LedgerError(f"Pool registry lookup failed for {mint}: {e}") from e
        address = extract_pool_address(payload)
        logger.debug(f"[REGISTRY] {mint} -> {address}")
        return address
