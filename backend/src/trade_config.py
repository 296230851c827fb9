from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from ledger_client import DEFAULT_RPC_URL


def _env_bool(name: str, default: bool = False) -> bool:
    return os.getenv(name, str(default)).strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class TraderConfig:
    rpc_url: str = DEFAULT_RPC_URL
    commitment: str = "confirmed"
    rpc_timeout_sec: float = 10.0
    skip_preflight: bool = False
    boop_registry_url: Optional[str] = None
    registry_timeout_sec: float = 5.0
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, rpc_url: Optional[str] = None) -> "TraderConfig":
        return cls(
            rpc_url=rpc_url or os.getenv("RPC_URL") or DEFAULT_RPC_URL,
            commitment=os.getenv("RPC_COMMITMENT", "confirmed"),
            rpc_timeout_sec=float(os.getenv("RPC_TIMEOUT_SECONDS", "10")),
            skip_preflight=_env_bool("SKIP_PREFLIGHT", False),
            boop_registry_url=os.getenv("BOOP_REGISTRY_URL") or None,
            registry_timeout_sec=float(os.getenv("REGISTRY_TIMEOUT_SECONDS", "5")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
