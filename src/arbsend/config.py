"""
Network configuration.

All tunables the transfer workflow depends on live in one frozen
``NetworkConfig`` that is passed into every stage explicitly.
Defaults target Arbitrum Sepolia.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

# Default config directory
ARBSEND_DIR = Path.home() / ".arbsend"
ARBSEND_ENV = ARBSEND_DIR / ".env"

DEFAULT_RPC_URL = "https://sepolia-rollup.arbitrum.io/rpc"
DEFAULT_CHAIN_ID = 421614  # Arbitrum Sepolia

# Intrinsic gas of a plain value transfer
BASIC_TRANSFER_GAS_LIMIT = 21_000
# 0.1 gwei headroom for base-fee growth between quote and inclusion
DEFAULT_FEE_BUFFER_WEI = 100_000_000


@dataclass(frozen=True)
class NetworkConfig:
    """
    Immutable settings for one run.

    Attributes:
        rpc_url: JSON-RPC endpoint URL
        chain_id: Expected chain ID; transactions are signed for it
        gas_limit: Gas limit for a basic transfer
        fee_buffer_wei: Fixed margin added to the max fee per gas
        receipt_timeout: Seconds to wait for a receipt
        poll_interval: Seconds between receipt polls
        http_timeout: Per-request HTTP timeout in seconds
    """

    rpc_url: str = DEFAULT_RPC_URL
    chain_id: int = DEFAULT_CHAIN_ID
    gas_limit: int = BASIC_TRANSFER_GAS_LIMIT
    fee_buffer_wei: int = DEFAULT_FEE_BUFFER_WEI
    receipt_timeout: float = 120.0
    poll_interval: float = 2.0
    http_timeout: float = 30.0

    def __post_init__(self) -> None:
        if not self.rpc_url:
            raise ValueError("rpc_url must not be empty")
        if self.chain_id <= 0:
            raise ValueError(f"chain_id must be positive, got {self.chain_id}")
        if self.gas_limit < BASIC_TRANSFER_GAS_LIMIT:
            raise ValueError(
                f"gas_limit must be at least {BASIC_TRANSFER_GAS_LIMIT}, got {self.gas_limit}"
            )
        if self.fee_buffer_wei < 0:
            raise ValueError(f"fee_buffer_wei cannot be negative, got {self.fee_buffer_wei}")
        for name in ("receipt_timeout", "poll_interval", "http_timeout"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")

    @classmethod
    def from_env(cls, env_path: Optional[Path] = None, **overrides: Any) -> "NetworkConfig":
        """
        Build a config from the environment (and ~/.arbsend/.env if present).

        Explicit keyword overrides win; ``None`` overrides are ignored so
        CLI options can be passed straight through.
        """
        env_path = env_path or ARBSEND_ENV
        if env_path.exists():
            load_dotenv(env_path, override=False)

        values: dict[str, Any] = {
            "rpc_url": os.environ.get("ARBITRUM_SEPOLIA_RPC", DEFAULT_RPC_URL),
            "chain_id": int(os.environ.get("CHAIN_ID", str(DEFAULT_CHAIN_ID))),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
