"""
JSON-RPC Client for EVM rollups (Arbitrum Sepolia by default).

Lightweight alternative to web3.py: uses httpx for HTTP.
Every failure, whether transport, HTTP status, JSON-RPC error member or
malformed result, surfaces as ``NetworkError`` carrying the method name
and the node's raw message.
"""

from __future__ import annotations

import itertools
from typing import Any, Optional

import httpx
from loguru import logger

from ..config import NetworkConfig
from ..utils import parse_hex_quantity
from .errors import NetworkError


class RpcClient:
    """Synchronous JSON-RPC client bound to one endpoint."""

    def __init__(
        self,
        rpc_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.rpc_url = rpc_url
        self.timeout = timeout
        self._transport = transport
        self._ids = itertools.count(1)

    @classmethod
    def from_config(cls, config: NetworkConfig, **kwargs: Any) -> "RpcClient":
        return cls(config.rpc_url, timeout=config.http_timeout, **kwargs)

    def _client(self) -> httpx.Client:
        return httpx.Client(timeout=self.timeout, transport=self._transport)

    def call_raw(self, method: str, params: Optional[list] = None) -> Any:
        """
        Make a JSON-RPC call.

        Args:
            method: RPC method name (e.g., "eth_call")
            params: RPC parameters

        Returns:
            Result field from the RPC response

        Raises:
            NetworkError: If the call fails for any reason
        """
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params or [],
            "id": next(self._ids),
        }
        logger.debug(f"rpc -> {method}")

        try:
            with self._client() as client:
                response = client.post(self.rpc_url, json=payload)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as exc:
            raise NetworkError(
                f"{method} failed: HTTP {exc.response.status_code} {exc.response.text[:200]}",
                method=method,
            ) from exc
        except httpx.HTTPError as exc:
            raise NetworkError(f"{method} failed: {exc}", method=method) from exc
        except ValueError as exc:
            raise NetworkError(f"{method} returned a non-JSON body", method=method) from exc

        if not isinstance(data, dict):
            raise NetworkError(f"{method} returned malformed response: {data!r}", method=method)

        if data.get("error") is not None:
            err = data["error"]
            message = err.get("message", err) if isinstance(err, dict) else err
            raise NetworkError(f"RPC error calling {method}: {message}", method=method, data=err)

        return data.get("result")

    def _quantity(self, method: str, params: Optional[list] = None) -> int:
        result = self.call_raw(method, params)
        try:
            return parse_hex_quantity(result)
        except ValueError:
            raise NetworkError(
                f"{method} returned malformed quantity: {result!r}", method=method
            ) from None

    # --- Read calls

    def get_chain_id(self) -> int:
        return self._quantity("eth_chainId")

    def get_block_number(self) -> int:
        return self._quantity("eth_blockNumber")

    def get_balance(self, address: str) -> int:
        """Balance in wei at the latest block."""
        return self._quantity("eth_getBalance", [address, "latest"])

    def get_nonce(self, address: str) -> int:
        """Next nonce for ``address``, counting pending transactions."""
        return self._quantity("eth_getTransactionCount", [address, "pending"])

    def get_max_priority_fee(self) -> int:
        """Suggested priority fee per gas in wei."""
        return self._quantity("eth_maxPriorityFeePerGas")

    def get_latest_base_fee(self) -> int:
        """
        Base fee per gas of the latest block in wei.

        Returns 0 when the block carries no ``baseFeePerGas``.
        """
        block = self.call_raw("eth_getBlockByNumber", ["latest", False])
        if not isinstance(block, dict):
            raise NetworkError(
                "eth_getBlockByNumber returned no latest block", method="eth_getBlockByNumber"
            )
        base_fee = block.get("baseFeePerGas")
        if base_fee is None:
            return 0
        try:
            return parse_hex_quantity(base_fee)
        except ValueError:
            raise NetworkError(
                f"Malformed baseFeePerGas: {base_fee!r}", method="eth_getBlockByNumber"
            ) from None

    def get_receipt(self, tx_hash: str) -> Optional[dict]:
        """Transaction receipt, or None while the transaction is pending."""
        receipt = self.call_raw("eth_getTransactionReceipt", [tx_hash])
        if receipt is not None and not isinstance(receipt, dict):
            raise NetworkError(
                f"Malformed receipt for {tx_hash}: {receipt!r}",
                method="eth_getTransactionReceipt",
            )
        return receipt

    def call(self, to: str, data: str, block: str = "latest") -> str:
        """Read-only contract call (eth_call); returns hex return data."""
        result = self.call_raw("eth_call", [{"to": to, "data": data}, block])
        if result is not None and not isinstance(result, str):
            raise NetworkError(f"eth_call returned malformed data: {result!r}", method="eth_call")
        return result or "0x"

    # --- Write calls

    def send_raw_transaction(self, raw_tx: str) -> str:
        """
        Send a signed raw transaction.

        Args:
            raw_tx: 0x-prefixed hex encoded signed transaction

        Returns:
            Transaction hash (0x-prefixed hex)
        """
        tx_hash = self.call_raw("eth_sendRawTransaction", [raw_tx])
        if not isinstance(tx_hash, str) or not tx_hash.startswith("0x"):
            raise NetworkError(
                f"eth_sendRawTransaction returned malformed hash: {tx_hash!r}",
                method="eth_sendRawTransaction",
            )
        return tx_hash
