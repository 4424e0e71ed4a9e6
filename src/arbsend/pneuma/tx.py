"""
Transaction Builder - Build, sign, and send native-asset transfers.

Uses eth-account for signing and the httpx-based JSON-RPC client for
sending. Only EIP-1559 (type 2) plain value transfers are built; there
is no calldata and no gas estimation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

from eth_account.signers.local import LocalAccount
from eth_utils import to_hex
from loguru import logger

from ..config import NetworkConfig
from ..utils import UINT256_MAX
from .errors import NetworkError
from .fees import FeeQuote


class TxSink(Protocol):
    def get_nonce(self, address: str) -> int: ...

    def send_raw_transaction(self, raw_tx: str) -> str: ...


@dataclass(frozen=True)
class TransferRequest:
    """Unsigned transfer, immutable once built."""

    sender: str
    recipient: str
    value_wei: int
    gas_limit: int
    fee: FeeQuote
    chain_id: int

    def to_eth_tx(self, nonce: int) -> dict[str, Any]:
        """Render the type-2 transaction dict eth-account signs."""
        return {
            "type": 2,
            "chainId": self.chain_id,
            "nonce": nonce,
            "to": self.recipient,
            "value": self.value_wei,
            "gas": self.gas_limit,
            "maxFeePerGas": self.fee.max_fee_per_gas,
            "maxPriorityFeePerGas": self.fee.max_priority_fee_per_gas,
            "data": b"",
            "accessList": [],
        }


@dataclass(frozen=True)
class TransferHandle:
    """Broadcast transfer; ``tx_hash`` is what gets polled for a receipt."""

    tx_hash: str
    request: TransferRequest
    nonce: int


def build_transfer(
    sender: str,
    recipient: str,
    value_wei: int,
    fee: FeeQuote,
    config: NetworkConfig,
) -> TransferRequest:
    """
    Assemble a transfer from already-validated inputs.

    Addresses and amounts are parsed upstream (``utils.parse_address``,
    ``utils.parse_ether``); this only checks the request's own invariants.
    The gas limit is always the configured basic-transfer limit.
    """
    if not sender or not recipient:
        raise ValueError("sender and recipient are required")
    if isinstance(value_wei, bool) or not isinstance(value_wei, int):
        raise ValueError("value_wei must be an int")
    if not 0 <= value_wei <= UINT256_MAX:
        raise ValueError(f"value_wei out of uint256 range: {value_wei}")
    if fee is None:
        raise ValueError("fee quote is required")

    return TransferRequest(
        sender=sender,
        recipient=recipient,
        value_wei=value_wei,
        gas_limit=config.gas_limit,
        fee=fee,
        chain_id=config.chain_id,
    )


def broadcast_transfer(
    network: TxSink,
    request: TransferRequest,
    account: LocalAccount,
) -> TransferHandle:
    """
    Sign a transfer and submit it. Never retried.

    Args:
        network: RPC collaborator
        request: Transfer to send
        account: Signing account; must match ``request.sender``

    Returns:
        TransferHandle for confirmation polling

    Raises:
        ValueError: If the account does not control ``request.sender``
        NetworkError: If the node rejects or mangles the submission
    """
    if account.address.lower() != request.sender.lower():
        raise ValueError(
            f"Signing key controls {account.address}, not sender {request.sender}"
        )

    nonce = network.get_nonce(request.sender)
    signed = account.sign_transaction(request.to_eth_tx(nonce))
    raw_tx = to_hex(signed.raw_transaction)
    local_hash = to_hex(signed.hash)

    logger.info(f"Broadcasting {request.value_wei} wei to {request.recipient} (nonce {nonce})")
    tx_hash = network.send_raw_transaction(raw_tx)

    if tx_hash.lower() != local_hash.lower():
        raise NetworkError(
            f"Node returned hash {tx_hash}, expected {local_hash}",
            method="eth_sendRawTransaction",
        )

    logger.info(f"Broadcast accepted: {tx_hash}")
    return TransferHandle(tx_hash=tx_hash, request=request, nonce=nonce)
