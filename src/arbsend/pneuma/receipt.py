"""
Confirmation Waiter - Poll for and interpret a transfer's receipt.

    BROADCAST -> PENDING -> CONFIRMED | REVERTED

A reverted transfer is a completed-but-failed outcome (it consumed gas and
occupies a block), so it is returned, not raised. Only malformed receipts
and timeouts raise.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Protocol

from loguru import logger

from ..utils import parse_hex_quantity
from .errors import ConfirmationTimeout, NetworkError
from .tx import TransferHandle


class ReceiptSource(Protocol):
    def get_receipt(self, tx_hash: str) -> Optional[dict]: ...


class ReceiptStatus(str, Enum):
    SUCCESS = "success"
    REVERTED = "reverted"


class TransferState(str, Enum):
    BROADCAST = "broadcast"
    PENDING = "pending"
    CONFIRMED = "confirmed"
    REVERTED = "reverted"


@dataclass(frozen=True)
class TransferReceipt:
    tx_hash: str
    block_number: Optional[int]
    status: ReceiptStatus
    gas_used: Optional[int] = None
    effective_gas_price: Optional[int] = None

    @property
    def succeeded(self) -> bool:
        return self.status is ReceiptStatus.SUCCESS

    @property
    def state(self) -> TransferState:
        return TransferState.CONFIRMED if self.succeeded else TransferState.REVERTED

    @property
    def fee_paid(self) -> Optional[int]:
        if self.gas_used is None or self.effective_gas_price is None:
            return None
        return self.gas_used * self.effective_gas_price


def _optional_quantity(raw: dict, key: str, tx_hash: str) -> Optional[int]:
    value = raw.get(key)
    if value is None:
        return None
    try:
        return parse_hex_quantity(value)
    except ValueError:
        raise NetworkError(
            f"Receipt for {tx_hash} has malformed {key}: {value!r}",
            method="eth_getTransactionReceipt",
        ) from None


def interpret_receipt(tx_hash: str, raw: dict) -> TransferReceipt:
    """
    Map a raw JSON-RPC receipt onto a TransferReceipt.

    Raises:
        NetworkError: If the receipt has no status, or reports success
            without an inclusion block
    """
    status_flag = _optional_quantity(raw, "status", tx_hash)
    if status_flag is None:
        raise NetworkError(
            f"Receipt for {tx_hash} has no status field", method="eth_getTransactionReceipt"
        )
    status = ReceiptStatus.SUCCESS if status_flag == 1 else ReceiptStatus.REVERTED
    block_number = _optional_quantity(raw, "blockNumber", tx_hash)

    if status is ReceiptStatus.SUCCESS and block_number is None:
        raise NetworkError(
            f"Receipt for {tx_hash} reports success but carries no blockNumber",
            method="eth_getTransactionReceipt",
        )

    return TransferReceipt(
        tx_hash=tx_hash,
        block_number=block_number,
        status=status,
        gas_used=_optional_quantity(raw, "gasUsed", tx_hash),
        effective_gas_price=_optional_quantity(raw, "effectiveGasPrice", tx_hash),
    )


def wait_for_confirmation(
    network: ReceiptSource,
    handle: TransferHandle,
    timeout: float = 120.0,
    poll_interval: float = 2.0,
    cancel: Optional[threading.Event] = None,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> TransferReceipt:
    """
    Wait for a transaction receipt.

    Args:
        network: RPC collaborator
        handle: Handle returned by the broadcaster
        timeout: Maximum wait time in seconds
        poll_interval: Polling interval in seconds
        cancel: Optional event that aborts the wait when set

    Returns:
        TransferReceipt (SUCCESS or REVERTED)

    Raises:
        ConfirmationTimeout: If no receipt appears within ``timeout``
            or ``cancel`` is set
        NetworkError: If polling fails or the receipt is malformed
    """
    tx_hash = handle.tx_hash
    start = clock()
    attempt = 0

    while True:
        if cancel is not None and cancel.is_set():
            raise ConfirmationTimeout(tx_hash, clock() - start, cancelled=True)

        attempt += 1
        raw = network.get_receipt(tx_hash)
        if raw is not None:
            receipt = interpret_receipt(tx_hash, raw)
            logger.info(f"{tx_hash} {receipt.state.value} in block {receipt.block_number}")
            return receipt

        elapsed = clock() - start
        if elapsed >= timeout:
            raise ConfirmationTimeout(tx_hash, timeout)
        logger.debug(f"{tx_hash} pending (poll {attempt}, {elapsed:.1f}s elapsed)")

        delay = min(poll_interval, timeout - elapsed)
        if cancel is not None:
            cancel.wait(delay)
        else:
            sleep(delay)
