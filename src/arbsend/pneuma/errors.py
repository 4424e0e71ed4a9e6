"""
Error taxonomy for the transfer workflow.

Every stage raises one of these and never swallows it; the CLI maps
``exit_code`` onto the process exit status. A reverted transaction is an
outcome (see ``receipt.ReceiptStatus``), not an error.
"""

from __future__ import annotations

from typing import Any, Optional


class TransferError(RuntimeError):
    exit_code: int = 1


class ParseError(TransferError, ValueError):
    """Malformed address, amount, or credential. Never reaches the network."""

    exit_code = 2


class NetworkError(TransferError):
    """RPC call failed or returned malformed data."""

    exit_code = 3

    def __init__(
        self,
        message: str,
        *,
        method: Optional[str] = None,
        data: Any = None,
    ) -> None:
        super().__init__(message)
        self.method = method
        self.data = data


class InsufficientFundsError(TransferError):
    exit_code = 4

    def __init__(self, required: int, available: int) -> None:
        self.required = required
        self.available = available
        super().__init__(self._describe())

    def _describe(self) -> str:
        from ..utils import format_ether

        return (
            f"Insufficient funds: balance {format_ether(self.available)} ETH "
            f"({self.available} wei), required {format_ether(self.required)} ETH "
            f"({self.required} wei) including gas"
        )


class ConfirmationTimeout(TransferError):
    """Receipt not observed in time. The transaction may still confirm later."""

    exit_code = 5

    def __init__(self, tx_hash: str, timeout: float, cancelled: bool = False) -> None:
        self.tx_hash = tx_hash
        self.timeout = timeout
        self.cancelled = cancelled
        reason = "wait cancelled" if cancelled else f"not confirmed within {timeout:g}s"
        super().__init__(f"Transaction {tx_hash} {reason}; it may still confirm later")
