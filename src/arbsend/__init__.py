__all__ = [
    # Configuration
    "NetworkConfig",
    # Errors
    "TransferError",
    "ParseError",
    "NetworkError",
    "InsufficientFundsError",
    "ConfirmationTimeout",
    # Network
    "RpcClient",
    # Fees
    "FeeQuote",
    "estimate_fees",
    "estimate_transfer_cost",
    "check_balance",
    # Transfers
    "TransferRequest",
    "TransferHandle",
    "build_transfer",
    "broadcast_transfer",
    # Receipts
    "ReceiptStatus",
    "TransferReceipt",
    "wait_for_confirmation",
    # Workflow
    "TransferOutcome",
    "prepare_transfer",
    "execute_transfer",
    # Units
    "format_ether",
    "format_gwei",
    "parse_ether",
    "parse_address",
]

from .config import NetworkConfig
from .pneuma.errors import (
    ConfirmationTimeout,
    InsufficientFundsError,
    NetworkError,
    ParseError,
    TransferError,
)
from .pneuma.fees import FeeQuote, check_balance, estimate_fees, estimate_transfer_cost
from .pneuma.receipt import ReceiptStatus, TransferReceipt, wait_for_confirmation
from .pneuma.rpc import RpcClient
from .pneuma.tx import TransferHandle, TransferRequest, broadcast_transfer, build_transfer
from .theurgy.transfer import TransferOutcome, execute_transfer, prepare_transfer
from .utils import format_ether, format_gwei, parse_address, parse_ether
