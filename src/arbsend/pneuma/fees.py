"""
Fee Estimation and Balance Guard.

EIP-1559 quote for a basic transfer:

    max_fee_per_gas = base_fee * 2 + priority_fee + buffer

Doubling the base fee absorbs consecutive base-fee increases on the rollup;
the fixed buffer (0.1 gwei by default) covers growth between quote and
inclusion. All arithmetic saturates at 2**256 - 1 instead of wrapping: a
quote is an advisory input to the balance guard, not final truth.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from loguru import logger

from ..config import NetworkConfig
from ..utils import (
    UINT256_MAX,
    format_ether,
    format_gwei,
    saturating_add,
    saturating_mul,
)
from .errors import InsufficientFundsError, NetworkError


class FeeSource(Protocol):
    def get_max_priority_fee(self) -> int: ...

    def get_latest_base_fee(self) -> int: ...


@dataclass(frozen=True)
class FeeQuote:
    """
    Per-gas fee caps for one transfer attempt, in wei.

    Attributes:
        max_fee_per_gas: Total cap per gas (base fee + tip)
        max_priority_fee_per_gas: Tip cap per gas
        base_fee: Latest base fee the quote was derived from
    """

    max_fee_per_gas: int
    max_priority_fee_per_gas: int
    base_fee: int = 0

    def __post_init__(self) -> None:
        for name in ("max_fee_per_gas", "max_priority_fee_per_gas", "base_fee"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"{name} must be an int")
            if not 0 <= value <= UINT256_MAX:
                raise ValueError(f"{name} out of uint256 range: {value}")
        if self.max_priority_fee_per_gas > self.max_fee_per_gas:
            raise ValueError("max_priority_fee_per_gas exceeds max_fee_per_gas")


def compute_max_fee(base_fee: int, priority_fee: int, buffer_wei: int) -> int:
    """``base_fee * 2 + priority_fee + buffer_wei``, saturating."""
    return saturating_add(saturating_mul(base_fee, 2), priority_fee, buffer_wei)


def _checked_fee(name: str, value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= UINT256_MAX:
        raise NetworkError(f"Node reported an invalid {name}: {value!r}")
    return value


def estimate_fees(network: FeeSource, config: NetworkConfig) -> FeeQuote:
    """
    Derive a fee quote from the network's suggested priority fee and the
    latest block's base fee.

    Raises:
        NetworkError: If either read fails or returns an out-of-range value
    """
    priority_fee = _checked_fee("priority fee", network.get_max_priority_fee())
    base_fee = _checked_fee("base fee", network.get_latest_base_fee())

    quote = FeeQuote(
        max_fee_per_gas=compute_max_fee(base_fee, priority_fee, config.fee_buffer_wei),
        max_priority_fee_per_gas=priority_fee,
        base_fee=base_fee,
    )
    logger.debug(
        f"Fee quote: base={base_fee} priority={priority_fee} "
        f"max={quote.max_fee_per_gas} wei"
    )
    return quote


def estimate_transfer_cost(max_fee_per_gas: int, gas_limit: int) -> int:
    """Worst-case fee in wei for ``gas_limit`` gas."""
    return saturating_mul(max_fee_per_gas, gas_limit)


def check_balance(balance: int, value_wei: int, quote: FeeQuote, gas_limit: int) -> int:
    """
    Require ``balance >= value_wei + max_fee_per_gas * gas_limit``.

    Returns:
        The required total in wei

    Raises:
        InsufficientFundsError: If the balance does not cover the total
    """
    estimated_fee = estimate_transfer_cost(quote.max_fee_per_gas, gas_limit)
    required = saturating_add(value_wei, estimated_fee)
    if balance < required:
        logger.warning(f"Balance {balance} wei below required {required} wei")
        raise InsufficientFundsError(required=required, available=balance)
    logger.debug(f"Balance {balance} wei covers required {required} wei")
    return required


def fee_breakdown(quote: FeeQuote, gas_limit: int) -> list[tuple[str, str]]:
    """Label/value rows describing a quote for display."""
    cost = estimate_transfer_cost(quote.max_fee_per_gas, gas_limit)
    return [
        ("Max Fee per Gas", f"{quote.max_fee_per_gas} wei ({format_gwei(quote.max_fee_per_gas)} gwei)"),
        (
            "Priority Fee",
            f"{quote.max_priority_fee_per_gas} wei "
            f"({format_gwei(quote.max_priority_fee_per_gas)} gwei)",
        ),
        ("Base Fee", f"{quote.base_fee} wei ({format_gwei(quote.base_fee)} gwei)"),
        ("Gas Limit", str(gas_limit)),
        ("Estimated Cost", f"{format_ether(cost)} ETH ({cost} wei)"),
    ]
