"""
Theurgy Transfer - Send native ETH and wait for confirmation.

Flow (each stage fails fast, nothing is retried):
1. Parse recipient, amount and signing key (ParseError, before any RPC)
2. Verify the endpoint serves the configured chain
3. Quote EIP-1559 fees
4. Read the sender balance fresh and guard value + worst-case fee
5. Build, sign and broadcast the transfer
6. Poll for the receipt (bounded by --timeout)
"""

from __future__ import annotations

import sys
import threading
from dataclasses import dataclass
from typing import Optional, Protocol

import click
from eth_account.signers.local import LocalAccount
from loguru import logger

from ..config import NetworkConfig
from ..pneuma.errors import NetworkError, ParseError, TransferError
from ..pneuma.fees import FeeQuote, check_balance, estimate_fees, fee_breakdown
from ..pneuma.receipt import TransferReceipt, wait_for_confirmation
from ..pneuma.rpc import RpcClient
from ..pneuma.tx import TransferHandle, TransferRequest, broadcast_transfer, build_transfer
from ..sigil.eth import load_private_key, parse_signing_key
from ..utils import format_ether, parse_address, parse_ether

EXIT_REVERTED = 6


class Network(Protocol):
    def get_chain_id(self) -> int: ...

    def get_balance(self, address: str) -> int: ...

    def get_max_priority_fee(self) -> int: ...

    def get_latest_base_fee(self) -> int: ...

    def get_nonce(self, address: str) -> int: ...

    def send_raw_transaction(self, raw_tx: str) -> str: ...

    def get_receipt(self, tx_hash: str) -> Optional[dict]: ...


@dataclass(frozen=True)
class PreparedTransfer:
    """A guarded, unsigned transfer plus the reads that justified it."""

    request: TransferRequest
    quote: FeeQuote
    balance: int
    required: int


@dataclass(frozen=True)
class TransferOutcome:
    request: TransferRequest
    handle: TransferHandle
    receipt: Optional[TransferReceipt] = None


def verify_chain(network: Network, config: NetworkConfig) -> int:
    """
    Confirm the endpoint serves ``config.chain_id``.

    Raises:
        NetworkError: On mismatch, since signing for the wrong chain
            would produce an unusable transaction
    """
    chain_id = network.get_chain_id()
    if chain_id != config.chain_id:
        raise NetworkError(
            f"Endpoint {config.rpc_url} serves chain {chain_id}, expected {config.chain_id}",
            method="eth_chainId",
        )
    return chain_id


def prepare_transfer(
    network: Network,
    sender: str,
    recipient: str,
    value_wei: int,
    config: NetworkConfig,
) -> PreparedTransfer:
    """
    Run every read and check that must precede a broadcast.

    Raises:
        NetworkError: If any read fails
        InsufficientFundsError: If the balance cannot cover value + fee
    """
    verify_chain(network, config)
    quote = estimate_fees(network, config)

    balance = network.get_balance(sender)
    required = check_balance(balance, value_wei, quote, config.gas_limit)

    request = build_transfer(sender, recipient, value_wei, quote, config)
    return PreparedTransfer(request=request, quote=quote, balance=balance, required=required)


def execute_transfer(
    network: Network,
    account: LocalAccount,
    recipient: str,
    value_wei: int,
    config: NetworkConfig,
    wait: bool = True,
    cancel: Optional[threading.Event] = None,
) -> TransferOutcome:
    """
    Quote, guard, broadcast and (optionally) confirm one transfer.

    Returns:
        TransferOutcome; ``receipt`` is None when ``wait`` is False.
        A reverted transfer is returned with ``ReceiptStatus.REVERTED``.
    """
    prepared = prepare_transfer(network, account.address, recipient, value_wei, config)
    handle = broadcast_transfer(network, prepared.request, account)

    receipt = None
    if wait:
        receipt = wait_for_confirmation(
            network,
            handle,
            timeout=config.receipt_timeout,
            poll_interval=config.poll_interval,
            cancel=cancel,
        )
    return TransferOutcome(request=prepared.request, handle=handle, receipt=receipt)


def _fail(exc: TransferError) -> None:
    click.secho(f"ERROR: {exc}", fg="red")
    sys.exit(exc.exit_code)


@click.command()
@click.option("--to", "recipient", required=True, help="Recipient address (0x...)")
@click.option("--amount", required=True, help="Amount in ETH, e.g. 0.001")
@click.option("--wait/--no-wait", default=True, help="Wait for the receipt")
@click.option("--timeout", type=float, default=None, help="Receipt wait timeout in seconds")
@click.option(
    "--rpc-url",
    envvar="ARBITRUM_SEPOLIA_RPC",
    default=None,
    help="Arbitrum Sepolia RPC URL",
)
@click.option("--chain-id", envvar="CHAIN_ID", type=int, default=None, help="Expected chain ID")
def send(
    recipient: str,
    amount: str,
    wait: bool,
    timeout: Optional[float],
    rpc_url: Optional[str],
    chain_id: Optional[int],
) -> None:
    """
    Send ETH to an address.

    The signing key is read from PRIVATE_KEY (environment or
    ~/.arbsend/.env). Sender pays gas.
    """
    click.echo("=== Arbsend Transfer ===")
    click.echo("")

    # 1. Parse everything before touching the network
    try:
        to_address = parse_address(recipient)
        value_wei = parse_ether(amount)
        account = parse_signing_key(load_private_key())
    except ParseError as exc:
        _fail(exc)
    except ValueError as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(ParseError.exit_code)

    try:
        config = NetworkConfig.from_env(
            rpc_url=rpc_url, chain_id=chain_id, receipt_timeout=timeout
        )
    except ValueError as exc:
        click.secho(f"ERROR: Invalid configuration: {exc}", fg="red")
        sys.exit(1)

    click.echo(f"  Sender:    {account.address}")
    click.echo(f"  Recipient: {to_address}")
    click.echo(f"  Amount:    {format_ether(value_wei)} ETH ({value_wei} wei)")
    click.echo("")

    network = RpcClient.from_config(config)

    # 2-4. Reads and guards
    try:
        prepared = prepare_transfer(network, account.address, to_address, value_wei, config)
    except TransferError as exc:
        _fail(exc)

    click.echo("  Gas:")
    for label, value in fee_breakdown(prepared.quote, prepared.request.gas_limit):
        click.echo(f"    {label + ':':<17} {value}")
    click.secho(f"  Balance OK: {format_ether(prepared.balance)} ETH", fg="green")
    click.echo("")

    # 5. Broadcast
    try:
        handle = broadcast_transfer(network, prepared.request, account)
    except TransferError as exc:
        _fail(exc)

    click.echo(f"  Broadcast! TX: {handle.tx_hash}")

    if not wait:
        click.echo("  Not waiting for confirmation (--no-wait).")
        return

    # 6. Confirmation
    click.echo(f"  Waiting for receipt (up to {config.receipt_timeout:g}s)...")
    try:
        receipt = wait_for_confirmation(
            network,
            handle,
            timeout=config.receipt_timeout,
            poll_interval=config.poll_interval,
        )
    except TransferError as exc:
        _fail(exc)

    click.echo("")
    if receipt.succeeded:
        click.secho(f"SUCCESS: Transfer confirmed in block {receipt.block_number}", fg="green")
        click.echo(f"  Sent {format_ether(value_wei)} ETH to {to_address}")
        if receipt.fee_paid is not None:
            click.echo(f"  Fee paid: {format_ether(receipt.fee_paid)} ETH")
    else:
        logger.warning(f"{handle.tx_hash} reverted")
        click.secho("FAILED: Transaction reverted", fg="red")
        click.echo(f"  TX: {handle.tx_hash}")
        sys.exit(EXIT_REVERTED)
