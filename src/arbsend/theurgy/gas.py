"""
Theurgy Gas - Show the fee quote for one basic transfer.

Read-only: quotes fees exactly as ``send`` would, without a key and
without broadcasting anything.
"""

from __future__ import annotations

import sys
from typing import Optional

import click

from ..config import NetworkConfig
from ..pneuma.errors import TransferError
from ..pneuma.fees import estimate_fees, estimate_transfer_cost, fee_breakdown
from ..pneuma.rpc import RpcClient
from ..utils import format_ether


@click.command()
@click.option(
    "--rpc-url",
    envvar="ARBITRUM_SEPOLIA_RPC",
    default=None,
    help="Arbitrum Sepolia RPC URL",
)
@click.option("--chain-id", envvar="CHAIN_ID", type=int, default=None, help="Expected chain ID")
def fees(rpc_url: Optional[str], chain_id: Optional[int]) -> None:
    """Estimate the fee of a basic ETH transfer."""
    try:
        config = NetworkConfig.from_env(rpc_url=rpc_url, chain_id=chain_id)
    except ValueError as exc:
        click.secho(f"ERROR: Invalid configuration: {exc}", fg="red")
        sys.exit(1)
    network = RpcClient.from_config(config)

    try:
        quote = estimate_fees(network, config)
    except TransferError as exc:
        click.secho(f"ERROR: Failed to read fees: {exc}", fg="red")
        sys.exit(exc.exit_code)

    click.echo(f"Current gas (chain {config.chain_id}):")
    for label, value in fee_breakdown(quote, config.gas_limit):
        click.echo(f"  {label + ':':<17} {value}")

    cost = estimate_transfer_cost(quote.max_fee_per_gas, config.gas_limit)
    click.echo("")
    click.echo(f"Estimated basic transfer fee ~ {format_ether(cost)} ETH ({cost} wei)")
