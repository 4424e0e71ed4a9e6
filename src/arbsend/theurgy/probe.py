"""
Theurgy Probe - Read-only network queries.

- chain:   latest block number and chain ID check
- balance: ETH balance of an address
- token:   name() and totalSupply() of a WETH9-style contract
"""

from __future__ import annotations

import sys
from typing import Optional

import click

from ..config import NetworkConfig
from ..pneuma.abi import DEFAULT_TOKEN_ADDRESS, read_contract
from ..pneuma.errors import ParseError, TransferError
from ..pneuma.rpc import RpcClient
from ..utils import format_ether, parse_address

_rpc_url_option = click.option(
    "--rpc-url",
    envvar="ARBITRUM_SEPOLIA_RPC",
    default=None,
    help="Arbitrum Sepolia RPC URL",
)
_chain_id_option = click.option(
    "--chain-id", envvar="CHAIN_ID", type=int, default=None, help="Expected chain ID"
)


def _network(rpc_url: Optional[str], chain_id: Optional[int]) -> tuple[NetworkConfig, RpcClient]:
    try:
        config = NetworkConfig.from_env(rpc_url=rpc_url, chain_id=chain_id)
    except ValueError as exc:
        click.secho(f"ERROR: Invalid configuration: {exc}", fg="red")
        sys.exit(1)
    return config, RpcClient.from_config(config)


@click.command()
@_rpc_url_option
@_chain_id_option
def chain(rpc_url: Optional[str], chain_id: Optional[int]) -> None:
    """Show the latest block and confirm the chain ID."""
    config, network = _network(rpc_url, chain_id)

    try:
        block_number = network.get_block_number()
        actual_chain_id = network.get_chain_id()
    except TransferError as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(exc.exit_code)

    click.echo(f"  Latest block: {block_number}")
    click.echo(f"  Chain ID:     {actual_chain_id}")
    if actual_chain_id == config.chain_id:
        click.secho(f"  Connected to expected chain {config.chain_id}.", fg="green")
    else:
        click.secho(
            f"  WARNING: expected chain {config.chain_id}; this endpoint serves another network.",
            fg="yellow",
        )


@click.command()
@click.argument("address")
@_rpc_url_option
@_chain_id_option
def balance(address: str, rpc_url: Optional[str], chain_id: Optional[int]) -> None:
    """Show the ETH balance of ADDRESS."""
    try:
        checksummed = parse_address(address)
    except ParseError as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(exc.exit_code)

    _, network = _network(rpc_url, chain_id)
    try:
        wei = network.get_balance(checksummed)
    except TransferError as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(exc.exit_code)

    click.echo(f"  Address: {checksummed}")
    click.echo(f"  Balance: {format_ether(wei)} ETH ({wei} wei)")


@click.command()
@click.option(
    "--address",
    "token_address",
    default=DEFAULT_TOKEN_ADDRESS,
    show_default=True,
    help="Token contract address",
)
@_rpc_url_option
@_chain_id_option
def token(token_address: str, rpc_url: Optional[str], chain_id: Optional[int]) -> None:
    """Read name() and totalSupply() from a WETH9-style token."""
    try:
        checksummed = parse_address(token_address)
    except ParseError as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(exc.exit_code)

    _, network = _network(rpc_url, chain_id)
    try:
        name = read_contract(network, checksummed, "name")
        total_supply = read_contract(network, checksummed, "totalSupply")
    except TransferError as exc:
        click.secho(f"ERROR: Failed to read token: {exc}", fg="red")
        sys.exit(exc.exit_code)

    click.echo(f"  Contract:     {checksummed}")
    click.echo(f"  Name:         {name}")
    click.echo(f"  Total supply: {total_supply}")
