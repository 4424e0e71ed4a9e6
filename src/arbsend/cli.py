"""
Arbsend CLI

Command-line interface for reading from and sending ETH on an EVM rollup
(Arbitrum Sepolia by default).

Commands:
  chain    - Show latest block and confirm chain ID
  balance  - Show an address's ETH balance
  token    - Read name() / totalSupply() from a token contract
  fees     - Estimate the fee of a basic transfer
  send     - Send ETH and wait for confirmation
  whoami   - Show the signing key's address
  info     - Show configuration
"""

from __future__ import annotations

import sys

import click
from loguru import logger

from .config import NetworkConfig
from .sigil.eth import get_address, load_private_key
from .pneuma.errors import ParseError


# ============ Constants ============

VERSION = "0.1.0"


# ============ Logging ============


def configure_logging(verbose: bool = False) -> None:
    """Route loguru to stderr; WARNING by default, DEBUG with --verbose."""
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "WARNING",
        format="<dim>{time:HH:mm:ss}</dim> <level>{level: <7}</level> {message}",
    )


# ============ Main CLI Group ============


@click.group(invoke_without_command=True)
@click.version_option(version=VERSION, prog_name="arbsend")
@click.option("--verbose", "-v", is_flag=True, help="Log RPC and workflow details to stderr")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Arbsend: ETH transfers on EVM rollups."""
    configure_logging(verbose)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# ============ Top-level Commands ============

from .theurgy.gas import fees
from .theurgy.probe import balance, chain, token
from .theurgy.transfer import send

cli.add_command(chain)
cli.add_command(balance)
cli.add_command(token)
cli.add_command(fees)
cli.add_command(send)


# ============ Identity ============


@cli.command()
def whoami() -> None:
    """Show the address of the configured signing key."""
    try:
        address = get_address(load_private_key())
    except ParseError as exc:
        click.echo(f"{exc}")
        sys.exit(exc.exit_code)
    except (ValueError, FileNotFoundError):
        click.echo("No signing key found.")
        click.echo("Export PRIVATE_KEY=0x... or add it to ~/.arbsend/.env.")
        sys.exit(1)
    click.echo(f"Address: {address}")


# ============ Info ============


@cli.command()
def info() -> None:
    """Show effective configuration."""
    try:
        config = NetworkConfig.from_env()
    except ValueError as exc:
        click.secho(f"ERROR: Invalid configuration: {exc}", fg="red")
        sys.exit(1)

    click.secho("  Configuration ──────────────────────────", fg="cyan")
    click.echo(click.style("  RPC URL:      ", dim=True) + config.rpc_url)
    click.echo(click.style("  Chain ID:     ", dim=True) + str(config.chain_id))
    click.echo(click.style("  Gas limit:    ", dim=True) + str(config.gas_limit))
    click.echo(click.style("  Fee buffer:   ", dim=True) + f"{config.fee_buffer_wei} wei")
    click.echo(click.style("  Receipt wait: ", dim=True) + f"{config.receipt_timeout:g}s")

    try:
        address = get_address(load_private_key())
        key_text = click.style(address, fg="bright_white")
    except ParseError as exc:
        key_text = click.style(f"invalid ({exc})", fg="red")
    except (ValueError, FileNotFoundError):
        key_text = click.style("not configured", fg="yellow") + click.style(
            "  (export PRIVATE_KEY)", dim=True
        )
    click.echo(click.style("  Signer:       ", dim=True) + key_text)
    click.echo("")


# ============ Entry Points ============


def main() -> None:
    """Arbsend CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
