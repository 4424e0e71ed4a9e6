"""
Signing key loading for arbsend.

The key is supplied out-of-band: the PRIVATE_KEY environment variable, or
~/.arbsend/.env (hex format). It is never accepted on the command line and
never printed or logged.

Dependencies: eth-account (no full web3.py needed)
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from eth_account import Account
from eth_account.signers.local import LocalAccount

from ..config import ARBSEND_ENV
from ..pneuma.errors import ParseError


def load_private_key(env_path: Optional[Path] = None) -> str:
    """
    Load private key from the environment or a .env file.

    Args:
        env_path: Path to .env file (default: ~/.arbsend/.env)

    Returns:
        0x-prefixed hex private key

    Raises:
        ValueError: If PRIVATE_KEY is not set anywhere
    """
    env_path = env_path or ARBSEND_ENV

    if env_path.exists():
        load_dotenv(env_path, override=False)

    private_key = os.environ.get("PRIVATE_KEY", "").strip()
    if not private_key:
        raise ValueError(
            f"PRIVATE_KEY not found. Export PRIVATE_KEY=0x... or add it to {env_path}"
        )

    # Ensure 0x prefix
    if not private_key.startswith("0x"):
        private_key = "0x" + private_key

    return private_key


def parse_signing_key(private_key: str) -> LocalAccount:
    """
    Parse a hex private key into an eth-account LocalAccount.

    Raises:
        ParseError: If the key is not a valid secp256k1 private key.
            The key itself is never included in the message.
    """
    try:
        return Account.from_key(private_key)
    except (ValueError, TypeError) as exc:
        raise ParseError(
            f"Invalid signing key ({type(exc).__name__}); expected 32-byte hex"
        ) from None


def get_account(private_key: Optional[str] = None) -> LocalAccount:
    """
    Get an eth-account LocalAccount from a private key.

    Args:
        private_key: 0x-prefixed hex private key.
                     If None, loads from the environment / .env.

    Returns:
        LocalAccount instance for signing transactions
    """
    if private_key is None:
        private_key = load_private_key()
    return parse_signing_key(private_key)


def get_address(private_key: Optional[str] = None) -> str:
    """Get the checksummed address for a private key."""
    return get_account(private_key).address
