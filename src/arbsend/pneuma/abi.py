"""
ABI Loader - Bundled contract ABIs plus eth-abi call encoding.

ABIs ship inside the package under ``pneuma/abis/<Name>.json`` in the
Foundry artifact shape (``{"abi": [...]}``).
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional, Protocol

from eth_abi import decode, encode
from eth_utils import keccak

from .errors import NetworkError

ABI_DIR = Path(__file__).resolve().parent / "abis"

# WETH9 deployment on Arbitrum Sepolia
DEFAULT_TOKEN_ADDRESS = "0x3031a6d5d9648ba5f50f656cd4a1672e1167a34a"


class ContractCaller(Protocol):
    def call(self, to: str, data: str, block: str = "latest") -> str: ...


@lru_cache(maxsize=16)
def load_abi(contract_name: str) -> list[dict[str, Any]]:
    """
    Load a bundled ABI.

    Args:
        contract_name: Contract name (e.g., "IWETH9")

    Raises:
        FileNotFoundError: If no ABI is bundled under that name
    """
    abi_path = ABI_DIR / f"{contract_name}.json"
    if not abi_path.exists():
        raise FileNotFoundError(f"ABI not found: {abi_path}")

    with abi_path.open("r", encoding="utf-8") as f:
        artifact = json.load(f)

    return artifact["abi"]


def _find_function(abi: list, function_name: str) -> dict:
    for entry in abi:
        if entry.get("type") == "function" and entry.get("name") == function_name:
            return entry
    raise ValueError(f"Function {function_name} not found in ABI")


def encode_call(abi: list, function_name: str, args: Optional[list] = None) -> str:
    """ABI-encode a function call to 0x-prefixed hex calldata."""
    func = _find_function(abi, function_name)
    input_types = [inp["type"] for inp in func.get("inputs", [])]
    sig = f"{function_name}({','.join(input_types)})"

    # Keccak-256, not NIST SHA3-256
    selector = keccak(text=sig)[:4]
    encoded_args = encode(input_types, args) if args else b""

    return "0x" + selector.hex() + encoded_args.hex()


def decode_result(abi: list, function_name: str, data: str) -> Any:
    """
    ABI-decode a call result.

    Returns:
        A single value when the function has one output, else a tuple
    """
    func = _find_function(abi, function_name)
    output_types = [out["type"] for out in func.get("outputs", [])]
    if not output_types:
        return None

    raw = bytes.fromhex(data[2:] if data.startswith("0x") else data)
    decoded = decode(output_types, raw)

    if len(decoded) == 1:
        return decoded[0]
    return decoded


def read_contract(
    network: ContractCaller,
    contract_address: str,
    function_name: str,
    args: Optional[list] = None,
    contract_name: str = "IWETH9",
) -> Any:
    """
    Read from a contract (eth_call) and decode the result.

    Raises:
        NetworkError: If the call fails or returns undecodable data
    """
    abi = load_abi(contract_name)
    calldata = encode_call(abi, function_name, args)
    result = network.call(contract_address, calldata)

    if result == "0x":
        raise NetworkError(
            f"{function_name}() returned no data; is {contract_address} a contract?",
            method="eth_call",
        )
    try:
        return decode_result(abi, function_name, result)
    except Exception as exc:
        raise NetworkError(
            f"Could not decode {function_name}() result: {exc}", method="eth_call"
        ) from exc
