from __future__ import annotations

from decimal import Decimal, Inexact, InvalidOperation, localcontext

from eth_utils import is_address, is_checksum_address, remove_0x_prefix, to_checksum_address

from .pneuma.errors import ParseError

UINT256_MAX = 2**256 - 1

WEI_PER_GWEI = 10**9
WEI_PER_ETHER = 10**18


def _check_uint256(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"Expected int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"uint256 cannot be negative: {value}")
    return value


def saturating_add(*values: int) -> int:
    """Sum uint256 values, clamping at UINT256_MAX instead of wrapping."""
    total = 0
    for value in values:
        total += _check_uint256(value)
        if total >= UINT256_MAX:
            return UINT256_MAX
    return total


def saturating_mul(a: int, b: int) -> int:
    """Multiply uint256 values, clamping at UINT256_MAX instead of wrapping."""
    product = _check_uint256(a) * _check_uint256(b)
    return min(product, UINT256_MAX)


def format_gwei(wei: int) -> str:
    """Render wei as gwei with 4 decimals. Truncates, never rounds up."""
    _check_uint256(wei)
    gwei_int = wei // WEI_PER_GWEI
    fraction = (wei % WEI_PER_GWEI) * 10**4 // WEI_PER_GWEI
    return f"{gwei_int}.{fraction:04d}"


def format_ether(wei: int) -> str:
    """Render wei as ether with all 18 decimals."""
    _check_uint256(wei)
    whole, frac = divmod(wei, WEI_PER_ETHER)
    return f"{whole}.{frac:018d}"


def parse_ether(amount: str) -> int:
    """
    Parse a decimal ether amount (e.g. "0.001") into wei.

    Conversion is exact: amounts finer than 1 wei are rejected rather than
    truncated.

    Raises:
        ParseError: If the amount is not a non-negative decimal number
            representable in wei.
    """
    text = amount.strip() if isinstance(amount, str) else ""
    try:
        value = Decimal(text)
    except InvalidOperation:
        raise ParseError(f"Amount must be a decimal number of ether, got {amount!r}") from None

    if not value.is_finite():
        raise ParseError(f"Amount must be finite, got {amount!r}")
    if value < 0:
        raise ParseError(f"Amount cannot be negative, got {amount!r}")
    # 10**60 ether is already past uint256 wei
    if value and value.adjusted() >= 60:
        raise ParseError(f"Amount {amount!r} exceeds uint256")

    with localcontext() as ctx:
        ctx.prec = 100
        ctx.traps[Inexact] = True
        try:
            wei = value * WEI_PER_ETHER
        except Inexact:
            raise ParseError(f"Amount {amount!r} has too many digits") from None
    if wei > UINT256_MAX:
        raise ParseError(f"Amount {amount!r} exceeds uint256")
    if wei != wei.to_integral_value():
        raise ParseError(f"Amount {amount!r} has more than 18 decimal places")
    return int(wei)


def parse_address(address: str) -> str:
    """
    Validate an address and return it EIP-55 checksummed.

    Mixed-case input must carry a valid checksum; all-lowercase or
    all-uppercase input is accepted as-is.

    Raises:
        ParseError: If the address is malformed.
    """
    if not isinstance(address, str) or not is_address(address.strip()):
        raise ParseError(f"Invalid address: {address!r}")
    address = address.strip()
    body = remove_0x_prefix(address)
    if body != body.lower() and body != body.upper() and not is_checksum_address(address):
        raise ParseError(f"Invalid address checksum: {address!r}")
    return to_checksum_address(address)


def parse_hex_quantity(value: object) -> int:
    """Decode a JSON-RPC hex quantity ("0x1a") into an int."""
    if not isinstance(value, str) or not value.startswith(("0x", "0X")):
        raise ValueError(f"Not a hex quantity: {value!r}")
    return int(value, 16)
