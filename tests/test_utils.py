"""Unit tests for utils.py functions."""

from __future__ import annotations

import time

import pytest

from arbsend.pneuma.errors import ParseError
from arbsend.utils import (
    UINT256_MAX,
    format_ether,
    format_gwei,
    parse_address,
    parse_ether,
    parse_hex_quantity,
    saturating_add,
    saturating_mul,
)


class TestSaturatingArithmetic:
    """Tests for uint256 saturating helpers."""

    def test_add_exact_below_max(self) -> None:
        assert saturating_add(1, 2, 3) == 6

    def test_add_clamps_at_max(self) -> None:
        assert saturating_add(UINT256_MAX, 1) == UINT256_MAX
        assert saturating_add(UINT256_MAX - 5, 3, 3) == UINT256_MAX

    def test_add_reaching_max_exactly(self) -> None:
        assert saturating_add(UINT256_MAX - 1, 1) == UINT256_MAX

    def test_mul_exact_below_max(self) -> None:
        assert saturating_mul(310_000_000, 21_000) == 6_510_000_000_000

    def test_mul_clamps_at_max(self) -> None:
        assert saturating_mul(UINT256_MAX, 2) == UINT256_MAX
        assert saturating_mul(2**200, 2**100) == UINT256_MAX

    def test_rejects_negative(self) -> None:
        with pytest.raises(ValueError):
            saturating_add(-1, 5)
        with pytest.raises(ValueError):
            saturating_mul(3, -2)

    def test_rejects_non_int(self) -> None:
        with pytest.raises(TypeError):
            saturating_mul(1.5, 2)  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            saturating_add(True, 1)


class TestFormatGwei:
    """Tests for format_gwei: 4 decimals, truncation only."""

    def test_zero(self) -> None:
        assert format_gwei(0) == "0.0000"

    def test_whole_gwei(self) -> None:
        assert format_gwei(3 * 10**9) == "3.0000"

    def test_fractional(self) -> None:
        assert format_gwei(310_000_000) == "0.3100"
        assert format_gwei(10_000_000) == "0.0100"

    def test_truncates_instead_of_rounding(self) -> None:
        # 1.99999 gwei would round to 2.0000
        assert format_gwei(1_999_990_000) == "1.9999"
        assert format_gwei(99_999) == "0.0000"

    def test_leading_zeros_in_fraction(self) -> None:
        assert format_gwei(100_000) == "0.0001"

    @pytest.mark.parametrize(
        "wei",
        [0, 1, 99_999, 100_000, 123_456_789, 10**9 - 1, 10**9, 987_654_321_012, UINT256_MAX],
    )
    def test_truncation_bounds(self, wei: int) -> None:
        whole, frac = format_gwei(wei).split(".")
        # value in units of 1e-4 gwei = 1e5 wei
        shown = int(whole) * 10**4 + int(frac)
        assert shown * 10**5 <= wei < (shown + 1) * 10**5


class TestFormatEther:
    """Tests for format_ether."""

    def test_zero(self) -> None:
        assert format_ether(0) == "0.000000000000000000"

    def test_one_ether(self) -> None:
        assert format_ether(10**18) == "1.000000000000000000"

    def test_small_fee(self) -> None:
        assert format_ether(6_510_000_000_000) == "0.000006510000000000"

    def test_one_wei(self) -> None:
        assert format_ether(1) == "0.000000000000000001"


class TestParseEther:
    """Tests for parse_ether: exact decimal conversion."""

    def test_sub_unit_amount_not_truncated(self) -> None:
        assert parse_ether("0.001") == 10**15

    def test_whole_amount(self) -> None:
        assert parse_ether("2") == 2 * 10**18

    def test_one_wei(self) -> None:
        assert parse_ether("0.000000000000000001") == 1

    def test_zero(self) -> None:
        assert parse_ether("0") == 0

    def test_whitespace(self) -> None:
        assert parse_ether(" 1.5 ") == 15 * 10**17

    def test_large_amount_exact(self) -> None:
        assert parse_ether("123456789012345.123456789012345678") == 123456789012345123456789012345678

    @pytest.mark.parametrize("bad", ["", "abc", "1.2.3", "0x10", "nan", "inf", "-1"])
    def test_rejects_malformed(self, bad: str) -> None:
        with pytest.raises(ParseError):
            parse_ether(bad)

    def test_rejects_sub_wei_precision(self) -> None:
        with pytest.raises(ParseError):
            parse_ether("0.0000000000000000001")

    def test_rejects_above_uint256(self) -> None:
        with pytest.raises(ParseError):
            parse_ether(str(2**256))

    def test_uint256_max_in_ether(self) -> None:
        whole, frac = divmod(UINT256_MAX, 10**18)
        assert parse_ether(f"{whole}.{frac:018d}") == UINT256_MAX

    @pytest.mark.parametrize("huge", ["1e60", "1e900000", "9.9e999999"])
    def test_huge_exponent_rejected_quickly(self, huge: str) -> None:
        start = time.monotonic()
        with pytest.raises(ParseError, match="exceeds uint256"):
            parse_ether(huge)
        assert time.monotonic() - start < 1.0

    def test_parse_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            parse_ether("x")


class TestParseAddress:
    """Tests for parse_address."""

    def test_lowercase_is_checksummed(self) -> None:
        assert (
            parse_address("0xf39fd6e51aad88f6f4ce6ab8827279cfffb92266")
            == "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
        )

    def test_valid_checksum_passes(self) -> None:
        addr = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
        assert parse_address(addr) == addr

    @pytest.mark.parametrize(
        "bad",
        [
            "",
            "0x1234",
            "not-an-address",
            "0xZZ9fd6e51aad88f6f4ce6ab8827279cfffb92266",
            # broken checksum (mixed case)
            "0xF39fd6e51aad88F6F4ce6aB8827279cffFb92266",
        ],
    )
    def test_rejects_malformed(self, bad: str) -> None:
        with pytest.raises(ParseError):
            parse_address(bad)

    def test_uppercase_body_is_checksummed(self) -> None:
        upper = "0x" + "F39FD6E51AAD88F6F4CE6AB8827279CFFFB92266"
        assert parse_address(upper) == "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"

    # indices of hex letters in the address
    @pytest.mark.parametrize("index", [2, 5, 24, 36])
    def test_single_case_flip_rejected(self, index: int) -> None:
        addr = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
        flipped = addr[:index] + addr[index].swapcase() + addr[index + 1 :]
        with pytest.raises(ParseError, match="checksum"):
            parse_address(flipped)


class TestParseHexQuantity:
    def test_decodes(self) -> None:
        assert parse_hex_quantity("0x0") == 0
        assert parse_hex_quantity("0x5f5e100") == 100_000_000

    @pytest.mark.parametrize("bad", [None, 12, "12", "0xzz"])
    def test_rejects(self, bad: object) -> None:
        with pytest.raises(ValueError):
            parse_hex_quantity(bad)
