"""Shared fixtures: a scripted in-memory network and a fixed signing key."""

from __future__ import annotations

from typing import Any, Optional

import pytest
from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_utils import keccak, to_checksum_address, to_hex

from arbsend.config import NetworkConfig
from arbsend.pneuma.errors import NetworkError

# Well-known development key (anvil account #0); never holds real funds.
TEST_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
TEST_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
RECIPIENT = to_checksum_address("0x6cf383b4d0c53e13b54742a14e12684936644707")

GWEI = 10**9
ETHER = 10**18


class FakeNetwork:
    """
    In-memory stand-in for RpcClient.

    Every call is appended to ``calls`` so tests can assert on ordering
    and on what was (not) sent. ``receipts`` is consumed one entry per
    poll; ``None`` entries mean "still pending".
    """

    def __init__(
        self,
        chain_id: int = 421614,
        base_fee: int = 100_000_000,
        priority_fee: int = 10_000_000,
        balance: int = ETHER,
        nonce: int = 7,
        receipts: Optional[list[Optional[dict]]] = None,
    ) -> None:
        self.chain_id = chain_id
        self.base_fee = base_fee
        self.priority_fee = priority_fee
        self.balance = balance
        self.nonce = nonce
        self.receipts = list(receipts) if receipts is not None else []
        self.calls: list[str] = []
        self.sent: list[str] = []
        self.fail_on: dict[str, str] = {}

    def _record(self, method: str) -> None:
        self.calls.append(method)
        if method in self.fail_on:
            raise NetworkError(self.fail_on[method], method=method)

    def get_chain_id(self) -> int:
        self._record("eth_chainId")
        return self.chain_id

    def get_block_number(self) -> int:
        self._record("eth_blockNumber")
        return 12345

    def get_balance(self, address: str) -> int:
        self._record("eth_getBalance")
        return self.balance

    def get_max_priority_fee(self) -> int:
        self._record("eth_maxPriorityFeePerGas")
        return self.priority_fee

    def get_latest_base_fee(self) -> int:
        self._record("eth_getBlockByNumber")
        return self.base_fee

    def get_nonce(self, address: str) -> int:
        self._record("eth_getTransactionCount")
        return self.nonce

    def send_raw_transaction(self, raw_tx: str) -> str:
        self._record("eth_sendRawTransaction")
        self.sent.append(raw_tx)
        return to_hex(keccak(hexstr=raw_tx))

    def get_receipt(self, tx_hash: str) -> Optional[dict]:
        self._record("eth_getTransactionReceipt")
        if not self.receipts:
            return None
        return self.receipts.pop(0)


def make_receipt(status: int = 1, block_number: Optional[int] = 12345, **extra: Any) -> dict:
    receipt: dict[str, Any] = {
        "status": hex(status),
        "gasUsed": hex(21_000),
        "effectiveGasPrice": hex(110_000_000),
    }
    if block_number is not None:
        receipt["blockNumber"] = hex(block_number)
    receipt.update(extra)
    return receipt


class FakeClock:
    """Monotonic clock advanced only by ``sleep``."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture()
def config() -> NetworkConfig:
    return NetworkConfig(rpc_url="http://rpc.test", poll_interval=1.0, receipt_timeout=10.0)


@pytest.fixture()
def network() -> FakeNetwork:
    return FakeNetwork()


@pytest.fixture()
def account() -> LocalAccount:
    return Account.from_key(TEST_PRIVATE_KEY)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()
