"""
Pytest fixtures for the JaguarPlace SDK tests.
"""
import hashlib
import time
from unittest.mock import MagicMock

import pytest
from eth_account import Account
from web3 import Web3

from tests.test_helpers import (
    FakeContractFunctions,
    create_test_driver,
    TEST_CONTRACT,
    TEST_PRIV_KEY,
)


# Make time.sleep instantaneous so confirmation polling doesn't slow the suite down
@pytest.fixture(autouse=True)
def _fast_sleep(monkeypatch):
    monkeypatch.setattr(time, "sleep", lambda *_a, **_kw: None)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep a developer's JAGUARPLACE_* variables out of the tests."""
    for var in (
        "JAGUARPLACE_RPC_URL",
        "JAGUARPLACE_PRIVATE_KEY",
        "JAGUARPLACE_CONTRACT_ADDRESS",
        "JAGUARPLACE_ABI_PATH",
        "JAGUARPLACE_CHAIN_ID",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def mock_account():
    """Create a deterministic test account"""
    return Account.from_key(TEST_PRIV_KEY)


def make_receipt(tx_hash, status=1, block_number=12345, from_address=None):
    """Build a receipt shaped like the one web3 returns"""
    if isinstance(tx_hash, str):
        tx_hash = bytes.fromhex(tx_hash[2:])
    return {
        'transactionHash': tx_hash,
        'blockNumber': block_number,
        'blockHash': bytes.fromhex('abcdef1234567890' * 4),
        'status': status,
        'gasUsed': 48000,
        'from': from_address or Account.from_key(TEST_PRIV_KEY).address,
        'to': TEST_CONTRACT,
        'logs': [],
    }


@pytest.fixture
def mock_w3():
    """
    Create a Web3 mock that models a node which accepts and confirms everything.

    Tests flip individual behaviours (send failure, revert status, timeouts)
    by replacing the side effects.
    """
    mock = MagicMock(spec=Web3)
    eth = MagicMock()
    eth.chain_id = 1
    eth.gas_price = 1000000000  # 1 gwei
    eth.block_number = 12345
    eth.get_transaction_count = MagicMock(return_value=7)

    def send_raw_transaction(raw_tx):
        # Deterministic 32-byte hash derived from the raw transaction
        return hashlib.sha256(bytes(raw_tx)).digest()

    eth.send_raw_transaction = MagicMock(side_effect=send_raw_transaction)

    def wait_for_receipt(tx_hash, **kwargs):
        return make_receipt(tx_hash)

    eth.wait_for_transaction_receipt = MagicMock(side_effect=wait_for_receipt)
    eth.call = MagicMock(return_value=b'')
    mock.eth = eth
    return mock


@pytest.fixture
def functions():
    return FakeContractFunctions()


@pytest.fixture
def driver(mock_w3, functions):
    """CallDriver with a confirming mock node"""
    return create_test_driver(mock_w3, functions)
