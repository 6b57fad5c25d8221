"""
Tests for the JaguarPlaceClient wrapper.
"""
import logging

import pytest
from unittest.mock import MagicMock
from web3 import Web3

from jaguarplace_sdk import CallDriver, JaguarPlaceClient
from tests.test_helpers import create_test_config, create_test_driver, TEST_NEW_OWNER, TEST_PRIV_KEY, TEST_USER


@pytest.fixture
def mock_driver():
    driver = MagicMock(spec=CallDriver)
    driver.execute.return_value = MagicMock(name="CallResult")
    return driver


@pytest.mark.parametrize("method,args,expected_call", [
    ("change_owner", [TEST_NEW_OWNER], ("changeOwner", [TEST_NEW_OWNER])),
    ("change_fee", [10], ("changeFee", [10])),
    ("mark_item_as_sold", [1], ("markItemAsSold", [1])),
    ("mark_item_as_unsold", [2], ("markItemAsUnsold", [2])),
    ("blacklist_user", [TEST_USER], ("blacklistUser", [TEST_USER])),
    ("whitelist_user", [TEST_USER], ("whitelistUser", [TEST_USER])),
    ("create_item", [1, 1, 1, "URI", True, 0], ("createItem", [1, 1, 1, "URI", True, 0])),
    ("buy_with_token", [2, 100], ("buyWithToken", [2, 100])),
])
def test_methods_map_to_contract_functions(mock_driver, method, args, expected_call):
    client = JaguarPlaceClient(mock_driver)

    result = getattr(client, method)(*args)

    mock_driver.execute.assert_called_once_with(*expected_call)
    assert result is mock_driver.execute.return_value


def test_buy_with_eth_passes_value(mock_driver):
    client = JaguarPlaceClient(mock_driver)
    client.buy_with_eth(1, "0.25")
    mock_driver.execute.assert_called_once_with("buyWithEth", [1], value="0.25")


def test_extra_kwargs_forwarded(mock_driver):
    client = JaguarPlaceClient(mock_driver)
    client.change_fee(3, gas=80000, gas_price_override=2)
    mock_driver.execute.assert_called_once_with("changeFee", [3], gas=80000, gas_price_override=2)


def test_buy_with_eth_end_to_end(mock_w3, functions):
    """buy_with_eth(1, 1) against a confirming node attaches exactly one ether"""
    client = JaguarPlaceClient(create_test_driver(mock_w3, functions))

    result = client.buy_with_eth(1, 1)

    assert result.succeeded
    assert functions.calls == [("buyWithEth", (1,))]
    assert functions.built[0]['value'] == Web3.to_wei(1, 'ether')


def test_from_config(mock_account):
    client = JaguarPlaceClient.from_config(create_test_config())
    assert client.address == mock_account.address


def test_from_env(monkeypatch, mock_account):
    monkeypatch.setenv("JAGUARPLACE_RPC_URL", "http://localhost:8545")
    monkeypatch.setenv("JAGUARPLACE_PRIVATE_KEY", TEST_PRIV_KEY)
    monkeypatch.setenv("JAGUARPLACE_CONTRACT_ADDRESS", "0x1234567890123456789012345678901234567890")

    client = JaguarPlaceClient.from_env()
    assert client.address == mock_account.address
    assert client.driver.config.rpc_url == "http://localhost:8545"


def test_from_env_forwards_logger(monkeypatch):
    monkeypatch.setenv("JAGUARPLACE_RPC_URL", "http://localhost:8545")
    monkeypatch.setenv("JAGUARPLACE_PRIVATE_KEY", TEST_PRIV_KEY)
    monkeypatch.setenv("JAGUARPLACE_CONTRACT_ADDRESS", "0x1234567890123456789012345678901234567890")
    logger = logging.getLogger("jaguarplace.marketplace.test")

    client = JaguarPlaceClient.from_env(logger=logger)
    assert client.driver.logger is logger
