"""
Tests for the signer module.
"""
import pytest
from eth_account import Account

from jaguarplace_sdk.signer import LocalSigner, Signer
from tests.test_helpers import TEST_CONTRACT, TEST_PRIV_KEY


def test_local_signer_address(mock_account):
    signer = LocalSigner(TEST_PRIV_KEY)
    assert signer.address == mock_account.address
    assert isinstance(signer, Signer)


def test_local_signer_accepts_unprefixed_key(mock_account):
    assert LocalSigner(TEST_PRIV_KEY[2:]).address == mock_account.address


def test_local_signer_repr_hides_key():
    signer = LocalSigner(TEST_PRIV_KEY)
    assert TEST_PRIV_KEY[2:] not in repr(signer)
    assert signer.address in repr(signer)


def test_invalid_key_message_has_no_key():
    bad_key = "0x1234"
    with pytest.raises(ValueError, match="Invalid private key") as exc_info:
        LocalSigner(bad_key)
    assert "1234" not in str(exc_info.value)


def test_sign_transaction_recovers_sender(mock_account):
    """Signed transactions recover to the signer's address"""
    signer = LocalSigner(TEST_PRIV_KEY)
    tx = {
        'to': TEST_CONTRACT,
        'value': 0,
        'gas': 50000,
        'gasPrice': 1000000000,
        'nonce': 0,
        'chainId': 1,
        'data': '0x',
    }
    signed = signer.sign_transaction(tx)

    assert Account.recover_transaction(signed.raw_transaction) == mock_account.address


def test_custom_object_satisfies_protocol():
    class CustomSigner:
        address = "0x1234567890123456789012345678901234567890"

        def sign_transaction(self, transaction_dict):
            return None

    assert isinstance(CustomSigner(), Signer)
    assert not isinstance(object(), Signer)
