"""
Private-key signer backed by eth-account.
"""
from typing import Any, Dict

from eth_account import Account
from eth_account.signers.local import LocalAccount


class LocalSigner:
    """
    Signs transactions with an in-memory private key.

    The key is held only by the underlying eth-account ``LocalAccount``;
    ``repr`` shows the address and nothing else.
    """

    def __init__(self, private_key: str):
        """
        Args:
            private_key: Hex private key, with or without 0x prefix

        Raises:
            ValueError: If the key is not a valid secp256k1 private key
        """
        try:
            self._account: LocalAccount = Account.from_key(private_key)
        except Exception:
            # never echo the key back in the message
            raise ValueError("Invalid private key") from None
        self.address = self._account.address

    def sign_transaction(self, transaction_dict: Dict[str, Any]) -> Any:
        return self._account.sign_transaction(transaction_dict)

    def __repr__(self) -> str:
        return f"LocalSigner(address={self.address!r})"
