"""
Typed client for the JaguarPlace marketplace contract.
"""
import logging
from typing import Any, Optional, Union
from decimal import Decimal

from .client import CallDriver
from .config import DriverConfig
from .models import CallResult
from .signer import Signer

EtherAmount = Union[int, float, str, Decimal]


class JaguarPlaceClient:
    """
    One method per marketplace function.

    Every method submits a transaction and blocks until it is final,
    returning the CallResult or raising ConfigurationError,
    SubmissionError or ExecutionReverted. Extra keyword arguments
    (``gas``, ``gas_price_override``) go to ``CallDriver.submit``.
    """

    def __init__(self, driver: CallDriver):
        self.driver = driver

    @classmethod
    def from_config(
        cls,
        config: DriverConfig,
        signer: Optional[Signer] = None,
        logger: Optional[logging.Logger] = None
    ) -> "JaguarPlaceClient":
        return cls(CallDriver(config, signer=signer, logger=logger))

    @classmethod
    def from_env(
        cls,
        signer: Optional[Signer] = None,
        logger: Optional[logging.Logger] = None,
        **overrides: Any
    ) -> "JaguarPlaceClient":
        """Build a client from JAGUARPLACE_* environment variables and the bundled ABI."""
        return cls(CallDriver.from_env(signer=signer, logger=logger, **overrides))

    @property
    def address(self) -> str:
        return self.driver.address

    # Owner operations

    def change_owner(self, new_owner: str, **kwargs: Any) -> CallResult:
        """Transfer contract ownership to ``new_owner``."""
        return self.driver.execute("changeOwner", [new_owner], **kwargs)

    def change_fee(self, new_fee: int, **kwargs: Any) -> CallResult:
        """Set the marketplace fee."""
        return self.driver.execute("changeFee", [new_fee], **kwargs)

    def mark_item_as_sold(self, item_id: int, **kwargs: Any) -> CallResult:
        return self.driver.execute("markItemAsSold", [item_id], **kwargs)

    def mark_item_as_unsold(self, item_id: int, **kwargs: Any) -> CallResult:
        return self.driver.execute("markItemAsUnsold", [item_id], **kwargs)

    def blacklist_user(self, user: str, **kwargs: Any) -> CallResult:
        return self.driver.execute("blacklistUser", [user], **kwargs)

    def whitelist_user(self, user: str, **kwargs: Any) -> CallResult:
        return self.driver.execute("whitelistUser", [user], **kwargs)

    def create_item(
        self,
        item_id: int,
        price_in_eth: int,
        price_in_token: int,
        uri: str,
        is_unlimited: bool,
        sale_end_time: int,
        **kwargs: Any
    ) -> CallResult:
        """
        List a new item.

        Args:
            item_id: Item identifier
            price_in_eth: Price in wei when paying with ether
            price_in_token: Price in token base units when paying with the ERC-20 token
            uri: Metadata URI
            is_unlimited: Whether the item can be sold any number of times
            sale_end_time: Unix timestamp after which the item can no longer be bought (0 for none)
        """
        return self.driver.execute(
            "createItem",
            [item_id, price_in_eth, price_in_token, uri, is_unlimited, sale_end_time],
            **kwargs
        )

    # Purchases

    def buy_with_eth(self, item_id: int, value: EtherAmount, **kwargs: Any) -> CallResult:
        """Buy an item, attaching ``value`` ether to the transaction."""
        return self.driver.execute("buyWithEth", [item_id], value=value, **kwargs)

    def buy_with_token(self, item_id: int, token_amount: int, **kwargs: Any) -> CallResult:
        """Buy an item with the ERC-20 token; the token allowance must already be set."""
        return self.driver.execute("buyWithToken", [item_id, token_amount], **kwargs)
