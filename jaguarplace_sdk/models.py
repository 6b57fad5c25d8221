"""
Data models for the JaguarPlace SDK.
"""
from decimal import Decimal
from typing import Dict, Any, Optional, List, Tuple
from pydantic import BaseModel, Field
from web3 import Web3


class CallRequest(BaseModel):
    """A single state-changing call: function name, arguments and optional ether value"""
    operation: str
    args: Tuple[Any, ...] = ()
    value: Optional[Decimal] = Field(None, ge=0)

    @property
    def value_wei(self) -> int:
        """Attached value in wei (0 when no value is set)"""
        if self.value is None:
            return 0
        wei = self.value * 10**18
        if wei != wei.to_integral_value():
            raise ValueError(f"Value {self.value} has more than 18 decimal places")
        return Web3.to_wei(self.value, "ether")


class TxReceipt(BaseModel):
    """Transaction receipt from the blockchain"""
    tx_hash: str = Field(..., alias="transactionHash")
    block_number: int = Field(..., alias="blockNumber")
    block_hash: str = Field(..., alias="blockHash")
    status: int
    gas_used: int = Field(..., alias="gasUsed")
    from_address: str = Field(..., alias="from")
    to_address: Optional[str] = Field(None, alias="to")
    logs: List[Dict[str, Any]] = []

    class Config:
        populate_by_name = True


class CallResult(BaseModel):
    """Outcome of a confirmed call"""
    operation: str
    tx_hash: str
    receipt: TxReceipt

    @property
    def status(self) -> int:
        return self.receipt.status

    @property
    def succeeded(self) -> bool:
        return self.receipt.status == 1
