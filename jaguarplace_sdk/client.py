"""
CallDriver - signs, submits and awaits state-changing contract calls.
"""
import logging
import time
from typing import Any, Dict, Optional, Sequence

import requests
from eth_utils import to_hex
from pydantic import ValidationError
from web3 import Web3
from web3.exceptions import ContractLogicError, TimeExhausted
from web3.types import TxReceipt as Web3TxReceipt

from .config import DriverConfig
from .exceptions import ConfigurationError, ConfirmationTimeout, ExecutionReverted, SubmissionError
from .models import CallRequest, CallResult, TxReceipt
from .schema import InterfaceSchema
from .signer import Signer
from .version import __version__

GAS_BUFFER = 1.1


def _revert_message(error: ContractLogicError) -> str:
    return getattr(error, "message", None) or str(error)


class PendingCall:
    """
    Handle for a call that has been broadcast but not yet confirmed.

    Broadcasting only means the node accepted the signed transaction;
    the contract may still reject it. Call ``wait()`` to find out.
    """

    def __init__(self, driver: "CallDriver", request: CallRequest, tx_hash: str, transaction: Dict[str, Any]):
        self._driver = driver
        self.request = request
        self.tx_hash = tx_hash
        self.transaction = transaction
        self._result: Optional[CallResult] = None

    @property
    def operation(self) -> str:
        return self.request.operation

    def wait(self, timeout: Optional[float] = None) -> CallResult:
        """
        Block until the call is mined and has the configured number of confirmations.

        Args:
            timeout: Seconds to wait (defaults to the configured receipt_timeout)

        Returns:
            CallResult for the confirmed call

        Raises:
            ExecutionReverted: If the transaction was mined with status 0
            ConfirmationTimeout: If no receipt or not enough confirmations within the timeout
            SubmissionError: If the receipt could not be fetched
        """
        if self._result is not None:
            return self._result

        driver = self._driver
        config = driver.config
        timeout = timeout if timeout is not None else config.receipt_timeout
        started = time.monotonic()

        try:
            receipt = driver.w3.eth.wait_for_transaction_receipt(
                self.tx_hash,
                timeout=timeout,
                poll_latency=config.poll_interval
            )
        except TimeExhausted:
            driver.logger.error(f"No receipt for {self.operation} ({self.tx_hash}) after {timeout}s")
            raise ConfirmationTimeout(
                f"Transaction {self.tx_hash} not mined within {timeout}s",
                operation=self.operation,
                tx_hash=self.tx_hash
            )
        except Exception as e:
            driver.logger.error(f"Failed to fetch receipt for {self.tx_hash}: {e}")
            raise SubmissionError(
                f"Failed to fetch receipt: {str(e)}",
                operation=self.operation,
                tx_hash=self.tx_hash
            ) from e

        converted = driver._convert_receipt(receipt)

        if converted.status != 1:
            reason = driver._revert_reason(self.transaction, converted.block_number)
            driver.logger.error(f"{self.operation} reverted in block {converted.block_number}: {reason}")
            raise ExecutionReverted(self.operation, reason, self.tx_hash, converted)

        remaining = timeout - (time.monotonic() - started)
        self._wait_for_confirmations(converted.block_number, remaining)

        driver.logger.info(f"{self.operation} confirmed in block {converted.block_number}: {self.tx_hash}")
        self._result = CallResult(operation=self.operation, tx_hash=self.tx_hash, receipt=converted)
        return self._result

    def _wait_for_confirmations(self, block_number: int, timeout: float) -> None:
        config = self._driver.config
        if config.confirmations <= 1:
            return

        target = block_number + config.confirmations - 1
        deadline = time.monotonic() + timeout
        while True:
            try:
                head = self._driver.w3.eth.block_number
            except Exception as e:
                raise SubmissionError(
                    f"Failed to fetch block number: {str(e)}",
                    operation=self.operation,
                    tx_hash=self.tx_hash
                ) from e
            if head >= target:
                return
            if time.monotonic() >= deadline:
                raise ConfirmationTimeout(
                    f"Transaction {self.tx_hash} has {head - block_number + 1} of "
                    f"{config.confirmations} confirmations after timeout",
                    operation=self.operation,
                    tx_hash=self.tx_hash
                )
            time.sleep(config.poll_interval)

    def __repr__(self) -> str:
        return f"PendingCall(operation={self.operation!r}, tx_hash={self.tx_hash!r})"


class CallDriver:
    """
    Drives state-changing calls against one deployed contract.

    Each call goes through two phases:
    1. ``submit`` validates the request against the interface schema,
       builds, signs and broadcasts the transaction, and returns a PendingCall
    2. ``PendingCall.wait`` blocks until the transaction is final

    ``execute`` does both. There is no retry: re-running a failed call
    may have a different effect on remote state.
    """

    def __init__(
        self,
        config: DriverConfig,
        signer: Optional[Signer] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the CallDriver

        Args:
            config: Validated driver configuration
            signer: Custom signer object (optional if config has a private key)
            logger: Optional logger instance to use for debug/info logging

        Raises:
            ConfigurationError: If no credential is available or the ABI is unusable
        """
        if not isinstance(config, DriverConfig):
            raise ConfigurationError(f"config must be a DriverConfig, got {type(config).__name__}")

        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self.signer = signer or config.make_signer()
        if self.signer is None:
            raise ConfigurationError("Either private_key or signer must be provided")

        self.schema = InterfaceSchema.from_abi(config.abi)

        self.session = requests.Session()
        self.w3 = Web3(Web3.HTTPProvider(
            config.rpc_url,
            request_kwargs={
                "timeout": config.request_timeout,
                "headers": {
                    "Content-Type": "application/json",
                    "User-Agent": f"jaguarplace-sdk/{__version__}",
                },
            },
            session=self.session,
            exception_retry_configuration=None,
        ))
        self.contract = self.w3.eth.contract(address=config.contract_address, abi=config.abi)

    @classmethod
    def from_env(cls, signer: Optional[Signer] = None, logger: Optional[logging.Logger] = None, **overrides: Any) -> "CallDriver":
        """Create a driver from JAGUARPLACE_* environment variables."""
        return cls(DriverConfig.from_env(**overrides), signer=signer, logger=logger)

    @property
    def address(self) -> str:
        """Address of the account that signs every call"""
        return self.signer.address

    def operations(self):
        """Names of the operations the contract accepts, in ABI order"""
        return self.schema.names()

    def assert_chain_id(self) -> None:
        """
        Check that the endpoint serves the expected chain.

        Raises:
            ConfigurationError: If the chain id differs from expected_chain_id
            SubmissionError: If the chain id could not be fetched
        """
        expected = self.config.expected_chain_id
        if expected is None:
            return
        try:
            actual = self.w3.eth.chain_id
        except Exception as e:
            raise SubmissionError(f"Failed to fetch chain id: {str(e)}") from e
        if actual != expected:
            raise ConfigurationError(f"Chain ID mismatch: expected {expected}, endpoint reports {actual}")

    def prepare(self, operation: str, args: Sequence[Any] = (), value: Any = None) -> CallRequest:
        """
        Validate a call against the interface schema without touching the network.

        Raises:
            ConfigurationError: If the operation, arguments or value do not match
        """
        if isinstance(args, (str, bytes)):
            raise ConfigurationError(f"args for {operation} must be a sequence, not {type(args).__name__}")
        try:
            request = CallRequest(operation=operation, args=tuple(args), value=value)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid call to {operation}: {e.errors(include_input=False)[0]['msg']}") from None
        return self.schema.validate(request)

    def submit(
        self,
        operation: str,
        args: Sequence[Any] = (),
        value: Any = None,
        gas: Optional[int] = None,
        gas_price_override: Optional[int] = None
    ) -> PendingCall:
        """
        Sign and broadcast one call without waiting for it to be mined.

        Args:
            operation: Contract function name
            args: Positional arguments, typed per the ABI
            value: Ether amount to attach (payable functions only)
            gas: Gas limit to use (if None, will be estimated)
            gas_price_override: Gas price in wei (if None, uses current network price)

        Returns:
            PendingCall handle for the broadcast transaction

        Raises:
            ConfigurationError: If the call does not match the schema (nothing is sent)
            ExecutionReverted: If gas estimation shows the contract rejects the call
            SubmissionError: If the transaction cannot be built, signed or sent
        """
        request = self.prepare(operation, args, value)
        fn = getattr(self.contract.functions, request.operation)(*request.args)
        from_address = self.address
        value_wei = request.value_wei

        try:
            nonce = self.w3.eth.get_transaction_count(from_address, "pending")
        except Exception as e:
            self.logger.error(f"Failed to fetch nonce for {from_address}: {e}")
            raise SubmissionError(f"Failed to fetch nonce: {str(e)}", operation=request.operation) from e

        if gas is None:
            gas = self._estimate_gas(fn, request, from_address, value_wei)

        tx_params: Dict[str, Any] = {
            'from': from_address,
            'nonce': nonce,
            'gas': gas,
            'value': value_wei,
        }

        try:
            price = gas_price_override if gas_price_override is not None else self.config.gas_price_override
            tx_params['gasPrice'] = price if price is not None else self.w3.eth.gas_price
            tx = fn.build_transaction(tx_params)
        except Exception as e:
            self.logger.error(f"Failed to build {request.operation} transaction: {e}")
            raise SubmissionError(f"Failed to build transaction: {str(e)}", operation=request.operation) from e
        self.logger.debug(
            f"Built {request.operation} tx: nonce={nonce} gas={gas} gasPrice={tx_params['gasPrice']} value={value_wei}"
        )

        try:
            signed_tx = self.signer.sign_transaction(tx)
        except Exception as e:
            self.logger.error(f"Transaction signing failed: {e}")
            raise SubmissionError(f"Failed to sign transaction: {str(e)}", operation=request.operation) from e

        try:
            raw_hash = self.w3.eth.send_raw_transaction(signed_tx.raw_transaction)
        except Exception as e:
            self.logger.error(f"Failed to send {request.operation} transaction: {e}")
            raise SubmissionError(f"Failed to send transaction: {str(e)}", operation=request.operation) from e

        tx_hash = raw_hash if isinstance(raw_hash, str) else to_hex(raw_hash)
        self.logger.info(f"{request.operation} sent: {tx_hash}")
        return PendingCall(self, request, tx_hash, tx)

    def execute(
        self,
        operation: str,
        args: Sequence[Any] = (),
        value: Any = None,
        **kwargs: Any
    ) -> CallResult:
        """
        Submit one call and block until it is final.

        Accepts the same arguments as ``submit``.

        Raises:
            ConfigurationError, SubmissionError or ExecutionReverted
        """
        return self.submit(operation, args, value, **kwargs).wait()

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "CallDriver":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _estimate_gas(self, fn: Any, request: CallRequest, from_address: str, value_wei: int) -> int:
        try:
            estimate = fn.estimate_gas({'from': from_address, 'value': value_wei})
        except ContractLogicError as e:
            reason = _revert_message(e)
            self.logger.error(f"{request.operation} rejected during gas estimation: {reason}")
            raise ExecutionReverted(request.operation, reason) from e
        except Exception as e:
            # Fallback to default gas if estimation fails
            self.logger.warning(f"Gas estimation failed, using default: {self.config.gas_limit}. Error: {e}")
            return self.config.gas_limit

        # Add 10% buffer to gas estimate
        gas = int(estimate * GAS_BUFFER)
        self.logger.debug(f"Estimated gas: {gas}")
        return gas

    def _revert_reason(self, transaction: Dict[str, Any], block_number: int) -> Optional[str]:
        """
        Replay a reverted transaction as a call against the parent block state
        to recover the contract's reason.

        Returns None when the node does not report one.
        """
        call = {k: transaction[k] for k in ('from', 'to', 'data', 'value', 'gas') if k in transaction}
        try:
            self.w3.eth.call(call, max(block_number - 1, 0))
        except ContractLogicError as e:
            return _revert_message(e)
        except Exception as e:
            self.logger.debug(f"Could not replay reverted call: {e}")
        return None

    def _convert_receipt(self, web3_receipt: Web3TxReceipt) -> TxReceipt:
        """
        Convert Web3 receipt to our TxReceipt model

        Args:
            web3_receipt: The Web3 transaction receipt

        Returns:
            Our TxReceipt model
        """
        receipt_dict = dict(web3_receipt)

        # Convert bytes to hex strings
        for key, value in list(receipt_dict.items()):
            if isinstance(value, bytes):
                receipt_dict[key] = to_hex(value)

        receipt_dict['logs'] = [
            {k: to_hex(v) if isinstance(v, bytes) else v for k, v in dict(log).items()}
            for log in receipt_dict.get('logs', [])
        ]

        return TxReceipt.model_validate(receipt_dict)
