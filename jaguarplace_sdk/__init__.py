"""
JaguarPlace SDK - sign, submit and confirm calls to the JaguarPlace marketplace contract.
"""
from .version import __version__
from .exceptions import (
    JaguarPlaceError,
    ConfigurationError,
    SubmissionError,
    ConfirmationTimeout,
    ExecutionReverted,
)
from .models import CallRequest, CallResult, TxReceipt
from .config import DriverConfig, load_abi, load_bundled_abi
from .schema import InterfaceSchema, Operation
from .signer import Signer, LocalSigner
from .client import CallDriver, PendingCall
from .marketplace import JaguarPlaceClient
from .sequence import Step, StepOutcome, example_sequence, load_steps, run_sequence

__all__ = [
    "__version__",
    "JaguarPlaceError",
    "ConfigurationError",
    "SubmissionError",
    "ConfirmationTimeout",
    "ExecutionReverted",
    "CallRequest",
    "CallResult",
    "TxReceipt",
    "DriverConfig",
    "load_abi",
    "load_bundled_abi",
    "InterfaceSchema",
    "Operation",
    "Signer",
    "LocalSigner",
    "CallDriver",
    "PendingCall",
    "JaguarPlaceClient",
    "Step",
    "StepOutcome",
    "example_sequence",
    "load_steps",
    "run_sequence",
]
