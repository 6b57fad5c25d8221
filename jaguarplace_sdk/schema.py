"""
Interface schema for a deployed contract.

Parses an ABI into the ordered set of callable operations and checks
call requests against it before anything touches the network.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Tuple

from eth_abi import is_encodable
from eth_utils import is_address, to_checksum_address

from .exceptions import ConfigurationError
from .models import CallRequest


def _collapse_type(abi_input: Dict[str, Any]) -> str:
    """Turn an ABI input entry into its canonical type string, expanding tuples."""
    typ = abi_input["type"]
    if not typ.startswith("tuple"):
        return typ
    inner = ",".join(_collapse_type(c) for c in abi_input.get("components", []))
    return f"({inner}){typ[len('tuple'):]}"


@dataclass(frozen=True)
class Operation:
    """A state-changing function exposed by the contract."""
    name: str
    param_names: Tuple[str, ...]
    param_types: Tuple[str, ...]
    payable: bool = False

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(self.param_types)})"

    @classmethod
    def from_abi_entry(cls, entry: Dict[str, Any]) -> "Operation":
        inputs = entry.get("inputs", [])
        mutability = entry.get("stateMutability")
        payable = mutability == "payable" if mutability else bool(entry.get("payable", False))
        return cls(
            name=entry["name"],
            param_names=tuple(inp.get("name", "") for inp in inputs),
            param_types=tuple(_collapse_type(inp) for inp in inputs),
            payable=payable,
        )

    def normalize_args(self, args: Sequence[Any]) -> Tuple[Any, ...]:
        """
        Check arity and types of ``args`` and return them ready for encoding.

        Address arguments are converted to EIP-55 checksum form.

        Raises:
            ConfigurationError: If the arguments do not match the parameters
        """
        if len(args) != len(self.param_types):
            raise ConfigurationError(
                f"{self.signature} expects {len(self.param_types)} argument(s), got {len(args)}"
            )

        normalized = []
        for position, (typ, arg) in enumerate(zip(self.param_types, args)):
            if typ == "address":
                if not isinstance(arg, str) or not is_address(arg):
                    raise ConfigurationError(
                        f"{self.signature}: argument {position} is not a valid address: {arg!r}"
                    )
                arg = to_checksum_address(arg)
            elif not is_encodable(typ, arg):
                raise ConfigurationError(
                    f"{self.signature}: argument {position} is not a valid {typ}: {arg!r}"
                )
            normalized.append(arg)
        return tuple(normalized)


class InterfaceSchema:
    """Ordered collection of the contract's state-changing operations."""

    def __init__(self, operations: Sequence[Operation]):
        if not operations:
            raise ConfigurationError("Interface schema defines no operations")
        self._operations: Dict[str, Operation] = {}
        for op in operations:
            if op.name in self._operations:
                raise ConfigurationError(f"Overloaded function {op.name} is not supported")
            self._operations[op.name] = op

    @classmethod
    def from_abi(cls, abi: List[Dict[str, Any]]) -> "InterfaceSchema":
        """
        Build a schema from an ABI.

        View and pure functions, events, errors and constructors are skipped
        since they cannot be submitted as transactions.

        Raises:
            ConfigurationError: If the ABI is malformed or has no state-changing functions
        """
        if not isinstance(abi, list):
            raise ConfigurationError(f"ABI must be a list, got {type(abi).__name__}")

        operations = []
        for entry in abi:
            if not isinstance(entry, dict):
                raise ConfigurationError(f"Malformed ABI entry: {entry!r}")
            if entry.get("type", "function") != "function":
                continue
            if entry.get("stateMutability") in ("view", "pure") or entry.get("constant"):
                continue
            try:
                operations.append(Operation.from_abi_entry(entry))
            except KeyError as e:
                raise ConfigurationError(f"Malformed ABI entry, missing {e}: {entry!r}")
        return cls(operations)

    def __contains__(self, name: str) -> bool:
        return name in self._operations

    def __iter__(self):
        return iter(self._operations.values())

    def __len__(self) -> int:
        return len(self._operations)

    def names(self) -> List[str]:
        return list(self._operations)

    def operation(self, name: str) -> Operation:
        try:
            return self._operations[name]
        except KeyError:
            raise ConfigurationError(
                f"Unknown operation {name!r}; available: {', '.join(self._operations)}"
            )

    def validate(self, request: CallRequest) -> CallRequest:
        """
        Validate a request and return a copy with normalized arguments.

        Raises:
            ConfigurationError: On unknown operation, argument mismatch,
                or a value that does not fit the function's payability
        """
        op = self.operation(request.operation)
        args = op.normalize_args(request.args)

        if op.payable and request.value is None:
            raise ConfigurationError(f"{op.signature} is payable and requires a value")
        if not op.payable and request.value is not None:
            raise ConfigurationError(f"{op.signature} is not payable; value must not be set")
        try:
            request.value_wei
        except ValueError as e:
            raise ConfigurationError(f"{op.signature}: {e}")

        return request.model_copy(update={"args": args})
