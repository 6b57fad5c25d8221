"""
Driver configuration for the JaguarPlace SDK.
"""
import json
import os
import urllib.parse
from importlib import resources
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from eth_utils import is_address, to_checksum_address
from pydantic import BaseModel, Field, SecretStr, ValidationError, field_validator

from .exceptions import ConfigurationError
from .signer import LocalSigner

BUNDLED_ABI = "JaguarPlace.json"

ENV_RPC_URL = "JAGUARPLACE_RPC_URL"
ENV_PRIVATE_KEY = "JAGUARPLACE_PRIVATE_KEY"
ENV_CONTRACT_ADDRESS = "JAGUARPLACE_CONTRACT_ADDRESS"
ENV_ABI_PATH = "JAGUARPLACE_ABI_PATH"
ENV_CHAIN_ID = "JAGUARPLACE_CHAIN_ID"


def load_abi(path: Union[str, Path]) -> List[Dict[str, Any]]:
    """
    Load an ABI from a JSON file.

    Accepts either a bare ABI list or a compiler artifact with an ``abi`` key
    (Foundry and Hardhat both produce the latter).

    Raises:
        ConfigurationError: If the file is missing or not a valid ABI
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise ConfigurationError(f"ABI file not found: {path}")
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"ABI file {path} is not valid JSON: {e}")

    if isinstance(data, dict) and "abi" in data:
        data = data["abi"]
    if not isinstance(data, list):
        raise ConfigurationError(f"ABI file {path} must contain a list or an artifact with an 'abi' key")
    return data


def load_bundled_abi() -> List[Dict[str, Any]]:
    """Load the JaguarPlace ABI shipped with the package."""
    text = (resources.files("jaguarplace_sdk") / "abi" / BUNDLED_ABI).read_text(encoding="utf-8")
    return json.loads(text)


def _format_errors(error: ValidationError) -> str:
    # include_input=False keeps secrets out of the message
    parts = []
    for err in error.errors(include_input=False, include_url=False):
        loc = ".".join(str(p) for p in err["loc"]) or "config"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


class DriverConfig(BaseModel):
    """
    Everything the call driver needs before it can submit anything.

    Validated at construction; any problem raises ConfigurationError.
    """
    rpc_url: str
    contract_address: str
    private_key: Optional[SecretStr] = None
    abi: List[Dict[str, Any]] = Field(default_factory=load_bundled_abi)
    expected_chain_id: Optional[int] = None
    gas_limit: int = Field(300_000, gt=0)
    gas_price_override: Optional[int] = Field(None, ge=0)
    receipt_timeout: float = Field(120.0, gt=0)
    poll_interval: float = Field(0.1, gt=0)
    request_timeout: float = Field(30.0, gt=0)
    confirmations: int = Field(1, ge=1)

    class Config:
        frozen = True

    def __init__(self, **data: Any):
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {_format_errors(e)}") from None

    @field_validator("rpc_url")
    @classmethod
    def _check_rpc_url(cls, url: str) -> str:
        parsed = urllib.parse.urlparse(url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"must be an http(s) URL (got: {url!r})")
        # Check if it's a localhost or 127.0.0.1 address (with or without port)
        host = parsed.netloc.split(':')[0]
        is_local = host in ('localhost', '127.0.0.1')
        if parsed.scheme != 'https' and not is_local:
            raise ValueError(f"must use https:// for security (got: {parsed.scheme}://)")
        return url

    @field_validator("contract_address")
    @classmethod
    def _check_contract_address(cls, address: str) -> str:
        if not is_address(address):
            raise ValueError(f"not a valid address: {address!r}")
        return to_checksum_address(address)

    @field_validator("private_key")
    @classmethod
    def _check_private_key(cls, key: Optional[SecretStr]) -> Optional[SecretStr]:
        if key is not None:
            LocalSigner(key.get_secret_value())
        return key

    @field_validator("abi")
    @classmethod
    def _check_abi(cls, abi: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        if not abi:
            raise ValueError("must not be empty")
        return abi

    def make_signer(self) -> Optional[LocalSigner]:
        """Create a LocalSigner from the configured private key, if any."""
        if self.private_key is None:
            return None
        return LocalSigner(self.private_key.get_secret_value())

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None, **overrides: Any) -> "DriverConfig":
        """
        Build a configuration from environment variables.

        Reads JAGUARPLACE_RPC_URL, JAGUARPLACE_PRIVATE_KEY and
        JAGUARPLACE_CONTRACT_ADDRESS (all required), plus the optional
        JAGUARPLACE_ABI_PATH and JAGUARPLACE_CHAIN_ID. Keyword overrides
        take precedence over the environment.

        Raises:
            ConfigurationError: If a required variable is missing or invalid
        """
        env = os.environ if environ is None else environ
        data: Dict[str, Any] = {}

        for field, var in (
            ("rpc_url", ENV_RPC_URL),
            ("private_key", ENV_PRIVATE_KEY),
            ("contract_address", ENV_CONTRACT_ADDRESS),
        ):
            if field in overrides:
                continue
            value = env.get(var)
            if not value:
                raise ConfigurationError(f"{var} environment variable is required")
            data[field] = value

        abi_path = env.get(ENV_ABI_PATH)
        if abi_path and "abi" not in overrides:
            data["abi"] = load_abi(abi_path)

        chain_id = env.get(ENV_CHAIN_ID)
        if chain_id and "expected_chain_id" not in overrides:
            try:
                data["expected_chain_id"] = int(chain_id, 0)
            except ValueError:
                raise ConfigurationError(f"{ENV_CHAIN_ID} must be an integer (got: {chain_id!r})")

        data.update(overrides)
        return cls(**data)
