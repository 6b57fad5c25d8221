"""
Tests for the project metadata and the example scripts shipped with it.
"""
import importlib.util
import re
from pathlib import Path
from unittest.mock import MagicMock, patch

import tomli

from jaguarplace_sdk import CallDriver, SubmissionError
from tests.test_helpers import TEST_NEW_OWNER, TEST_USER

ROOT = Path(__file__).resolve().parent.parent


def load_example(name):
    spec = importlib.util.spec_from_file_location(f"example_{name}", ROOT / "examples" / f"{name}.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_web3_floor_supports_raw_transaction():
    """Signed transactions expose raw_transaction only from web3 7 on"""
    with (ROOT / "pyproject.toml").open("rb") as f:
        deps = tomli.load(f)["project"]["dependencies"]

    web3_dep = next(d for d in deps if re.match(r"web3\b", d))
    match = re.match(r"web3>=(\d+)", web3_dep)
    assert match, f"web3 needs a lower bound: {web3_dep}"
    assert int(match.group(1)) >= 7


def test_walkthrough_reports_chain_id_failure(monkeypatch, capsys):
    """A node that cannot report its chain id ends the walkthrough with an error line"""
    monkeypatch.setenv("NEW_OWNER_ADDRESS", TEST_NEW_OWNER)
    monkeypatch.setenv("USER_ADDRESS", TEST_USER)
    driver = MagicMock(spec=CallDriver)
    driver.assert_chain_id.side_effect = SubmissionError("Failed to get chain ID: connection refused")
    walkthrough = load_example("marketplace_walkthrough")

    with patch.object(CallDriver, "from_env", return_value=driver):
        assert walkthrough.main() == 1

    assert "ERROR: Failed to get chain ID" in capsys.readouterr().out
    driver.__enter__.assert_not_called()
