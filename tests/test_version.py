"""
Tests for the version module of the JaguarPlace SDK.
"""
import re
import importlib
from importlib import metadata as importlib_metadata
from unittest.mock import patch

import pytest
import tomli
from click.testing import CliRunner

import jaguarplace_sdk.version as vmod
from jaguarplace_cli.main import cli
from jaguarplace_sdk import CallDriver
from tests.test_helpers import create_test_config


@pytest.fixture(autouse=True)
def _restore_version_module():
    yield
    importlib.reload(vmod)


def _no_metadata(name):
    raise importlib_metadata.PackageNotFoundError(name)


def test_version_format():
    """Test that the version string follows semantic versioning"""
    assert re.match(r'^\d+\.\d+\.\d+$', vmod.__version__), "Version should follow semantic versioning"


@patch('importlib.metadata.version')
def test_version_from_metadata(mock_metadata_version):
    """When the distribution is installed, its metadata wins"""
    mock_metadata_version.return_value = "2.3.4"
    importlib.reload(vmod)
    mock_metadata_version.assert_called_once_with("jaguarplace-sdk")
    assert vmod.__version__ == "2.3.4"


def test_source_checkout_matches_pyproject(monkeypatch):
    """Without metadata the version is the one declared in the repo's pyproject.toml"""
    monkeypatch.setattr(importlib_metadata, 'version', _no_metadata)
    importlib.reload(vmod)

    with vmod.PYPROJECT.open("rb") as f:
        declared = tomli.load(f)["project"]["version"]
    assert vmod.__version__ == declared


@pytest.mark.parametrize("content", [
    None,
    '[project]\nname = "jaguarplace-sdk"\n',
    'invalid toml content',
])
def test_unreadable_pyproject_falls_back_to_default(tmp_path, content):
    path = tmp_path / "pyproject.toml"
    if content is not None:
        path.write_text(content)

    assert vmod._version_from_pyproject(path) == vmod.DEFAULT_VERSION


def test_version_reaches_user_agent_and_cli():
    driver = CallDriver(create_test_config())
    headers = dict(driver.w3.provider.get_request_kwargs())["headers"]
    assert headers["User-Agent"] == f"jaguarplace-sdk/{vmod.__version__}"

    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert vmod.__version__ in result.output
