"""
Version information for the JaguarPlace SDK.

Installed copies report the distribution metadata; a source checkout
reads the version from its pyproject.toml.
"""
import importlib.metadata
import pathlib
import tomli

DISTRIBUTION = "jaguarplace-sdk"
DEFAULT_VERSION = "0.1.0"
PYPROJECT = pathlib.Path(__file__).parent.parent / "pyproject.toml"


def _version_from_pyproject(path: pathlib.Path) -> str:
    try:
        with path.open("rb") as f:
            return tomli.load(f)["project"]["version"]
    except (FileNotFoundError, KeyError, tomli.TOMLDecodeError):
        return DEFAULT_VERSION


try:
    __version__ = importlib.metadata.version(DISTRIBUTION)
except importlib.metadata.PackageNotFoundError:
    __version__ = _version_from_pyproject(PYPROJECT)
