"""
Version information for the urpc SDK.

Installed packages report their metadata version. A source checkout reads
``pyproject.toml`` next to the package instead.
"""
import importlib.metadata
import pathlib

import tomli

DISTRIBUTION = "urpc-sdk"
FALLBACK_VERSION = "0.1.0"

_PYPROJECT = pathlib.Path(__file__).resolve().parent.parent / "pyproject.toml"


def _pyproject_version(path: pathlib.Path = _PYPROJECT) -> str:
    try:
        with path.open("rb") as f:
            return tomli.load(f)["project"]["version"]
    except (OSError, KeyError, tomli.TOMLDecodeError):
        return FALLBACK_VERSION


def get_version() -> str:
    """Version of the installed distribution, else of the source checkout."""
    try:
        return importlib.metadata.version(DISTRIBUTION)
    except importlib.metadata.PackageNotFoundError:
        return _pyproject_version()


__version__ = get_version()
