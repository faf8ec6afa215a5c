"""
Version lookup for portal-bridge-sdk.

Installed copies report their distribution metadata. A source checkout
without metadata reads ``[project].version`` from the adjacent
``pyproject.toml``.
"""
import importlib.metadata
import pathlib
from typing import Optional

import tomli

DISTRIBUTION = "portal-bridge-sdk"
DEFAULT_VERSION = "0.1.0"
PYPROJECT_PATH = pathlib.Path(__file__).resolve().parent.parent / "pyproject.toml"


def _pyproject_version(path: pathlib.Path = PYPROJECT_PATH) -> Optional[str]:
    try:
        with path.open("rb") as f:
            project = tomli.load(f).get("project", {})
    except (OSError, tomli.TOMLDecodeError):
        return None
    version = project.get("version") if isinstance(project, dict) else None
    return version if isinstance(version, str) else None


def get_version() -> str:
    """Distribution metadata first, then pyproject.toml, then ``DEFAULT_VERSION``."""
    try:
        return importlib.metadata.version(DISTRIBUTION)
    except importlib.metadata.PackageNotFoundError:
        return _pyproject_version() or DEFAULT_VERSION


__version__ = get_version()
