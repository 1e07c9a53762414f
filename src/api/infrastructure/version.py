"""Service version, shown in the OpenAPI document."""

import tomllib
from functools import lru_cache
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

DISTRIBUTION_NAME = "subsites-api"

# src/api/infrastructure/version.py -> repository root
_PYPROJECT = Path(__file__).resolve().parents[3] / "pyproject.toml"


@lru_cache
def get_version() -> str:
    """Version of the installed distribution.

    Source checkouts that were never installed read it from pyproject.toml.
    """
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        with _PYPROJECT.open("rb") as f:
            return tomllib.load(f)["project"]["version"]
