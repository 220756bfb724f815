"""Version information for the profile client.

Reads the installed distribution metadata, falling back to pyproject.toml
when running from a source checkout.
"""

import tomllib
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path


def get_version() -> str:
    """Get the package version.

    Returns:
        Version string (e.g., "0.1.0")
    """
    try:
        return version("azctx")
    except PackageNotFoundError:
        # Source checkout: pyproject.toml sits three levels above this file
        pyproject_path = Path(__file__).parents[3] / "pyproject.toml"

        with open(pyproject_path, "rb") as f:
            pyproject_data = tomllib.load(f)

        return pyproject_data["project"]["version"]


__version__ = get_version()
