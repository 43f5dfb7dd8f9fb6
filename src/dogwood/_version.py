"""Version lookup for Dogwood."""

import tomllib
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _metadata_version
from pathlib import Path

_FALLBACK = "0.0.0"


def get_version() -> str:
    """Installed distribution version, else the source checkout's pyproject.toml."""
    try:
        return _metadata_version("dogwood")
    except PackageNotFoundError:
        pass
    pyproject = Path(__file__).resolve().parents[2] / "pyproject.toml"
    if not pyproject.exists():
        return _FALLBACK
    with pyproject.open("rb") as f:
        return tomllib.load(f).get("project", {}).get("version", _FALLBACK)
