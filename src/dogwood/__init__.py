"""
Dogwood - an interactive checked-u64 calculator with source-anchored diagnostics.
"""

from __future__ import annotations

from .core.errors import ConfigError, DogwoodError, EvaluationError
from ._version import get_version

__version__ = get_version()

__all__ = [
    "__version__",
    "DogwoodError",
    "EvaluationError",
    "ConfigError",
]
