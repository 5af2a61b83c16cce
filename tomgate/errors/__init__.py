"""
errors/ - Exception hierarchy for the configuration loading boundary.
"""

from .exceptions import (
    TomGateError,
    ConfigurationError,
    TomConfigNotFoundError,
    TomConfigValidationError,
)

__all__ = [
    "TomGateError",
    "ConfigurationError",
    "TomConfigNotFoundError",
    "TomConfigValidationError",
]
