"""
tomgate/errors/exceptions.py - Loading boundary exceptions

The derivation core never raises for inputs in its domain. These
exceptions are raised where stored configuration is read and validated
before it reaches the core.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class TomGateError(Exception):
    """Base exception for tomgate."""

    def __init__(
        self,
        message: str,
        recoverable: bool = False,
        source: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.recoverable = recoverable
        self.source = source

    def __str__(self) -> str:
        parts = [self.message]
        if self.source:
            parts.append(f"[source={self.source}]")
        return " ".join(parts)


class ConfigurationError(TomGateError):
    """Raised when TOM configuration cannot be loaded."""


class TomConfigNotFoundError(ConfigurationError):
    """Raised when a configuration file does not exist."""

    def __init__(self, path: str):
        super().__init__(f"TOM config file not found: {path}", source=path)
        self.path = path


class TomConfigValidationError(ConfigurationError):
    """Raised when a configuration file is unreadable or fails validation."""

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        errors: Optional[List[Dict[str, Any]]] = None,
    ):
        super().__init__(message, source=source)
        self.errors = errors or []
