"""
Exception hierarchy for a11ycheck.

All exceptions inherit from A11yCheckError for easy catching.
Keyboard traps are findings, not errors, and never appear here.
"""

from __future__ import annotations


class A11yCheckError(Exception):
    """Base exception for all a11ycheck errors."""

    def __init__(self, message: str, details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigError(A11yCheckError):
    """Raised when an explicitly supplied configuration file is unusable."""

    def __init__(self, message: str, config_key: str | None = None) -> None:
        super().__init__(message, {"config_key": config_key})
        self.config_key = config_key


class NavigationError(A11yCheckError):
    """Raised when a page cannot be loaded, restored, or driven any further."""

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message, {"url": url})
        self.url = url


class ScannerError(A11yCheckError):
    """Raised when an accessibility engine fails while running in the page."""

    def __init__(self, message: str, engine: str) -> None:
        super().__init__(message, {"engine": engine})
        self.engine = engine


class AssetError(A11yCheckError):
    """Raised when an engine script cannot be downloaded or read."""

    def __init__(self, message: str, source: str | None = None) -> None:
        super().__init__(message, {"source": source})
        self.source = source
