"""Custom exception hierarchy for pageflow."""

from __future__ import annotations


class PageflowError(Exception):
    """Base class for all custom errors raised by pageflow."""


# --- 2-layer hierarchy ---

class ConfigurationError(PageflowError):
    """Base class for errors raised while wiring a loader together."""


class LoadError(PageflowError):
    """Base class for errors raised during a load cycle."""


# --- Configuration errors ---

class SourceConfigurationError(ConfigurationError):
    """Raised when no usable incremental source can be obtained."""


class SettingsValidationError(ConfigurationError):
    """Raised when loader settings fail schema validation."""


# --- Load errors ---

class OperationCancelledError(LoadError):
    """Raised by sources that observe a cancellation request mid-fetch."""


__all__ = [
    "ConfigurationError",
    "LoadError",
    "OperationCancelledError",
    "PageflowError",
    "SettingsValidationError",
    "SourceConfigurationError",
]
