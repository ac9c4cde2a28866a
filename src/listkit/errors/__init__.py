"""Custom exception hierarchy for listkit."""

from __future__ import annotations


class ListKitError(Exception):
    """Base class for all custom errors raised by listkit."""


# --- 3-layer hierarchy ---

class DomainError(ListKitError):
    """Base class for domain-level errors."""


class InfrastructureError(ListKitError):
    """Base class for infrastructure-level errors."""


class ApplicationError(ListKitError):
    """Base class for application-level errors."""


# --- Application errors ---

class FetchError(ApplicationError):
    """Raised (or reported) when a remote fetch for a query fails."""


class InvalidRecordSourceError(ApplicationError):
    """Raised when a record source does not contain a list of records."""


# --- DI-specific errors ---

class CircularDependencyError(ListKitError):
    """Raised when a circular dependency is detected during resolution."""


class ResolutionError(ListKitError):
    """Raised when a dependency cannot be resolved."""


# --- Settings ---

class SettingsError(ListKitError):
    """Base class for settings related failures."""


class SettingsLoadError(SettingsError):
    """Raised when the settings file cannot be parsed or loaded."""


class SettingsValidationError(SettingsError):
    """Raised when settings data fails schema validation."""


class ThemeNotFoundError(SettingsError):
    """Raised when a theme identifier is not one of the available themes."""
