"""Custom exception types for the PR pickup report."""


class PickupReportError(Exception):
    """Base exception for all recoverable pickup report errors."""


class ConfigurationError(PickupReportError):
    """Raised when runtime configuration values are missing or invalid."""


class AuthenticationError(PickupReportError):
    """Raised when the GitHub CLI is not authenticated."""


class ApiError(PickupReportError):
    """Raised when a GitHub CLI call fails or returns an unexpected response."""
