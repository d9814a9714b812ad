"""Custom exceptions for the URL scanner."""


class ScannerError(Exception):
    """Base exception for application-level errors."""


class UrlParseError(ScannerError, ValueError):
    """Raised when input cannot be interpreted as a URL, even after adding a scheme."""


ParseError = UrlParseError


class RepositoryUnavailableError(ScannerError):
    """Raised when the pattern repository cannot be read during a scan."""


class ScanTimeoutError(ScannerError):
    """Raised when component analyzers do not finish before the scan deadline."""


class ConfigError(ScannerError):
    """Raised when configuration cannot be loaded or validated."""
