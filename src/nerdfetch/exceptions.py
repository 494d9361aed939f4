"""
Custom exceptions for nerdfetch.

This module defines domain-specific exceptions so callers can tell fatal
pre-work failures apart from errors that are isolated to a single font.
"""

from typing import Optional


class NerdfetchError(Exception):
    """
    Base exception for all nerdfetch errors.

    All custom exceptions in nerdfetch inherit from this class so every
    application-specific error can be caught in one place.
    """

    def __init__(self, message: str, details: Optional[str] = None) -> None:
        """
        Initialize the exception.

        Args:
            message: The primary error message.
            details: Optional additional context about the error.
        """
        self.message = message
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(NerdfetchError):
    """Exception raised when configuration is invalid."""

    pass


class ConfigFileError(ConfigurationError):
    """Exception raised when the configuration file cannot be read or parsed."""

    pass


# =============================================================================
# Listing Errors
# =============================================================================


class ListingFetchError(NerdfetchError):
    """
    Exception raised when the font listing cannot be retrieved.

    Covers network failures, non-OK HTTP responses, and release payloads
    that are not shaped like a GitHub release.
    """

    pass


# =============================================================================
# Download Errors
# =============================================================================


class DownloadError(NerdfetchError):
    """
    Base exception for download-related errors.

    Attributes:
        url: The URL that was being downloaded when the error occurred.
        identifier: The font identifier the download belonged to.
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        identifier: Optional[str] = None,
        details: Optional[str] = None,
    ) -> None:
        super().__init__(message, details)
        self.url = url
        self.identifier = identifier


class NetworkError(DownloadError):
    """
    Exception raised for network-level failures.

    This includes:
    - The network being unreachable before any work starts
    - Connection timeouts and DNS failures during a download
    """

    pass


class HTTPError(DownloadError):
    """
    Exception raised when the server answers a download with an error status.

    Attributes:
        status_code: The HTTP status code returned by the server.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
        identifier: Optional[str] = None,
        details: Optional[str] = None,
    ) -> None:
        super().__init__(message, url, identifier, details)
        self.status_code = status_code


# =============================================================================
# Extraction Errors
# =============================================================================


class ExtractionError(NerdfetchError):
    """
    Exception raised when a downloaded archive cannot be extracted.

    Attributes:
        archive_path: Path of the archive that failed to extract.
    """

    def __init__(
        self,
        message: str,
        archive_path: Optional[str] = None,
        details: Optional[str] = None,
    ) -> None:
        super().__init__(message, details)
        self.archive_path = archive_path
