"""\
Error and warnings
==================

Author: Akshay Mestry <xa@mes3.dev>
Created on: Sunday, October 18 2026
Last updated on: Sunday, October 18 2026

This module provides the internal fault classes of this framework. These
are raised when the framework itself is misused or misconfigured, for
instance when an error class is missing from the catalog or the message
parameters do not fit its template. They are deliberately kept apart
from the classified error family in `errata.core.exceptions`.
"""

from __future__ import annotations


__all__: tuple[str, ...] = (
    "BaseError",
    "CatalogError",
    "CatalogLoadError",
    "CatalogLookupError",
    "ConfigValidationError",
    "ErrorClassNotFoundError",
    "MessageParameterError",
)

Error = Exception


class BaseError(Error):
    """Base error class for all internal faults."""


class ConfigValidationError(BaseError):
    """Errors related to configuration validation failure."""


class CatalogError(BaseError):
    """Errors related to the error-class catalog."""


class CatalogLoadError(CatalogError):
    """Errors related to malformed or unreadable catalog data."""


class CatalogLookupError(CatalogError):
    """Errors related to a broken reference into the catalog.

    These are never recoverable. A lookup failure means a call site and
    the catalog disagree, which is a programming error.
    """


class ErrorClassNotFoundError(CatalogLookupError):
    """Errors related to an error class missing from the catalog."""

    def __init__(self, error_class: str) -> None:
        """Initialise the error with the missing error class."""
        super().__init__(f"cannot find error class {error_class!r}")
        self.error_class = error_class


class MessageParameterError(CatalogLookupError):
    """Errors related to parameters not matching a message template."""

    def __init__(self, error_class: str, reason: str) -> None:
        """Initialise the error with the error class and the reason."""
        super().__init__(
            f"invalid message parameters for {error_class!r}: {reason}"
        )
        self.error_class = error_class
