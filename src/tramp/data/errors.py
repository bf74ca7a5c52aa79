"""Custom exceptions for catalog loading and validation."""


class DataError(Exception):
    """Base exception for the data layer."""


class DataLoadError(DataError):
    """Raised when a catalog file is missing or is not valid JSON."""


class DataValidationError(DataError):
    """Raised when catalog content has the wrong shape or types."""


class DataReferenceError(DataError):
    """Raised when one catalog points at an id another catalog lacks."""
