"""Custom exceptions for loading talk definitions."""


class DataError(Exception):
    """Base exception for the data layer."""


class DataLoadError(DataError):
    """Raised when a talks file is missing or is not valid JSON."""


class DataValidationError(DataError):
    """Raised when talk content has the wrong shape."""
