"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class InvalidRequestError(ValidationError):
    """A generation request is structurally unusable (e.g. a missing collection)."""


class SourceError(DomainError):
    """An entry source cannot be read."""


def missing_entry_collection(side: str) -> str:
    """Return message for a request lacking one of its collections."""
    return f"The {side} entry collection is required (got None)"


def source_not_found(path: str) -> str:
    """Return message for a missing entry file."""
    return f"Entry file not found: {path}"


def unsupported_source_extension(path: str) -> str:
    """Return message for an entry file that is not JSON."""
    return f"Entry files must be in JSON format: {path}"


def invalid_source_document(path: str, reason: str) -> str:
    """Return message for an entry file with unreadable content."""
    return f"Could not read entries from {path}: {reason}"


def invalid_direction(value: str) -> str:
    """Return message for an unknown flow direction."""
    return f"Unknown direction '{value}' (expected 'debit' or 'credit')"
