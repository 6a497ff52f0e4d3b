"""Exceptions raised while constructing contract queries."""

from __future__ import annotations


class QueryError(Exception):
    """Base exception for query construction failures."""


class PermitValidationError(QueryError):
    """Raised when a permit is malformed, incomplete, or out of scope."""


class MissingFieldError(QueryError):
    """Raised when a builder or credential is missing a required field."""


class UnsupportedAuthError(QueryError):
    """Raised when an auth method cannot be applied to a query shape."""
