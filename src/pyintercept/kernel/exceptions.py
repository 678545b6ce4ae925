"""Unified exception hierarchy for pyintercept.

All library exceptions inherit from PyInterceptException, so callers can
catch the base to handle any library error or a subclass for targeted
handling.

Registration and lookup never raise for a missing operation or filter name
(they return ``False`` / ``None``). The exceptions below cover programming
errors only. Exceptions raised by interceptors or by the filtered method
itself are never wrapped: they reach the caller unchanged.
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class PyInterceptException(Exception):
    """Base exception for all pyintercept errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "FILTER_INVALID").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Filter Exceptions
# =============================================================================


class FilterException(PyInterceptException):
    """Errors raised by the filter registry and chain engine."""


class InvalidFilterException(FilterException):
    """A registration was made with an unusable interceptor or option."""


class ChainExhaustedException(FilterException):
    """``next()`` was called with no link left in the chain."""


class UnresolvableTargetException(FilterException):
    """A target identifier could not be bound to a filterable class."""


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationException(PyInterceptException):
    """Configuration could not be loaded or bound."""
