"""Exceptions raised by the FHA borrowing-power engine.

Every error derives from FHACoreError. Business-rule outcomes (FICO floor,
low down payment, non-convergence, loan limit warnings) are never raised.
They are reported on the result through ``meets_minimum_requirements`` and
``warnings``. Exceptions are reserved for invalid call shapes, inconsistent
configuration, and collaborator failures.
"""

from typing import Any, Optional


class FHACoreError(Exception):
    """Root of the engine's exception hierarchy.

    Subclasses add their context keys to ``details`` so a caller can log
    any engine error with ``logger.error(..., **error.details)``.
    ``recoverable`` tells the caller whether retrying with different input
    or another collaborator can succeed.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = dict(details) if details else {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        name = type(self).__name__
        return (
            f"{name}(message={self.message!r}, details={self.details!r}, "
            f"recoverable={self.recoverable!r})"
        )


class ValidationError(FHACoreError):
    """Error raised when a calculation is called with an invalid shape.

    Attributes:
        field: The argument that failed validation.
        value: The invalid value.
        constraint: The validation constraint that was violated.
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        constraint: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        """Initialize ValidationError.

        Args:
            message: Human-readable error description.
            field: The name of the argument that failed validation.
            value: The invalid value.
            constraint: Description of the validation rule violated.
            details: Optional dictionary with additional context.
            recoverable: Whether the error can be fixed by the caller.
                Defaults to True.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.field = field
        self.value = value
        self.constraint = constraint

        if field:
            self.details["field"] = field
        if value is not None:
            self.details["value"] = value
        if constraint:
            self.details["constraint"] = constraint


class ConfigurationError(FHACoreError):
    """Error raised when engine configuration is inconsistent.

    Attributes:
        config_key: The configuration key that is problematic.
        expected: Description of the expected value.
        actual: The actual value found (if any).
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: Optional[str] = None,
        expected: Optional[str] = None,
        actual: Optional[Any] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize ConfigurationError.

        Args:
            message: Human-readable error description.
            config_key: The name of the configuration key that is problematic.
            expected: Description of what value was expected.
            actual: The actual value found.
            details: Optional dictionary with additional context.
            recoverable: Whether the error can be fixed at runtime.
                Defaults to False.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.config_key = config_key
        self.expected = expected
        self.actual = actual

        if config_key:
            self.details["config_key"] = config_key
        if expected:
            self.details["expected"] = expected
        if actual is not None:
            self.details["actual"] = actual


class RateProviderError(FHACoreError):
    """Error raised when an interest-rate provider cannot supply a rate.

    The engine does not retry or fall back on its own; the error propagates
    to the caller, who may retry with another provider.

    Attributes:
        provider: Name of the provider that failed.
        source: The upstream source the provider was reading (if any).
    """

    def __init__(
        self,
        message: str,
        *,
        provider: Optional[str] = None,
        source: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        """Initialize RateProviderError.

        Args:
            message: Human-readable error description.
            provider: Name of the provider that failed.
            source: Upstream source identifier.
            details: Optional dictionary with additional context.
            recoverable: Whether a retry may succeed. Defaults to True since
                rate feeds are usually transiently unavailable.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.provider = provider
        self.source = source

        if provider:
            self.details["provider"] = provider
        if source:
            self.details["source"] = source


__all__ = [
    "FHACoreError",
    "ValidationError",
    "ConfigurationError",
    "RateProviderError",
]
