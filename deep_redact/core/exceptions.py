# deep_redact/core/exceptions.py

"""Custom exception hierarchy for deep_redact.

Only configuration and start-up problems are reported through these types.
Errors raised by user-supplied transformers, replacements and rewriters, and
serialization failures, propagate unchanged.
"""


class RedactionError(Exception):
    """Base exception for all library-specific errors."""

    pass


class ConfigurationError(RedactionError):
    """Raised when configuration loading or validation fails."""

    pass


class InitializationError(RedactionError):
    """Raised when the default redaction service cannot be built."""

    pass
