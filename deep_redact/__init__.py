# deep_redact/__init__.py

"""Deep redaction of nested data.

Example:
    from deep_redact import Redactor

    redactor = Redactor(blacklisted_keys=["password"], paths=["user.address.*"])
    redactor.redact(payload)
"""

from deep_redact.core.exceptions import (
    ConfigurationError,
    InitializationError,
    RedactionError,
)
from deep_redact.engine.standard import (
    ORGANISED_STANDARD_TRANSFORMERS,
    STANDARD_TRANSFORMERS,
)
from deep_redact.engine.transformers import TransformerRegistry
from deep_redact.service.config import (
    KeyRule,
    PathRule,
    RedactionConfig,
    StringTestRule,
    TransformerTable,
)
from deep_redact.service.pipeline import Redactor, redact

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "InitializationError",
    "KeyRule",
    "ORGANISED_STANDARD_TRANSFORMERS",
    "PathRule",
    "RedactionConfig",
    "RedactionError",
    "Redactor",
    "STANDARD_TRANSFORMERS",
    "StringTestRule",
    "TransformerRegistry",
    "TransformerTable",
    "redact",
]
