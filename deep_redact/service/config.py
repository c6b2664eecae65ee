# deep_redact/service/config.py

"""Library configuration using Pydantic models and Pydantic Settings.

``Settings`` supplies environment-driven defaults; ``RedactionConfig`` is the
immutable configuration a ``Redactor`` is built from.
"""

import re
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from deep_redact.core.definitions import DEFAULT_REPLACEMENT, Kind, TypeTag
from deep_redact.engine.standard import ORGANISED_STANDARD_TRANSFORMERS
from deep_redact.logic.rewriters import get_rewriter

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

Segment = Union[int, str, re.Pattern]
ReplacementValue = Union[str, Callable[[Any], Any]]


class Settings(BaseSettings):
    """Global library settings.

    Loads values from environment variables (prefix 'DEEP_REDACT_') or .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="DEEP_REDACT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    replacement: str = Field(
        default=DEFAULT_REPLACEMENT, description="Default replacement token."
    )

    serialise: bool = Field(
        default=False, description="Return redacted output as JSON text by default."
    )

    enable_logging: bool = Field(
        default=False, description="Emit a DEBUG trace of every redaction decision."
    )

    log_level: str = Field(default="INFO", description="Level used by configure_logging.")

    config_path: Optional[Path] = Field(
        default=None,
        description="YAML file used to configure the default redaction service.",
    )

    @field_validator("replacement")
    @classmethod
    def validate_replacement(cls, v: str) -> str:
        """Ensure the default replacement is not empty."""
        if not v:
            raise ValueError("Replacement token cannot be empty")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is a standard level name."""
        if v.upper() not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {v}")
        return v.upper()


# Singleton settings instance
settings = Settings()


def _check_types(v: Optional[List[str]]) -> Optional[List[str]]:
    if v is None:
        return v
    unknown = sorted(set(v) - TypeTag.ALL)
    if unknown:
        raise ValueError(f"Unknown type tags: {unknown}")
    return v


class RuleOverrides(BaseModel):
    """Per-rule overrides; unset fields inherit the global defaults."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True, extra="forbid")

    fuzzy_key_match: Optional[bool] = None
    case_sensitive_key_match: Optional[bool] = None
    remove: Optional[bool] = None
    replacement: Optional[ReplacementValue] = None
    replace_string_by_length: Optional[bool] = None
    retain_structure: Optional[bool] = None
    types: Optional[List[str]] = None

    @field_validator("types")
    @classmethod
    def validate_types(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _check_types(v)

    def overrides(self) -> Dict[str, Any]:
        """Returns the override fields as keyword arguments."""
        return {
            "fuzzy_key_match": self.fuzzy_key_match,
            "case_sensitive_key_match": self.case_sensitive_key_match,
            "remove": self.remove,
            "replacement": self.replacement,
            "replace_string_by_length": self.replace_string_by_length,
            "retain_structure": self.retain_structure,
            "types": self.types,
        }


class KeyRule(RuleOverrides):
    """A flat key, matched at any depth."""

    key: Union[str, re.Pattern]


class PathRule(RuleOverrides):
    """A path pattern such as ['user', 'address', '*'] or 'user.address.*'."""

    path: Union[List[Segment], str]

    @field_validator("path")
    @classmethod
    def validate_path(cls, v: Union[List[Segment], str]) -> Union[List[Segment], str]:
        """Ensure the pattern has at least one segment."""
        if isinstance(v, str) and not v.strip("."):
            raise ValueError("Path pattern cannot be empty")
        if not isinstance(v, str) and not v:
            raise ValueError("Path pattern cannot be empty")
        return v


class StringTestRule(BaseModel):
    """A string-content test with a rewriter for partial masking."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True, extra="forbid")

    pattern: re.Pattern
    rewriter: Union[str, Callable[[str, re.Pattern], str]]

    @field_validator("rewriter")
    @classmethod
    def resolve_rewriter(cls, v: Any) -> Callable[[str, re.Pattern], str]:
        """Resolve rewriter names through the rewriter lookup."""
        if isinstance(v, str):
            rewriter = get_rewriter(v)
            if rewriter is None:
                raise ValueError(f"Unknown rewriter: {v}")
            return rewriter
        return v


class TransformerTable(BaseModel):
    """Transformers keyed by type tag and by kind."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True, extra="forbid")

    by_type: Dict[str, List[Callable[..., Any]]] = Field(default_factory=dict)
    by_kind: Dict[str, List[Callable[..., Any]]] = Field(default_factory=dict)

    @field_validator("by_kind")
    @classmethod
    def validate_kinds(cls, v: Dict[str, List[Callable[..., Any]]]) -> Dict[str, List[Callable[..., Any]]]:
        """Ensure every kind is one the classifier can produce."""
        unknown = sorted(set(v) - Kind.ALL)
        if unknown:
            raise ValueError(f"Unknown kinds: {unknown}")
        return v


def _standard_table() -> TransformerTable:
    return TransformerTable(**ORGANISED_STANDARD_TRANSFORMERS)


class RedactionConfig(BaseModel):
    """Configuration for a Redactor. Immutable once created.

    Attributes:
        blacklisted_keys: Flat keys redacted at any depth
        paths: Path patterns, checked before blacklisted_keys
        string_tests: Patterns (whole-string redaction) or StringTestRule
        fuzzy_key_match: Default substring matching for literal segments
        case_sensitive_key_match: Default case sensitivity for literal segments
        retain_structure: Keep redacted containers, replacing their leaves
        remove: Remove redacted values instead of replacing them
        replace_string_by_length: Repeat the token once per character
        replacement: Replacement token or callable
        types: Type tags of scalars that may be redacted
        transformers: Flat fallback list or TransformerTable
        serialise: Return JSON text instead of a value
        serialize: Alias of serialise
        enable_logging: Emit a DEBUG trace of every redaction decision
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True, extra="forbid")

    blacklisted_keys: List[Union[str, re.Pattern, KeyRule]] = Field(default_factory=list)
    paths: List[Union[PathRule, List[Segment], str]] = Field(default_factory=list)
    string_tests: List[Union[re.Pattern, StringTestRule]] = Field(default_factory=list)

    fuzzy_key_match: bool = False
    case_sensitive_key_match: bool = True
    retain_structure: bool = False
    remove: bool = False
    replace_string_by_length: bool = False
    replacement: ReplacementValue = Field(default_factory=lambda: settings.replacement)
    types: List[str] = Field(default_factory=lambda: [TypeTag.STR])

    transformers: Union[List[Callable[..., Any]], TransformerTable] = Field(
        default_factory=_standard_table
    )

    serialise: Optional[bool] = None
    serialize: Optional[bool] = None
    enable_logging: bool = Field(default_factory=lambda: settings.enable_logging)

    @field_validator("types")
    @classmethod
    def validate_types(cls, v: List[str]) -> List[str]:
        return _check_types(v)

    @property
    def should_serialise(self) -> bool:
        """Resolves serialise / serialize against the settings default."""
        if self.serialise is not None:
            return self.serialise
        if self.serialize is not None:
            return self.serialize
        return settings.serialise
