# deep_redact/service/pipeline.py

"""Main redaction entry points: the Redactor wrapper and the default service."""

import json
import logging
import re
import threading
from typing import Any, List, Optional

from deep_redact.core.definitions import Segment
from deep_redact.core.domain import StringTest
from deep_redact.core.exceptions import ConfigurationError, InitializationError
from deep_redact.core.loader import load_from_yaml
from deep_redact.engine.matcher import PathPattern, split_dotted
from deep_redact.engine.transformers import TransformerRegistry
from deep_redact.engine.traversal import TraversalEngine
from deep_redact.logic.policy import RedactionPolicy, StringPipeline
from deep_redact.service.config import (
    KeyRule,
    PathRule,
    RedactionConfig,
    StringTestRule,
    settings,
)

logger = logging.getLogger(__name__)


def _default_policy(config: RedactionConfig) -> RedactionPolicy:
    return RedactionPolicy().merged(
        fuzzy_key_match=config.fuzzy_key_match,
        case_sensitive_key_match=config.case_sensitive_key_match,
        remove=config.remove,
        replacement=config.replacement,
        replace_string_by_length=config.replace_string_by_length,
        retain_structure=config.retain_structure,
        types=config.types,
    )


def compile_patterns(config: RedactionConfig, defaults: RedactionPolicy) -> List[PathPattern]:
    """Compiles path rules and flat keys, in evaluation order.

    Args:
        config: Redaction configuration
        defaults: Global policy that unset rule fields inherit

    Returns:
        Path patterns: ``paths`` first, then ``blacklisted_keys`` as ``('**', key)``
    """
    patterns: List[PathPattern] = []

    for rule in config.paths:
        if isinstance(rule, PathRule):
            segments = split_dotted(rule.path) if isinstance(rule.path, str) else rule.path
            policy = defaults.merged(**rule.overrides())
        else:
            segments = split_dotted(rule) if isinstance(rule, str) else rule
            policy = defaults
        patterns.append(PathPattern.compile(segments, policy))

    for key in config.blacklisted_keys:
        if isinstance(key, KeyRule):
            patterns.append(
                PathPattern.compile((Segment.ANY_DEPTH, key.key), defaults.merged(**key.overrides()))
            )
        else:
            patterns.append(PathPattern.compile((Segment.ANY_DEPTH, key), defaults))

    return patterns


def compile_string_tests(config: RedactionConfig) -> List[StringTest]:
    """Turns configured string tests into StringTest values."""
    tests: List[StringTest] = []
    for test in config.string_tests:
        if isinstance(test, StringTestRule):
            tests.append(StringTest(pattern=test.pattern, rewriter=test.rewriter))
        elif isinstance(test, re.Pattern):
            tests.append(StringTest(pattern=test))
    return tests


def build_engine(config: RedactionConfig) -> TraversalEngine:
    """Compiles a configuration into a reusable traversal engine.

    Args:
        config: Redaction configuration

    Returns:
        TraversalEngine holding the compiled patterns, tests and registry
    """
    defaults = _default_policy(config)
    patterns = compile_patterns(config, defaults)
    string_tests = compile_string_tests(config)
    registry = TransformerRegistry.from_config(config.transformers)

    logger.debug(
        "Redaction engine compiled",
        extra={
            "pattern_count": len(patterns),
            "string_test_count": len(string_tests),
        },
    )

    return TraversalEngine(
        patterns=patterns,
        string_pipeline=StringPipeline(string_tests, defaults),
        defaults=defaults,
        registry=registry,
        enable_logging=config.enable_logging,
    )


class Redactor:
    """Deep redaction of nested values.

    Usage:
        redactor = Redactor(blacklisted_keys=["password"])
        redactor.redact({"password": "secret", "user": "bob"})
        # {'password': '[REDACTED]', 'user': 'bob'}

    The compiled configuration is immutable, so one instance can be shared
    across threads and reused for any number of calls.
    """

    def __init__(self, config: Optional[RedactionConfig] = None, **options: Any) -> None:
        """Initialize the redactor.

        Args:
            config: Complete configuration. Mutually exclusive with options.
            **options: RedactionConfig fields, used when config is omitted

        Raises:
            ConfigurationError: If both config and options are given.
            pydantic.ValidationError: If options do not form a valid config.
        """
        if config is not None and options:
            raise ConfigurationError("Pass either a RedactionConfig or keyword options, not both")

        self.config = config if config is not None else RedactionConfig(**options)
        self._engine = build_engine(self.config)
        self._serialise = self.config.should_serialise

    @property
    def engine(self) -> TraversalEngine:
        return self._engine

    def redact(self, value: Any) -> Any:
        """Redacts a value, returning JSON text when serialisation is enabled.

        Raises:
            TypeError: From json.dumps, when serialising a value no
                transformer converted.
        """
        redacted = self._engine.traverse(value)
        return json.dumps(redacted) if self._serialise else redacted

    def __repr__(self) -> str:
        return (
            f"<Redactor "
            f"patterns={len(self._engine.patterns)} "
            f"serialise={self._serialise}>"
        )


class RedactionService:
    """Singleton holder for the default Redactor.

    The default instance is configured from ``settings``, and from the YAML
    file named by ``settings.config_path`` when set.
    """

    _instance: Optional[Redactor] = None
    _lock = threading.Lock()

    @classmethod
    def get_instance(cls) -> Redactor:
        """Returns the singleton redactor instance.

        Returns:
            Initialized Redactor

        Raises:
            InitializationError: If the redactor cannot be built
        """
        if cls._instance is None:
            with cls._lock:
                # Double-checked locking pattern
                if cls._instance is None:
                    try:
                        logger.info("Initializing default redactor")
                        cls._instance = Redactor(cls._load_config())
                        logger.info("Default redactor initialized successfully")

                    except Exception as e:
                        logger.error("Failed to initialize default redactor", exc_info=True)
                        raise InitializationError("Default redactor initialization failed") from e

        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drops the default instance so the next call rebuilds it."""
        with cls._lock:
            cls._instance = None

    @staticmethod
    def _load_config() -> RedactionConfig:
        if settings.config_path is None:
            return RedactionConfig()
        return load_from_yaml(settings.config_path)


def redact(value: Any) -> Any:
    """Redacts a value with the default redactor.

    Args:
        value: Value graph to redact

    Returns:
        Redacted value, or JSON text when serialisation is enabled
    """
    return RedactionService.get_instance().redact(value)
