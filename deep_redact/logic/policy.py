# deep_redact/logic/policy.py

"""Redaction policy resolution and the string-content pipeline."""

import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, FrozenSet, Iterable, Optional, Sequence, Tuple

from deep_redact.core.definitions import DEFAULT_REPLACEMENT, TypeTag
from deep_redact.core.domain import (
    REMOVED,
    ComputedReplacement,
    LiteralReplacement,
    Replacement,
    StringTest,
    make_replacement,
)
from deep_redact.engine.transformers import type_tag

logger = logging.getLogger(__name__)

# Default for `source` when the value was not transformed.
_SAME = object()

# Fields a rule may override; everything else comes from the global policy.
OVERRIDE_FIELDS = (
    "fuzzy_key_match",
    "case_sensitive_key_match",
    "remove",
    "replacement",
    "replace_string_by_length",
    "retain_structure",
    "types",
)


@dataclass(frozen=True)
class RedactionPolicy:
    """Resolved redaction settings for a rule or for the global defaults.

    Attributes:
        fuzzy_key_match: Literal segments match by substring
        case_sensitive_key_match: When False keys are normalised before comparing
        remove: Omit redacted values instead of replacing them
        replacement: Tagged replacement variant
        replace_string_by_length: Repeat a literal token once per character
        retain_structure: Keep redacted containers and replace their leaves
        types: Type tags of scalars that may be redacted
    """

    fuzzy_key_match: bool = False
    case_sensitive_key_match: bool = True
    remove: bool = False
    replacement: Replacement = LiteralReplacement(DEFAULT_REPLACEMENT)
    replace_string_by_length: bool = False
    retain_structure: bool = False
    types: FrozenSet[str] = frozenset({TypeTag.STR})

    def merged(self, **overrides: Any) -> "RedactionPolicy":
        """Returns a copy with every non-None override applied.

        Args:
            **overrides: Any of ``OVERRIDE_FIELDS``; ``replacement`` may be a
                token or a callable and ``types`` any iterable of tags

        Returns:
            New RedactionPolicy
        """
        changes = {}
        for name in OVERRIDE_FIELDS:
            value = overrides.get(name)
            if value is None:
                continue
            if name == "replacement":
                value = make_replacement(value)
            elif name == "types":
                value = frozenset(value)
            changes[name] = value
        return dataclasses.replace(self, **changes)

    def permits(self, value: Any) -> bool:
        """Returns True if a scalar of this type may be redacted."""
        return type_tag(value) in self.types

    def redact(self, value: Any, source: Any = _SAME) -> Any:
        """Applies remove / replacement precedence to a single value.

        Retain-structure is resolved by the traversal engine before this is
        reached, so containers arriving here collapse.

        Args:
            value: Value being replaced, after any transformer ran
            source: Value as it appeared in the input; a computed replacement
                is called with it. Defaults to ``value``.

        Returns:
            REMOVED, the computed replacement, the length-preserving token for
            strings, or the literal token
        """
        if self.remove:
            return REMOVED
        if isinstance(self.replacement, ComputedReplacement):
            return self.replacement.resolve(value if source is _SAME else source)
        return self.replacement.resolve(value, self.replace_string_by_length)


class StringPipeline:
    """Ordered string-content tests; the first applicable test wins."""

    def __init__(self, tests: Iterable[StringTest], policy: RedactionPolicy) -> None:
        self._tests: Tuple[StringTest, ...] = tuple(tests)
        self._policy = policy

    @property
    def tests(self) -> Sequence[StringTest]:
        return self._tests

    def apply(self, value: str) -> Any:
        """Runs the tests against a string.

        Args:
            value: String to test

        Returns:
            The rewritten string, the redaction result (possibly REMOVED), or
            the original string when no test applies
        """
        test = self.find(value)
        if test is None:
            return value
        if test.rewriter is not None:
            return test.rewriter(value, test.pattern)
        if not self._policy.permits(value):
            return value
        return self._policy.redact(value)

    def find(self, value: str) -> Optional[StringTest]:
        for test in self._tests:
            if test.pattern.search(value) is not None:
                return test
        return None

    def __len__(self) -> int:
        return len(self._tests)
