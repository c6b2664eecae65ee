# deep_redact/engine/transformers.py

"""Value classification and the kind-keyed transformer registry."""

import datetime
import logging
import re
from collections.abc import Mapping, Set
from typing import Any, Callable, Dict, List, Optional, Union
from urllib.parse import ParseResult, ParseResultBytes, SplitResult, SplitResultBytes

import pydantic_core
from pydantic import AnyUrl

from deep_redact.core.definitions import MAX_SAFE_INTEGER, Kind, TypeTag
from deep_redact.core.domain import Classification

logger = logging.getLogger(__name__)

Transformer = Callable[..., Any]

_DATE_TYPES = (datetime.date, datetime.datetime, datetime.time)
_URL_TYPES = (
    SplitResult,
    ParseResult,
    SplitResultBytes,
    ParseResultBytes,
    AnyUrl,
    pydantic_core.Url,
)


def type_tag(value: Any) -> str:
    """Returns the primitive type tag of a value."""
    if isinstance(value, str):
        return TypeTag.STR
    if isinstance(value, bool):
        return TypeTag.BOOL
    if isinstance(value, int):
        return TypeTag.BIGINT if abs(value) > MAX_SAFE_INTEGER else TypeTag.INT
    if isinstance(value, float):
        return TypeTag.FLOAT
    if value is None:
        return TypeTag.NONE
    if isinstance(value, (bytes, bytearray)):
        return TypeTag.BYTES
    if isinstance(value, (dict, list, tuple)):
        return TypeTag.OBJECT
    if callable(value):
        return TypeTag.CALLABLE
    return TypeTag.OBJECT


def value_kind(value: Any) -> Optional[str]:
    """Returns the structured kind of a value, or None for plain values."""
    if isinstance(value, _URL_TYPES):
        return Kind.URL
    if isinstance(value, _DATE_TYPES):
        return Kind.DATE
    if isinstance(value, BaseException):
        return Kind.ERROR
    if isinstance(value, re.Pattern):
        return Kind.REGEX
    if isinstance(value, Mapping) and not isinstance(value, dict):
        return Kind.MAP
    if isinstance(value, Set):
        return Kind.SET
    return None


def classify(value: Any) -> Classification:
    """Classifies a value by primitive type tag and structured kind."""
    return Classification(type_tag=type_tag(value), kind=value_kind(value))


class TransformerRegistry:
    """Registry organising transformers by type tag and kind.

    Transformers are called as ``transformer(value, key, reference_map)`` and
    signal "not applicable" by returning the value object itself.
    """

    def __init__(self) -> None:
        self._type_transformers: Dict[str, List[Transformer]] = {}
        self._kind_transformers: Dict[str, List[Transformer]] = {}
        self._fallback_transformers: List[Transformer] = []

    @classmethod
    def from_config(
        cls, transformers: Union[List[Transformer], Any, None]
    ) -> "TransformerRegistry":
        """Builds a registry from a flat list or a by-type/by-kind table.

        Args:
            transformers: Either a list (every entry registered as a fallback)
                or a table with ``by_type`` and ``by_kind`` entries (a mapping
                or an object with those attributes)

        Returns:
            Populated TransformerRegistry
        """
        registry = cls()
        if transformers is None:
            return registry

        if isinstance(transformers, (list, tuple)):
            for transformer in transformers:
                registry.add_fallback_transformer(transformer)
            return registry

        if isinstance(transformers, Mapping):
            by_type = transformers.get("by_type")
            by_kind = transformers.get("by_kind")
        else:
            by_type = getattr(transformers, "by_type", None)
            by_kind = getattr(transformers, "by_kind", None)

        for tag, tag_transformers in (by_type or {}).items():
            for transformer in tag_transformers or []:
                registry.add_type_transformer(tag, transformer)

        for kind, kind_transformers in (by_kind or {}).items():
            if kind not in Kind.ALL:
                logger.warning(f"Ignoring transformers for unknown kind: {kind}")
                continue
            for transformer in kind_transformers or []:
                registry.add_kind_transformer(kind, transformer)

        return registry

    def add_type_transformer(self, tag: str, transformer: Transformer) -> None:
        """Adds a transformer for a primitive type tag (e.g. 'bigint')."""
        self._type_transformers.setdefault(tag, []).append(transformer)

    def add_kind_transformer(self, kind: str, transformer: Transformer) -> None:
        """Adds a transformer for a structured kind (e.g. 'date')."""
        self._kind_transformers.setdefault(kind, []).append(transformer)

    def add_fallback_transformer(self, transformer: Transformer) -> None:
        """Adds a transformer tried on every non-string value."""
        self._fallback_transformers.append(transformer)

    def get_transformers_for_value(self, value: Any) -> List[Transformer]:
        """Returns the candidate transformers for a value, in trial order."""
        classification = classify(value)
        candidates: List[Transformer] = list(
            self._type_transformers.get(classification.type_tag, [])
        )
        if classification.kind is not None:
            candidates.extend(self._kind_transformers.get(classification.kind, []))
        candidates.extend(self._fallback_transformers)
        return candidates

    def apply(
        self,
        value: Any,
        key: Any = None,
        reference_map: Optional[Dict[int, str]] = None,
    ) -> Any:
        """Applies the first transformer that changes the value.

        Args:
            value: Value to transform
            key: Key of the value in its parent, if any
            reference_map: Identity-keyed map of container paths seen so far

        Returns:
            Transformed value, or the original value when nothing applies
        """
        if isinstance(value, str):
            return value

        for transformer in self.get_transformers_for_value(value):
            transformed = transformer(value, key, reference_map)
            if transformed is not value:
                return transformed

        return value

    def clear(self) -> None:
        """Removes every registered transformer."""
        self._type_transformers.clear()
        self._kind_transformers.clear()
        self._fallback_transformers = []

    def get_registered_transformers(self) -> Dict[str, Any]:
        """Returns a copy of the registrations for debugging."""
        return {
            "types": {tag: list(items) for tag, items in self._type_transformers.items()},
            "kinds": {kind: list(items) for kind, items in self._kind_transformers.items()},
            "fallback": list(self._fallback_transformers),
        }

    def __repr__(self) -> str:
        return (
            f"<TransformerRegistry "
            f"types={len(self._type_transformers)} "
            f"kinds={len(self._kind_transformers)} "
            f"fallback={len(self._fallback_transformers)}>"
        )
