# deep_redact/core/domain.py

"""Domain models shared across the redaction engine."""

from dataclasses import dataclass
from re import Pattern
from typing import Any, Callable, Optional, Tuple, Union

PathSegment = Union[str, int]
Path = Tuple[PathSegment, ...]


class _Removed:
    """Sentinel for a value that must be omitted from its parent."""

    _instance: Optional["_Removed"] = None

    def __new__(cls) -> "_Removed":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "REMOVED"

    def __bool__(self) -> bool:
        return False


REMOVED = _Removed()


def format_path(path: Path) -> str:
    """Returns the dot-joined textual form of a path (root is '')."""
    return ".".join(str(segment) for segment in path)


@dataclass(frozen=True)
class Classification:
    """Result of classifying a value.

    Attributes:
        type_tag: Primitive tag (see ``TypeTag``)
        kind: Structured kind (see ``Kind``), or None for plain values
    """

    type_tag: str
    kind: Optional[str] = None


@dataclass(frozen=True)
class LiteralReplacement:
    """Replacement by a fixed token."""

    text: str

    def resolve(self, value: Any, by_length: bool = False) -> Any:
        if by_length and isinstance(value, str):
            return self.text * len(value)
        return self.text


@dataclass(frozen=True)
class ComputedReplacement:
    """Replacement computed from the original value."""

    compute: Callable[[Any], Any]

    def resolve(self, value: Any, by_length: bool = False) -> Any:
        return self.compute(value)


Replacement = Union[LiteralReplacement, ComputedReplacement]


def make_replacement(value: Union[str, Callable[[Any], Any]]) -> Replacement:
    """Wraps a configured replacement in its tagged variant.

    Args:
        value: Replacement token or callable

    Returns:
        ComputedReplacement for callables, LiteralReplacement otherwise
    """
    if callable(value):
        return ComputedReplacement(value)
    return LiteralReplacement(str(value))


@dataclass(frozen=True)
class StringTest:
    """A string-content test.

    Attributes:
        pattern: Compiled pattern searched in the string
        rewriter: Optional callable ``(value, pattern) -> str``. When absent a
            match redacts the whole string.
    """

    pattern: Pattern
    rewriter: Optional[Callable[[str, Pattern], str]] = None


@dataclass
class Frame:
    """One pending node of the traversal stack.

    ``in_marker`` is set for children of a marker object the engine produced
    (a transformer output or a circular marker).
    """

    parent: Any
    key: PathSegment
    value: Any
    path: Path
    redacting: bool = False
    policy: Any = None
    in_marker: bool = False
