# deep_redact/engine/matcher.py

"""Glob-style path pattern matching.

A pattern is a sequence of segment matchers: literals, compiled regexes,
``*`` (exactly one segment) and ``**`` (zero or more segments). Matching uses
the two-pointer wildcard algorithm with a single backtrack checkpoint at the
most recent ``**``.
"""

import re
from dataclasses import dataclass
from enum import Enum
from re import Pattern
from typing import Any, Iterable, NamedTuple, Optional, Sequence, Tuple, Union

from deep_redact.core.definitions import Segment
from deep_redact.core.domain import Path, PathSegment

NON_WORD = re.compile(r"[\W_]+")

RawSegment = Union[str, int, Pattern]


def normalise_key(key: str) -> str:
    """Lower-cases a key and strips separators and other non-word characters."""
    return NON_WORD.sub("", key.lower())


def key_matches(
    key: PathSegment, expected: str, fuzzy: bool = False, case_sensitive: bool = True
) -> bool:
    """Compares a concrete key with a literal using the configured mode.

    Args:
        key: Concrete path segment (integers are compared as text)
        expected: Literal from the pattern
        fuzzy: Substring containment instead of equality
        case_sensitive: When False both sides are normalised first

    Returns:
        True if the key satisfies the literal
    """
    actual = str(key)
    if not case_sensitive:
        actual = normalise_key(actual)
        expected = normalise_key(expected)

    if fuzzy:
        return expected in actual
    return actual == expected


class MatcherType(Enum):
    LITERAL = "literal"
    REGEX = "regex"
    ANY = "any"
    ANY_DEPTH = "any_depth"


class SegmentMatcher(NamedTuple):
    type: MatcherType
    value: Any = None


def compile_segment(segment: RawSegment) -> SegmentMatcher:
    """Turns one configured segment into a matcher."""
    if isinstance(segment, re.Pattern):
        return SegmentMatcher(MatcherType.REGEX, segment)
    if segment == Segment.ANY_DEPTH:
        return SegmentMatcher(MatcherType.ANY_DEPTH)
    if segment == Segment.ANY:
        return SegmentMatcher(MatcherType.ANY)
    return SegmentMatcher(MatcherType.LITERAL, str(segment))


def split_dotted(path: str) -> Tuple[str, ...]:
    """Splits a dotted pattern such as 'user.address.*' into segments."""
    return tuple(part for part in path.split(".") if part)


@dataclass(frozen=True)
class PathPattern:
    """A compiled path pattern together with the policy it applies.

    Attributes:
        matchers: Segment matchers in order
        policy: Redaction policy for matching paths
    """

    matchers: Tuple[SegmentMatcher, ...]
    policy: Any

    @classmethod
    def compile(cls, segments: Iterable[RawSegment], policy: Any) -> "PathPattern":
        return cls(tuple(compile_segment(segment) for segment in segments), policy)

    def _segment_matches(self, matcher: SegmentMatcher, key: PathSegment) -> bool:
        if matcher.type is MatcherType.ANY:
            return True
        if matcher.type is MatcherType.REGEX:
            return matcher.value.search(str(key)) is not None
        return key_matches(
            key,
            matcher.value,
            fuzzy=self.policy.fuzzy_key_match,
            case_sensitive=self.policy.case_sensitive_key_match,
        )

    def matches(self, path: Sequence[PathSegment]) -> bool:
        """Returns True if the concrete path satisfies this pattern."""
        matchers = self.matchers
        path_index = 0
        matcher_index = 0
        # Backtrack checkpoint: matcher index of the last '**' and the path
        # offset it was tried at.
        star_index = -1
        star_path_index = 0

        while path_index < len(path):
            if (
                matcher_index < len(matchers)
                and matchers[matcher_index].type is MatcherType.ANY_DEPTH
            ):
                star_index = matcher_index
                star_path_index = path_index
                matcher_index += 1
            elif matcher_index < len(matchers) and self._segment_matches(
                matchers[matcher_index], path[path_index]
            ):
                matcher_index += 1
                path_index += 1
            elif star_index != -1:
                # Let the last '**' absorb one more segment and retry.
                star_path_index += 1
                path_index = star_path_index
                matcher_index = star_index + 1
            else:
                return False

        while (
            matcher_index < len(matchers)
            and matchers[matcher_index].type is MatcherType.ANY_DEPTH
        ):
            matcher_index += 1

        return matcher_index == len(matchers)


def find_match(patterns: Sequence[PathPattern], path: Path) -> Optional[PathPattern]:
    """Returns the first pattern, in declaration order, that matches path."""
    for pattern in patterns:
        if pattern.matches(path):
            return pattern
    return None
