# deep_redact/engine/standard.py

"""Built-in transformers for values a JSON serializer cannot represent.

Each transformer returns its input unchanged when the value is not of the
kind it handles, so the same functions work as kind-keyed entries and as
flat fallbacks.
"""

import re
import traceback
from collections.abc import Mapping, Set
from typing import Any, Dict, Optional

from deep_redact.core.definitions import MARKER_KEY, Kind, TypeTag
from deep_redact.engine.transformers import type_tag, value_kind

# Inline-flag letters, in the order Python prints them.
_REGEX_FLAG_LETTERS = (
    (re.ASCII, "a"),
    (re.IGNORECASE, "i"),
    (re.LOCALE, "L"),
    (re.MULTILINE, "m"),
    (re.DOTALL, "s"),
    (re.VERBOSE, "x"),
)


def transform_bigint(value: Any, key: Any = None, reference_map: Optional[Dict] = None) -> Any:
    if type_tag(value) != TypeTag.BIGINT:
        return value
    return {"value": {"radix": 10, "number": str(value)}, MARKER_KEY: Kind.BIGINT}


def transform_date(value: Any, key: Any = None, reference_map: Optional[Dict] = None) -> Any:
    if value_kind(value) != Kind.DATE:
        return value
    return {"datetime": value.isoformat(), MARKER_KEY: Kind.DATE}


def transform_error(value: Any, key: Any = None, reference_map: Optional[Dict] = None) -> Any:
    if not isinstance(value, BaseException):
        return value

    stack = None
    if value.__traceback__ is not None:
        stack = "".join(
            traceback.format_exception(type(value), value, value.__traceback__)
        )

    return {
        MARKER_KEY: Kind.ERROR,
        "value": {
            "type": type(value).__name__,
            "message": str(value),
            "stack": stack,
        },
    }


def transform_map(value: Any, key: Any = None, reference_map: Optional[Dict] = None) -> Any:
    if not isinstance(value, Mapping) or isinstance(value, dict):
        return value
    return {"value": dict(value.items()), MARKER_KEY: Kind.MAP}


def transform_regex(value: Any, key: Any = None, reference_map: Optional[Dict] = None) -> Any:
    if not isinstance(value, re.Pattern):
        return value

    source = value.pattern
    if isinstance(source, bytes):
        source = source.decode("utf-8", errors="backslashreplace")

    flags = "".join(letter for flag, letter in _REGEX_FLAG_LETTERS if value.flags & flag)
    return {MARKER_KEY: Kind.REGEX, "value": {"source": source, "flags": flags}}


def transform_set(value: Any, key: Any = None, reference_map: Optional[Dict] = None) -> Any:
    if not isinstance(value, Set):
        return value
    return {"value": list(value), MARKER_KEY: Kind.SET}


def transform_url(value: Any, key: Any = None, reference_map: Optional[Dict] = None) -> Any:
    if value_kind(value) != Kind.URL:
        return value

    geturl = getattr(value, "geturl", None)
    text = geturl() if geturl is not None else str(value)
    if isinstance(text, bytes):
        text = text.decode("utf-8", errors="backslashreplace")
    return {"value": text, MARKER_KEY: Kind.URL}


# Flat list, every entry registered as a fallback.
STANDARD_TRANSFORMERS = [
    transform_bigint,
    transform_date,
    transform_error,
    transform_map,
    transform_regex,
    transform_set,
    transform_url,
]

# Organised by type tag and kind for direct dispatch.
ORGANISED_STANDARD_TRANSFORMERS = {
    "by_type": {
        TypeTag.BIGINT: [transform_bigint],
    },
    "by_kind": {
        Kind.URL: [transform_url],
        Kind.DATE: [transform_date],
        Kind.ERROR: [transform_error],
        Kind.MAP: [transform_map],
        Kind.SET: [transform_set],
        Kind.REGEX: [transform_regex],
    },
}
