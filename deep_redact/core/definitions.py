# deep_redact/core/definitions.py

"""Constants shared by the classifier, transformers and traversal engine."""

DEFAULT_REPLACEMENT = "[REDACTED]"

# Field every built-in marker object carries; never redacted itself.
MARKER_KEY = "marker"

# Largest integer a JSON consumer can represent exactly.
MAX_SAFE_INTEGER = 2**53 - 1


class TypeTag:
    """Primitive classification of a value."""

    STR = "str"
    BOOL = "bool"
    INT = "int"
    BIGINT = "bigint"
    FLOAT = "float"
    NONE = "none"
    BYTES = "bytes"
    CALLABLE = "callable"
    OBJECT = "object"

    ALL = frozenset({STR, BOOL, INT, BIGINT, FLOAT, NONE, BYTES, CALLABLE, OBJECT})


class Kind:
    """Structured classification for values a plain serializer cannot represent."""

    DATE = "date"
    ERROR = "error"
    MAP = "map"
    SET = "set"
    REGEX = "regex"
    URL = "url"

    # Marker-only kinds
    BIGINT = "bigint"
    CIRCULAR = "circular"

    ALL = frozenset({DATE, ERROR, MAP, SET, REGEX, URL})


class Segment:
    """Wildcard segment matchers for path patterns."""

    ANY = "*"
    ANY_DEPTH = "**"
