# deep_redact/engine/traversal.py

"""Iterative traversal engine applying redaction policy to a value graph."""

import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Sequence

from deep_redact.core.definitions import MARKER_KEY, Kind
from deep_redact.core.domain import REMOVED, Frame, Path, format_path
from deep_redact.engine.cycles import normalize
from deep_redact.engine.matcher import PathPattern, find_match
from deep_redact.engine.transformers import TransformerRegistry, value_kind
from deep_redact.logic.policy import RedactionPolicy, StringPipeline

logger = logging.getLogger(__name__)


def is_container(value: Any) -> bool:
    """Returns True for mappings and sequences the engine descends into."""
    return isinstance(value, (dict, list, tuple))


def empty_like(value: Any) -> Any:
    """Allocates an empty output container of the same shape."""
    return {} if isinstance(value, Mapping) else []


class TraversalEngine:
    """Produces redacted copies of value graphs.

    The engine holds only compiled, immutable configuration. Every call to
    ``traverse`` allocates its own work stack, reference map and output, so a
    single engine can serve many calls.
    """

    def __init__(
        self,
        patterns: Sequence[PathPattern],
        string_pipeline: StringPipeline,
        defaults: RedactionPolicy,
        registry: TransformerRegistry,
        enable_logging: bool = False,
    ) -> None:
        """Initialize the engine.

        Args:
            patterns: Compiled path patterns in declaration order
            string_pipeline: String-content tests
            defaults: Global redaction policy
            registry: Transformer registry for non-plain kinds
            enable_logging: Emit a DEBUG trace of every redaction decision
        """
        self._patterns = tuple(patterns)
        self._strings = string_pipeline
        self._defaults = defaults
        self._registry = registry
        self._enable_logging = enable_logging

    @property
    def patterns(self) -> Sequence[PathPattern]:
        return self._patterns

    @property
    def defaults(self) -> RedactionPolicy:
        return self._defaults

    @property
    def registry(self) -> TransformerRegistry:
        return self._registry

    def traverse(self, raw: Any) -> Any:
        """Returns a redacted copy of raw.

        Args:
            raw: Root of the value graph; never mutated

        Returns:
            Redacted output. A root string removed by a string test yields None.
        """
        if isinstance(raw, str):
            result = self._strings.apply(raw)
            return None if result is REMOVED else result

        # id -> object for containers the engine created during this call.
        # Holding them keeps their ids, and so reference_map, valid until return.
        produced: Dict[int, Any] = {}

        if value_kind(raw) is not None or not is_container(raw):
            converted = self._registry.apply(raw)
            if not is_container(converted):
                return converted
            if converted is not raw:
                produced[id(converted)] = converted
            raw = converted

        markers: List[Dict[str, str]] = []
        root = normalize(raw, markers)
        for marker in markers:
            produced[id(marker)] = marker

        output = empty_like(root)
        reference_map: Dict[int, str] = {id(root): ""}
        stack: List[Frame] = []
        self._push_children(stack, root, output, (), False, None, id(root) in produced)

        while stack:
            frame = stack.pop()
            value = self._registry.apply(frame.value, frame.key, reference_map)
            if value is not frame.value:
                self._trace(frame.path, "transformed")
                if is_container(value):
                    produced[id(value)] = value

            if not is_container(value):
                result = self._resolve_scalar(value, frame)
            else:
                result = self._resolve_container(
                    value, frame, stack, reference_map, id(value) in produced
                )

            if result is REMOVED:
                self._trace(frame.path, "removed")
                continue

            if isinstance(frame.parent, list):
                frame.parent.append(result)
            else:
                frame.parent[frame.key] = result

        return output

    def _resolve_scalar(self, value: Any, frame: Frame) -> Any:
        policy = frame.policy or self._defaults
        # The kind field of a marker object built by the engine.
        engine_marker = frame.in_marker and frame.key == MARKER_KEY

        if frame.redacting:
            if engine_marker or not policy.permits(value):
                return value
            self._trace(frame.path, "redacted")
            return policy.redact(value, frame.value)

        if frame.policy is not None:
            if not policy.permits(value):
                return value
            self._trace(frame.path, "redacted")
            return policy.redact(value, frame.value)

        if engine_marker:
            return value

        if isinstance(value, str) and len(self._strings):
            result = self._strings.apply(value)
            if result is not value:
                self._trace(frame.path, "rewritten")
            return result

        return value

    def _resolve_container(
        self,
        value: Any,
        frame: Frame,
        stack: List[Frame],
        reference_map: Dict[int, str],
        is_marker: bool,
    ) -> Any:
        policy = frame.policy or self._defaults
        should_redact = frame.redacting or frame.policy is not None
        reference_map[id(value)] = format_path(frame.path)

        if is_marker and isinstance(value, dict) and value.get(MARKER_KEY) == Kind.CIRCULAR:
            self._trace(frame.path, "cycle marker")

        if should_redact and not policy.retain_structure:
            self._trace(frame.path, "collapsed")
            return policy.redact(value, frame.value)

        target = empty_like(value)
        self._push_children(
            stack, value, target, frame.path, should_redact, frame.policy, is_marker
        )
        return target

    def _push_children(
        self,
        stack: List[Frame],
        source: Any,
        target: Any,
        path: Path,
        redacting: bool,
        inherited: Optional[RedactionPolicy],
        in_marker: bool = False,
    ) -> None:
        # Reversed so that popping restores the input order.
        items = list(source.items()) if isinstance(source, Mapping) else list(enumerate(source))
        for key, child in reversed(items):
            child_path = path + (key,)
            match = find_match(self._patterns, child_path)
            policy = match.policy if match is not None else None
            if policy is None and redacting:
                policy = inherited
            stack.append(Frame(target, key, child, child_path, redacting, policy, in_marker))

    def _trace(self, path: Path, action: str) -> None:
        if self._enable_logging:
            logger.debug(
                f"[{format_path(path) or 'root'}] {action}",
                extra={"path": format_path(path), "action": action},
            )
