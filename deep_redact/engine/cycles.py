# deep_redact/engine/cycles.py

"""Cycle normalizer run before traversal.

Replaces every container that is its own ancestor along the current descent
with a circular marker. Containers shared between sibling branches are not
cycles and are left untouched.
"""

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Dict, List, Optional, Union

from deep_redact.core.definitions import MARKER_KEY, Kind

logger = logging.getLogger(__name__)


def circular_marker(original_path: str, current_path: str) -> Dict[str, str]:
    """Builds the marker that stands in for a repeated ancestor.

    Args:
        original_path: Dot path of the ancestor occurrence ('' for the root)
        current_path: Dot path where the ancestor was reached again

    Returns:
        Marker mapping
    """
    return {
        MARKER_KEY: Kind.CIRCULAR,
        "original_path": original_path,
        "current_path": current_path,
    }


def _is_walkable(value: Any) -> bool:
    return isinstance(value, (Mapping, list, tuple))


def _join(path: str, key: Union[str, int]) -> str:
    return f"{path}.{key}" if path else str(key)


def normalize(value: Any, markers: Optional[List[Dict[str, str]]] = None) -> Any:
    """Returns value with self-ancestry replaced by circular markers.

    Containers are copied only along branches that contain a cycle; the input
    is never mutated. Rebuilt non-dict mappings are wrapped in a read-only
    MappingProxyType so they keep their map-like kind.

    Args:
        value: Root of the value graph
        markers: When given, every circular marker created is appended to it

    Returns:
        Cycle-free value graph
    """
    # id -> path, for containers on the current descent only
    ancestors: Dict[int, str] = {}

    def visit(node: Any, path: str) -> Any:
        if not _is_walkable(node):
            return node

        node_id = id(node)
        if node_id in ancestors:
            logger.debug(
                "Circular reference replaced",
                extra={"original_path": ancestors[node_id], "current_path": path},
            )
            marker = circular_marker(ancestors[node_id], path)
            if markers is not None:
                markers.append(marker)
            return marker

        ancestors[node_id] = path
        try:
            if isinstance(node, Mapping):
                return _visit_mapping(node, path)
            return _visit_sequence(node, path)
        finally:
            del ancestors[node_id]

    def _visit_mapping(node: Mapping, path: str) -> Any:
        changed = False
        rebuilt = {}
        for key, child in node.items():
            processed = visit(child, _join(path, key))
            rebuilt[key] = processed
            if processed is not child:
                changed = True

        if not changed:
            return node
        return rebuilt if isinstance(node, dict) else MappingProxyType(rebuilt)

    def _visit_sequence(node: Any, path: str) -> Any:
        changed = False
        rebuilt = []
        for index, child in enumerate(node):
            processed = visit(child, _join(path, index))
            rebuilt.append(processed)
            if processed is not child:
                changed = True

        if not changed:
            return node
        return rebuilt if isinstance(node, list) else tuple(rebuilt)

    return visit(value, "")
