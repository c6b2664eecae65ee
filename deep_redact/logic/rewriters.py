# deep_redact/logic/rewriters.py

"""Named rewriters for partial, in-place string masking.

A rewriter is called as ``rewriter(value, pattern)`` by the string pipeline
once ``pattern`` has matched ``value`` and returns the new string.
"""

import logging
from re import Match, Pattern
from typing import Callable, Dict, Optional

from deep_redact.core.definitions import DEFAULT_REPLACEMENT

logger = logging.getLogger(__name__)

Rewriter = Callable[[str, Pattern], str]

MASK_CHAR = "*"


def mask_matches(value: str, pattern: Pattern) -> str:
    """Replaces every match with mask characters of the same length."""
    return pattern.sub(lambda m: MASK_CHAR * len(m.group(0)), value)


def redact_matches(value: str, pattern: Pattern) -> str:
    """Replaces every match with the default replacement token."""
    return pattern.sub(DEFAULT_REPLACEMENT, value)


def _mask_local_part(match: Match) -> str:
    text = match.group(0)
    local, at, domain = text.partition("@")
    if not at:
        return text
    return MASK_CHAR * len(local) + at + domain


def mask_email_local_part(value: str, pattern: Pattern) -> str:
    """Masks the part before '@' in every match, keeping the domain.

    Example:
        'mail joe.bloggs@example.com' -> 'mail **********@example.com'
    """
    return pattern.sub(_mask_local_part, value)


_REWRITERS: Dict[str, Rewriter] = {
    "mask": mask_matches,
    "redact": redact_matches,
    "email_local_part": mask_email_local_part,
}


def get_rewriter(name: str) -> Optional[Rewriter]:
    """Looks up a rewriter by name.

    Args:
        name: Registered rewriter name (e.g. 'mask', 'email_local_part')

    Returns:
        Rewriter callable or None if the name is unknown
    """
    rewriter = _REWRITERS.get(name)
    if rewriter is None:
        logger.warning(f"No rewriter registered under name: {name}")
    return rewriter


def available_rewriters() -> Dict[str, Rewriter]:
    """Returns a copy of the rewriter lookup table."""
    return dict(_REWRITERS)
