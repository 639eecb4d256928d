"""
Document path expansion.
"""

import glob
import logging
from typing import List, Sequence

logger = logging.getLogger(__name__)

GLOB_CHARS = ("*", "?", "[")


def contains_glob_chars(pattern: str) -> bool:
    """True iff the pattern contains at least one of * ? ["""
    return any(ch in pattern for ch in GLOB_CHARS)


def expand_document_globs(patterns: Sequence[str]) -> List[str]:
    """
    Expand document patterns into concrete paths.

    Literal paths are kept as-is even if the file does not exist yet; existence
    is checked when the document is read. A glob that matches nothing
    contributes nothing. Order follows the input patterns; duplicates across
    patterns are kept.

    Args:
        patterns: Literal paths and/or glob patterns

    Returns:
        Expanded list of paths
    """
    expanded: List[str] = []
    for pattern in patterns:
        if not contains_glob_chars(pattern):
            expanded.append(pattern)
            continue

        matches = glob.glob(pattern, recursive=True)
        if not matches:
            logger.info(f"Pattern {pattern!r} matched no documents")
            continue

        logger.debug(f"Pattern {pattern!r} matched {len(matches)} document(s)")
        expanded.extend(matches)

    return expanded
