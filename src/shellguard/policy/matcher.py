"""Case-insensitive regular-expression matching against policy patterns."""

from __future__ import annotations

import functools
import re
from collections.abc import Iterable

from shellguard.logging import get_logger

logger = get_logger(__name__)


@functools.lru_cache(maxsize=512)
def compile_pattern(pattern: str) -> re.Pattern[str] | None:
    """Compile ``pattern`` case-insensitively; ``None`` when it is malformed."""
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as exc:
        logger.warning("invalid_pattern_skipped", pattern=pattern, error=str(exc))
        return None


def match_pattern(command: str, patterns: Iterable[str]) -> str | None:
    """Return the first pattern (in order) that matches anywhere in ``command``."""
    for pattern in patterns:
        regex = compile_pattern(pattern)
        if regex is not None and regex.search(command):
            return pattern
    return None
