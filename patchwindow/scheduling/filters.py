"""Collection name filtering for discovery.

Collections are selected with simple wildcard patterns (``*`` and ``?``) that
match the whole collection name case-insensitively. Exclusion patterns always
take precedence over the include pattern; test and recurrence-managed
collections are excluded by default.
"""

import fnmatch
import logging
import re
from typing import Iterable, List, Optional, Tuple

from .models import CollectionRef


logger = logging.getLogger(__name__)

DEFAULT_EXCLUDE_PATTERNS = ("*Fake*", "*reoccurring")


class CollectionFilterError(Exception):
    """Raised when a collection name pattern is invalid."""
    pass


def compile_wildcard(pattern: str) -> re.Pattern:
    """Compile a wildcard pattern into a case-insensitive regex."""
    if not pattern:
        raise CollectionFilterError("Collection name pattern must not be empty")
    try:
        return re.compile(fnmatch.translate(pattern), re.IGNORECASE)
    except re.error as e:
        raise CollectionFilterError(f"Invalid collection name pattern '{pattern}': {e}")


class CollectionFilter:
    """Selects collections by name with include/exclude wildcards."""

    def __init__(
        self,
        pattern: str = "*",
        exclude_patterns: Optional[Iterable[str]] = DEFAULT_EXCLUDE_PATTERNS
    ):
        """Initialize the filter.

        Args:
            pattern: Wildcard pattern collection names must match
            exclude_patterns: Wildcard patterns of names to skip

        Raises:
            CollectionFilterError: If any pattern is invalid
        """
        self.pattern = pattern
        self._include = compile_wildcard(pattern)
        self._excludes: List[Tuple[str, re.Pattern]] = [
            (exclude, compile_wildcard(exclude)) for exclude in (exclude_patterns or ())
        ]

    @property
    def exclude_patterns(self) -> List[str]:
        return [pattern for pattern, _ in self._excludes]

    def matches(self, name: str) -> bool:
        """Check whether a collection name is selected."""
        for pattern_str, pattern in self._excludes:
            if pattern.match(name):
                logger.debug(f"Collection '{name}' excluded by '{pattern_str}'")
                return False

        return bool(self._include.match(name))

    def apply(self, collections: Iterable[CollectionRef]) -> List[CollectionRef]:
        """Filter collections, keeping discovery order."""
        return [collection for collection in collections if self.matches(collection.name)]

    def __repr__(self) -> str:
        return f"CollectionFilter(pattern={self.pattern!r}, exclude_patterns={self.exclude_patterns!r})"
