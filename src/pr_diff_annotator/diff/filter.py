"""
Path Filter

Excludes changed files whose destination path matches any of a set of
glob patterns (``*``, ``**``, ``?``, ``[...]`` classes and ``{a,b}`` braces).
"""

import re
import logging
from typing import Iterable, List, Pattern, Sequence

from ..models.diff import DEV_NULL, DiffFile
from .errors import InvalidGlobPattern


logger = logging.getLogger(__name__)


def parse_pattern_list(raw: str) -> List[str]:
    """
    Split a comma-separated pattern list.

    Commas inside ``{...}`` or escaped with ``\\`` belong to the pattern,
    so ``"**/*.{md,json}, *.lock"`` yields two patterns.

    Args:
        raw: Patterns separated by commas, e.g. ``"**/*.md, **/*.json"``

    Returns:
        Trimmed, non-empty patterns in their original order
    """
    if not raw:
        return []

    patterns = []
    current = []
    brace_depth = 0
    i, n = 0, len(raw)

    while i < n:
        c = raw[i]
        if c == '\\' and i + 1 < n:
            current.append(raw[i:i + 2])
            i += 2
            continue
        if c == '{':
            brace_depth += 1
        elif c == '}' and brace_depth:
            brace_depth -= 1
        elif c == ',' and not brace_depth:
            patterns.append(''.join(current))
            current = []
            i += 1
            continue
        current.append(c)
        i += 1

    patterns.append(''.join(current))
    return [p.strip() for p in patterns if p.strip()]


def translate_glob(pattern: str) -> str:
    """
    Translate a glob pattern into a regular expression source string.

    ``*`` and ``?`` never cross a ``/``; ``**`` as a whole path segment
    matches zero or more directories. Dotfiles and dot-directories are not
    special: ``**/*.md`` also matches ``.github/notes.md``.

    Raises:
        InvalidGlobPattern: For empty patterns, dangling escapes and
            unbalanced brackets or braces
    """
    if not pattern:
        raise InvalidGlobPattern(pattern, "empty pattern")

    parts = []
    brace_depth = 0
    i, n = 0, len(pattern)

    while i < n:
        c = pattern[i]

        if c == '*':
            if pattern.startswith('**', i):
                j = i + 2
                segment_start = i == 0 or pattern[i - 1] == '/'
                if segment_start and j == n:
                    parts.append('.*')
                    i = j
                    continue
                if segment_start and pattern[j] == '/':
                    parts.append('(?:[^/]*/)*')
                    i = j + 1
                    continue
                # "**" inside a segment behaves like "*"
                parts.append('[^/]*')
                i = j
                continue
            parts.append('[^/]*')
        elif c == '?':
            parts.append('[^/]')
        elif c == '[':
            j = i + 1
            if j < n and pattern[j] in '!^':
                j += 1
            if j < n and pattern[j] == ']':
                j += 1
            while j < n and pattern[j] != ']':
                j += 1
            if j >= n:
                raise InvalidGlobPattern(pattern, f"unterminated character class at {i}")
            stuff = pattern[i + 1:j].replace('\\', '\\\\')
            if stuff[0] in '!^':
                rest = stuff[1:]
                if rest.startswith(']'):
                    rest = '\\]' + rest[1:]
                stuff = '^/' + rest
            parts.append(f'[{stuff}]')
            i = j
        elif c == '{':
            brace_depth += 1
            parts.append('(?:')
        elif c == '}':
            if brace_depth == 0:
                raise InvalidGlobPattern(pattern, f"unmatched '}}' at {i}")
            brace_depth -= 1
            parts.append(')')
        elif c == ',' and brace_depth:
            parts.append('|')
        elif c == '\\':
            if i + 1 >= n:
                raise InvalidGlobPattern(pattern, "dangling escape")
            i += 1
            parts.append(re.escape(pattern[i]))
        else:
            parts.append(re.escape(c))
        i += 1

    if brace_depth:
        raise InvalidGlobPattern(pattern, "unterminated brace expansion")

    return ''.join(parts)


def compile_glob(pattern: str) -> Pattern:
    """Compile a glob into a full-match regular expression."""
    source = translate_glob(pattern)
    try:
        return re.compile(f'(?s:{source})\\Z')
    except re.error as e:
        raise InvalidGlobPattern(pattern, str(e))


class PathFilter:
    """
    Glob-based exclusion filter for changed files.

    Patterns are compiled once at construction, so a bad pattern fails
    fast instead of silently letting excluded files through.
    """

    def __init__(self, patterns: Sequence[str] = ()):
        """
        Initialize path filter.

        Args:
            patterns: Ordered glob patterns; an empty sequence excludes nothing

        Raises:
            InvalidGlobPattern: If any pattern cannot be compiled
        """
        self.patterns = tuple(patterns)
        self._compiled = [compile_glob(p) for p in self.patterns]

    @classmethod
    def from_string(cls, raw: str) -> "PathFilter":
        """Build a filter from a comma-separated pattern list."""
        return cls(parse_pattern_list(raw))

    def is_excluded(self, path: str) -> bool:
        """
        Check whether a destination path is out of scope.

        Args:
            path: Destination path of a changed file

        Returns:
            True for ``/dev/null`` and for paths matching any pattern
        """
        if not path or path == DEV_NULL:
            return True
        return any(regex.match(path) for regex in self._compiled)

    def filter(self, files: Iterable[DiffFile]) -> List[DiffFile]:
        """
        Drop excluded files, keeping the input order.

        Args:
            files: Parsed diff files

        Returns:
            Files whose destination path is in scope
        """
        kept = []
        for diff_file in files:
            if self.is_excluded(diff_file.path):
                logger.debug(f"Excluding file: {diff_file.path}")
                continue
            kept.append(diff_file)
        return kept
