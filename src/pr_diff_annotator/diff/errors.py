"""
Diff annotation errors.
"""

from typing import Optional


class AnnotationError(Exception):
    """Base class for diff annotation errors"""


class MalformedDiff(AnnotationError):
    """Unparseable hunk header or change line outside of a hunk"""
    def __init__(self, path: str, line: str, line_number: Optional[int] = None, reason: str = "malformed diff"):
        location = f" (line {line_number})" if line_number is not None else ""
        super().__init__(f"{reason} in {path}{location}: {line!r}")
        self.path = path
        self.line = line
        self.line_number = line_number
        self.reason = reason


class LineNotFound(AnnotationError):
    """Requested line never appears in the given patch"""
    def __init__(self, path: Optional[str], line: int, side: str):
        super().__init__(f"Line {line} ({side}) not found in patch for {path or '<patch>'}")
        self.path = path
        self.line = line
        self.side = side


class InvalidGlobPattern(AnnotationError):
    """Exclusion pattern that cannot be compiled"""
    def __init__(self, pattern: str, reason: str):
        super().__init__(f"Invalid glob pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason
