"""
Diff Annotation Engine

Parsing, filtering, range extraction and position resolution for
unified diffs.
"""

from .errors import AnnotationError, MalformedDiff, LineNotFound, InvalidGlobPattern
from .parser import DiffParser, ParsedDiff
from .filter import PathFilter, parse_pattern_list
from .position import PositionResolver, PATCH_RELATIVE
from .ranges import ModifiedRangeExtractor

__all__ = [
    'AnnotationError',
    'MalformedDiff',
    'LineNotFound',
    'InvalidGlobPattern',
    'DiffParser',
    'ParsedDiff',
    'PathFilter',
    'parse_pattern_list',
    'PositionResolver',
    'PATCH_RELATIVE',
    'ModifiedRangeExtractor',
]
