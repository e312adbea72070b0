"""
Position Resolver

Maps file line numbers onto the "diff position" used by GitHub's pull
request review comment API.

Convention (patch-relative): the first ``@@`` hunk header of a file's
patch is position 0, so the line just below it is position 1. Every
following line of the patch, including later hunk headers and
``\\ No newline at end of file`` markers, adds one.

Matching is side-explicit. ``Side.RIGHT`` resolves new-file line numbers
and ``Side.LEFT`` resolves old-file line numbers; a line is never matched
against the other side's counter.
"""

import logging
from typing import Dict, Iterator, List, Optional, Tuple

from ..models.review import Side
from .errors import LineNotFound, MalformedDiff
from .parser import HUNK_HEADER_PATTERN, NO_NEWLINE_MARKER


logger = logging.getLogger(__name__)


PATCH_RELATIVE = "patch-relative"


class PositionResolver:
    """
    Resolves (patch, line) pairs to review comment positions.

    Stateless; one instance can be shared across files and threads.
    """

    convention = PATCH_RELATIVE

    def __init__(self, default_side: Side = Side.RIGHT):
        """
        Initialize position resolver.

        Args:
            default_side: Side used when a call does not name one
        """
        self.default_side = Side(default_side)

    def resolve(
        self,
        patch: str,
        target_line: int,
        side: Optional[Side] = None,
        path: Optional[str] = None
    ) -> int:
        """
        Resolve a file line number to its position in the patch.

        Args:
            patch: Raw per-file patch (hunk headers and change lines)
            target_line: Line number in the file of the chosen side
            side: RIGHT for new-file lines, LEFT for old-file lines
            path: File path, used in error messages only

        Returns:
            Position of the first patch line carrying that line number

        Raises:
            LineNotFound: If the line never appears on that side of the patch
            MalformedDiff: If a hunk header cannot be parsed
        """
        side = Side(side) if side is not None else self.default_side

        for position, old_line, new_line in self._walk(patch, path):
            line = new_line if side == Side.RIGHT else old_line
            if line == target_line:
                return position

        raise LineNotFound(path, target_line, side.value)

    def build_position_map(self, patch: str, side: Optional[Side] = None, path: Optional[str] = None) -> Dict[int, int]:
        """
        Map every line number present on one side of the patch to its position.

        Args:
            patch: Raw per-file patch
            side: Side whose line numbers are mapped
            path: File path, used in error messages only

        Returns:
            Dict of line number -> position
        """
        side = Side(side) if side is not None else self.default_side
        mapping = {}

        for position, old_line, new_line in self._walk(patch, path):
            line = new_line if side == Side.RIGHT else old_line
            if line is not None:
                mapping.setdefault(line, position)

        return mapping

    def line_at_position(self, patch: str, position: int) -> Optional[str]:
        """Return the raw patch line at a position, or None when out of range."""
        lines = self._patch_lines(patch)
        first_header = self._first_header_index(lines)
        if first_header is None or position < 0:
            return None
        index = first_header + position
        return lines[index] if index < len(lines) else None

    def _patch_lines(self, patch: str) -> List[str]:
        lines = (patch or '').split('\n')
        if lines and lines[-1] == '':
            lines.pop()
        return lines

    def _first_header_index(self, lines: List[str]) -> Optional[int]:
        for index, line in enumerate(lines):
            if line.startswith('@@'):
                return index
        return None

    def _walk(self, patch: str, path: Optional[str]) -> Iterator[Tuple[int, Optional[int], Optional[int]]]:
        """
        Replay a patch line by line.

        Yields:
            (position, old_line, new_line) for each content line, where the
            line number of a side is None when that side did not advance
        """
        lines = self._patch_lines(patch)
        first_header = self._first_header_index(lines)
        if first_header is None:
            return

        old_line = new_line = 0
        for position, raw in enumerate(lines[first_header:]):
            if raw.startswith('@@'):
                header_match = HUNK_HEADER_PATTERN.match(raw)
                if not header_match:
                    raise MalformedDiff(path or '<patch>', raw, first_header + position + 1, "malformed hunk header")
                old_line = int(header_match.group(1)) - 1
                new_line = int(header_match.group(3)) - 1
                continue

            if raw.startswith(NO_NEWLINE_MARKER):
                continue

            if raw.startswith('-'):
                old_line += 1
                yield position, old_line, None
            elif raw.startswith('+'):
                new_line += 1
                yield position, None, new_line
            else:
                old_line += 1
                new_line += 1
                yield position, old_line, new_line
