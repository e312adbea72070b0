"""
Context Builder

Builds trimmed excerpts of full file content around modified ranges,
replacing unchanged stretches with a skip marker.
"""

import logging
from typing import Dict, List, Optional, Sequence

from ..models.diff import ContextWindow, ModifiedRange


logger = logging.getLogger(__name__)


DEFAULT_MARGIN = 10
SKIP_MARKER = "// ... skipped unchanged code ..."


class ContextWindowBuilder:
    """
    Builds context excerpts for review prompts.

    Each modified range is widened by ``margin`` lines on both sides,
    clamped to the file, and overlapping or touching windows are merged.
    """

    def __init__(self, margin: int = DEFAULT_MARGIN, skip_marker: str = SKIP_MARKER):
        """
        Initialize context builder.

        Args:
            margin: Lines of context kept on each side of a modified range
            skip_marker: Line emitted in place of every skipped region
        """
        if margin < 0:
            raise ValueError("Context margin must be non-negative")

        self.margin = margin
        self.skip_marker = skip_marker

    def compute_windows(
        self,
        line_count: int,
        ranges: Sequence[ModifiedRange],
        margin: Optional[int] = None
    ) -> List[ContextWindow]:
        """
        Compute merged context windows.

        Args:
            line_count: Number of lines in the full file
            ranges: Modified ranges (1-based new-file line numbers), any order
            margin: Optional override of the configured margin

        Returns:
            Ascending, non-overlapping 0-based windows within [0, line_count)
        """
        margin = self.margin if margin is None else margin
        windows = []

        for modified in sorted(ranges, key=lambda r: (r.start, r.end)):
            start = max(0, modified.start - 1 - margin)
            end = min(line_count, modified.end - 1 + margin)
            if start >= end:
                # Range lies entirely past the end of the file
                continue

            if windows and start <= windows[-1].end:
                previous = windows.pop()
                windows.append(ContextWindow(previous.start, max(previous.end, end)))
            else:
                windows.append(ContextWindow(start, end))

        return windows

    def build_context(
        self,
        full_text: str,
        ranges: Sequence[ModifiedRange],
        margin: Optional[int] = None
    ) -> str:
        """
        Render the parts of a file surrounding its modified ranges.

        Args:
            full_text: Full content of the new file
            ranges: Modified ranges of the file
            margin: Optional override of the configured margin

        Returns:
            Original lines of every window, with the skip marker for each gap
            (including before the first and after the last window)
        """
        lines = self._split_lines(full_text)
        windows = self.compute_windows(len(lines), ranges, margin)

        if not lines:
            return ""

        output = []
        cursor = 0
        for window in windows:
            if window.start > cursor:
                output.append(self.skip_marker)
            output.extend(lines[window.start:window.end])
            cursor = window.end

        if cursor < len(lines):
            output.append(self.skip_marker)

        return "\n".join(output)

    def get_context_statistics(self, full_text: str, ranges: Sequence[ModifiedRange]) -> Dict[str, float]:
        """Get statistics about how much of a file the context keeps."""
        lines = self._split_lines(full_text)
        windows = self.compute_windows(len(lines), ranges)
        kept = sum(len(w) for w in windows)

        return {
            'total_lines': len(lines),
            'kept_lines': kept,
            'windows': len(windows),
            'kept_ratio': kept / len(lines) if lines else 0.0,
        }

    def _split_lines(self, text: str) -> List[str]:
        if not text:
            return []
        lines = text.split('\n')
        if lines[-1] == '':
            lines.pop()
        return lines
