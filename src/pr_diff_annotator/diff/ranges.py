"""
Modified-Range Extractor

Computes the contiguous blocks of added lines (new-file numbering) in a
parsed file, one hunk at a time.
"""

import logging
from typing import List

from ..models.diff import DiffFile, Hunk, ModifiedRange


logger = logging.getLogger(__name__)


class ModifiedRangeExtractor:
    """Extracts ModifiedRange blocks from DiffFile hunks."""

    def extract(self, diff_file: DiffFile) -> List[ModifiedRange]:
        """
        Extract modified ranges for a file.

        Ranges are never merged across hunk boundaries.

        Args:
            diff_file: Parsed file

        Returns:
            Ranges in hunk order
        """
        ranges = []
        for hunk in diff_file.hunks:
            ranges.extend(self.extract_hunk(hunk))

        logger.debug(f"Extracted {len(ranges)} modified ranges from {diff_file.path}")
        return ranges

    def extract_hunk(self, hunk: Hunk) -> List[ModifiedRange]:
        """
        Extract modified ranges for a single hunk.

        A range opens at an added line and is committed at the next context
        line or at the end of the hunk. Removed lines leave it untouched.
        """
        ranges = []
        start = None
        end = None

        for change in hunk.changes:
            if change.is_added:
                if start is None:
                    start = change.new_line
                end = change.new_line + 1
            elif change.is_context and start is not None:
                ranges.append(ModifiedRange(start, end))
                start = end = None

        if start is not None:
            ranges.append(ModifiedRange(start, end))

        return ranges
