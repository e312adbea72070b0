"""
Unified Diff Parser

Parses unified diff text (as produced by ``git diff`` or the GitHub
``.diff`` media type) into immutable DiffFile / Hunk / ChangeLine values.
"""

import re
import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from ..models.diff import DEV_NULL, ChangeLine, DiffFile, Hunk
from .errors import MalformedDiff


logger = logging.getLogger(__name__)


HUNK_HEADER_PATTERN = re.compile(r'^@@\s*-(\d+)(?:,(\d+))?\s*\+(\d+)(?:,(\d+))?\s*@@(.*)$')
FILE_HEADER_PATTERN = re.compile(r'^diff --git "?a/(.*?)"? "?b/(.*?)"?$')
NO_NEWLINE_MARKER = '\\'


@dataclass(frozen=True)
class ParsedDiff:
    """
    Result of parsing a multi-file diff.

    Behaves as a sequence of the successfully parsed files; files that
    failed to parse are reported in ``errors`` instead of aborting the rest.
    """
    files: Tuple[DiffFile, ...] = ()
    errors: Tuple[MalformedDiff, ...] = ()

    def __iter__(self) -> Iterator[DiffFile]:
        return iter(self.files)

    def __len__(self) -> int:
        return len(self.files)

    def __getitem__(self, index):
        return self.files[index]

    @property
    def paths(self) -> List[str]:
        return [f.path for f in self.files]

    def raise_for_errors(self) -> None:
        """Raise the first MalformedDiff collected while parsing, if any."""
        if self.errors:
            raise self.errors[0]


class DiffParser:
    """
    Parser for unified diff text.

    Splits the input at ``diff --git`` boundaries and parses each file
    independently, so one malformed file never blocks its siblings.
    """

    def __init__(self):
        """Initialize diff parser."""
        self.hunk_header_pattern = HUNK_HEADER_PATTERN
        self.file_header_pattern = FILE_HEADER_PATTERN
        self.binary_file_pattern = re.compile(r'^Binary files? .* differ')

    def parse(self, diff_text: str) -> ParsedDiff:
        """
        Parse a complete diff into per-file structures.

        Args:
            diff_text: Raw unified diff text, possibly covering many files

        Returns:
            ParsedDiff holding the parsed files (zero-hunk files omitted)
            and the MalformedDiff errors of files that could not be parsed
        """
        files = []
        errors = []

        for offset, lines in self._split_file_segments(diff_text):
            try:
                diff_file = self._parse_segment(lines, offset)
            except MalformedDiff as e:
                logger.warning(f"Skipping malformed diff segment: {e}")
                errors.append(e)
                continue

            if diff_file is None:
                continue
            files.append(diff_file)

        logger.debug(f"Parsed {len(files)} files from diff ({len(errors)} malformed)")
        return ParsedDiff(files=tuple(files), errors=tuple(errors))

    def parse_file(self, segment: str) -> Optional[DiffFile]:
        """
        Parse the diff of a single file.

        Args:
            segment: Diff text for exactly one file

        Returns:
            DiffFile, or None when the file has no hunks

        Raises:
            MalformedDiff: For malformed headers or stray change lines
        """
        return self._parse_segment(self._split_lines(segment), 0)

    def parse_patch(self, patch: str, path: str) -> DiffFile:
        """
        Parse a per-file patch (hunks only, no file headers).

        This is the ``patch`` field GitHub returns for each file of a
        pull request.

        Args:
            patch: Hunk headers and change lines of one file
            path: Destination path of the file

        Returns:
            DiffFile for the patch (possibly without hunks)
        """
        lines = self._split_lines(patch)
        hunks = []
        index = 0

        while index < len(lines):
            line = lines[index]
            if line.startswith('@@'):
                hunk, index = self._parse_hunk(lines, index, path, 0)
                hunks.append(hunk)
                continue
            if line.startswith(('--- ', '+++ ')):
                index += 1
                continue
            if line and line[0] in '+- ':
                raise MalformedDiff(path, line, index + 1, "change line before hunk header")
            index += 1

        return DiffFile(path=path, hunks=tuple(hunks))

    def _split_lines(self, text: str) -> List[str]:
        if not text:
            return []
        lines = text.split('\n')
        if lines and lines[-1] == '':
            lines.pop()
        return lines

    def _split_file_segments(self, diff_text: str) -> List[Tuple[int, List[str]]]:
        """Split diff text into (line offset, lines) per file."""
        lines = self._split_lines(diff_text)
        segments = []
        start = None

        for index, line in enumerate(lines):
            if line.startswith('diff --git '):
                if start is not None:
                    segments.append((start, lines[start:index]))
                elif index > 0:
                    logger.debug(f"Ignoring {index} preamble lines before first file")
                start = index

        if start is not None:
            segments.append((start, lines[start:]))
        elif lines:
            # No git file headers: treat the whole text as one file
            segments.append((0, lines))

        return segments

    def _parse_segment(self, lines: List[str], offset: int) -> Optional[DiffFile]:
        """Parse the lines of one file; line numbers in errors are offset-relative."""
        path = None
        old_path = None
        hunks = []
        index = 0

        while index < len(lines):
            line = lines[index]

            if line.startswith('@@'):
                hunk, index = self._parse_hunk(lines, index, path or '<unknown>', offset)
                hunks.append(hunk)
                continue

            header_match = self.file_header_pattern.match(line)
            if header_match:
                old_path = header_match.group(1)
                path = header_match.group(2)
            elif line.startswith('--- '):
                old_path = self._strip_path(line[4:], 'a/')
            elif line.startswith('+++ '):
                path = self._strip_path(line[4:], 'b/')
            elif line and line[0] in '+- ':
                raise MalformedDiff(
                    path or '<unknown>', line, offset + index + 1,
                    "change line before hunk header"
                )
            elif self.binary_file_pattern.match(line):
                logger.debug(f"Skipping binary file diff: {path}")
            index += 1

        if not hunks:
            logger.debug(f"No hunks for {path}, skipping")
            return None

        if path is None:
            raise MalformedDiff('<unknown>', lines[0] if lines else '', offset + 1, "missing file header")

        return DiffFile(path=path, hunks=tuple(hunks), old_path=old_path)

    def _strip_path(self, raw: str, prefix: str) -> str:
        path = raw.split('\t')[0].strip()
        if len(path) > 1 and path.startswith('"') and path.endswith('"'):
            path = path[1:-1]
        if path == DEV_NULL:
            return path
        if path.startswith(prefix):
            path = path[len(prefix):]
        return path

    def _parse_hunk(self, lines: List[str], index: int, path: str, offset: int) -> Tuple[Hunk, int]:
        """
        Parse one hunk starting at its header line.

        Args:
            lines: Lines of the enclosing file segment
            index: Index of the ``@@`` header line
            path: File path, used in error messages
            offset: Line offset of the segment within the full diff

        Returns:
            Tuple of (Hunk, index of the first line after the hunk)
        """
        header = lines[index]
        header_match = self.hunk_header_pattern.match(header)
        if not header_match:
            raise MalformedDiff(path, header, offset + index + 1, "malformed hunk header")

        old_start = int(header_match.group(1))
        old_count = int(header_match.group(2)) if header_match.group(2) is not None else 1
        new_start = int(header_match.group(3))
        new_count = int(header_match.group(4)) if header_match.group(4) is not None else 1

        old_line = old_start
        new_line = new_start
        changes = []
        index += 1

        while index < len(lines):
            line = lines[index]
            if line.startswith('@@'):
                break

            if line.startswith(NO_NEWLINE_MARKER):
                index += 1
                continue

            # Blank lines only count while the header still expects lines
            if not line and old_line - old_start >= old_count and new_line - new_start >= new_count:
                index += 1
                continue

            try:
                if line.startswith('+'):
                    changes.append(ChangeLine.added(line[1:], new_line))
                    new_line += 1
                elif line.startswith('-'):
                    changes.append(ChangeLine.removed(line[1:], old_line))
                    old_line += 1
                else:
                    content = line[1:] if line.startswith(' ') else line
                    changes.append(ChangeLine.context(content, old_line, new_line))
                    old_line += 1
                    new_line += 1
            except ValueError as e:
                raise MalformedDiff(path, line, offset + index + 1, str(e))

            index += 1

        hunk = Hunk(
            header=header,
            old_start=old_start,
            old_count=old_count,
            new_start=new_start,
            new_count=new_count,
            changes=tuple(changes),
            section=header_match.group(5).strip(),
        )

        if hunk.old_line_count != old_count or hunk.new_line_count != new_count:
            logger.warning(
                f"Hunk header {header!r} in {path} declares -{old_count}/+{new_count} lines, "
                f"found -{hunk.old_line_count}/+{hunk.new_line_count}"
            )

        return hunk, index
