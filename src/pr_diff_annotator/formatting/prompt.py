"""
Annotated Diff Formatter

Renders parsed hunks with explicit line numbers so a language model can
refer to concrete new-file lines in its comments.
"""

from typing import List

from ..models.diff import ChangeLine, DiffFile, Hunk


def format_change(change: ChangeLine) -> str:
    """
    Format one change line.

    Context lines carry ``old,new``, added lines ``+new`` and removed
    lines ``-old``.
    """
    if change.is_added:
        return f"+{change.new_line} {change.content}"
    if change.is_removed:
        return f"-{change.old_line} {change.content}"
    return f" {change.old_line},{change.new_line} {change.content}"


def format_hunk(hunk: Hunk) -> str:
    lines = [hunk.header]
    lines.extend(format_change(c) for c in hunk.changes)
    return "\n".join(lines)


def render_annotated_diff(diff_file: DiffFile) -> str:
    """Render all hunks of a file, one after another."""
    return "\n".join(format_hunk(h) for h in diff_file.hunks)


def render_annotated_files(files: List[DiffFile]) -> str:
    sections = []
    for diff_file in files:
        sections.append(f"## {diff_file.path}\n{render_annotated_diff(diff_file)}")
    return "\n\n".join(sections)
