"""
GitHub Comment Anchoring

Turns line-level review comments into GitHub review comment payloads
anchored by diff position (or by line and side), dropping comments that
cannot be placed instead of failing the whole review.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from ..diff.errors import LineNotFound, MalformedDiff
from ..diff.position import PositionResolver
from ..models.review import (
    AnchorMode,
    AnchoredComment,
    AnchoringResult,
    DroppedComment,
    LineComment,
)


logger = logging.getLogger(__name__)


REVIEW_EVENTS = {
    'approve': 'APPROVE',
    'request_changes': 'REQUEST_CHANGES',
    'comment': 'COMMENT',
}


class ReviewCommentAnchorer:
    """
    Anchors review comments onto file patches.

    Organizes comments by file, resolves each against that file's patch
    and caps the number of comments per file.
    """

    def __init__(
        self,
        resolver: Optional[PositionResolver] = None,
        anchor_mode: AnchorMode = AnchorMode.POSITION,
        max_comments_per_file: int = 10
    ):
        """
        Initialize comment anchorer.

        Args:
            resolver: Position resolver (a default RIGHT-side one if omitted)
            anchor_mode: Emit ``position`` payloads or ``line``/``side`` payloads
            max_comments_per_file: Upper bound of anchored comments per file
        """
        self.resolver = resolver or PositionResolver()
        self.anchor_mode = AnchorMode(anchor_mode)
        self.max_comments_per_file = max_comments_per_file

    def anchor(self, comments: Iterable[LineComment], patches: Dict[str, str]) -> AnchoringResult:
        """
        Anchor comments against per-file patches.

        Args:
            comments: Validated line comments
            patches: Patch text keyed by destination path

        Returns:
            AnchoringResult with anchored payloads and dropped comments
        """
        result = AnchoringResult()

        for path, file_comments in self._group_comments_by_file(comments).items():
            patch = patches.get(path)
            if not patch:
                for comment in file_comments:
                    self._drop(result, comment, "file has no patch in this diff")
                continue

            anchored_count = 0
            for comment in file_comments:
                if anchored_count >= self.max_comments_per_file:
                    self._drop(result, comment, f"more than {self.max_comments_per_file} comments for file")
                    continue

                try:
                    anchored = self.anchor_comment(comment, patch)
                except (LineNotFound, MalformedDiff) as e:
                    self._drop(result, comment, str(e))
                    continue

                result.anchored.append(anchored)
                anchored_count += 1

        logger.info(f"Anchored {len(result.anchored)} comments, dropped {len(result.dropped)}")
        return result

    def anchor_comment(self, comment: LineComment, patch: str) -> AnchoredComment:
        """
        Anchor a single comment.

        Raises:
            LineNotFound: If the comment's line is not part of the patch
        """
        side = comment.side or self.resolver.default_side
        position = self.resolver.resolve(patch, comment.line, side=side, path=comment.path)

        if self.anchor_mode == AnchorMode.POSITION:
            return AnchoredComment(path=comment.path, body=comment.body, position=position)

        # Line mode still requires the line to be inside the diff
        return AnchoredComment(path=comment.path, body=comment.body, line=comment.line, side=side)

    def _group_comments_by_file(self, comments: Iterable[LineComment]) -> Dict[str, List[LineComment]]:
        file_groups = {}
        for comment in comments:
            file_groups.setdefault(comment.path, []).append(comment)

        for file_comments in file_groups.values():
            file_comments.sort(key=lambda c: c.line)

        return file_groups

    def _drop(self, result: AnchoringResult, comment: LineComment, reason: str) -> None:
        logger.warning(f"Dropping comment on {comment.path}:{comment.line}: {reason}")
        result.dropped.append(DroppedComment(comment=comment, reason=reason))


def build_review_payload(
    summary: str,
    anchored: List[AnchoredComment],
    suggested_action: str = 'comment'
) -> Dict[str, Any]:
    """
    Build the body of a "create review" request.

    Args:
        summary: Overall review text
        anchored: Anchored line comments
        suggested_action: ``approve``, ``request_changes`` or ``comment``

    Returns:
        Request body for the pull request reviews endpoint
    """
    if suggested_action not in REVIEW_EVENTS:
        raise ValueError(f"Invalid suggested action: {suggested_action}")

    return {
        'body': summary,
        'event': REVIEW_EVENTS[suggested_action],
        'comments': [c.to_payload() for c in anchored],
    }
