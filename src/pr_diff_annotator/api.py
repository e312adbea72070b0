"""
Main Diff Annotation API

Main interface that runs the annotation pipeline: parse a diff, filter
out-of-scope files, extract modified ranges, build context excerpts and
anchor review comments onto diff positions.
"""

import logging
from typing import Dict, Iterable, List, Optional
from datetime import datetime
from dataclasses import dataclass, field

from .config import AppConfig
from .diff.errors import MalformedDiff
from .diff.filter import PathFilter
from .diff.parser import DiffParser, ParsedDiff
from .diff.position import PositionResolver
from .diff.ranges import ModifiedRangeExtractor
from .formatting.github import ReviewCommentAnchorer
from .formatting.prompt import render_annotated_diff
from .github.client import GitHubClient
from .models.diff import DiffFile, ModifiedRange
from .models.review import AnchorMode, AnchoringResult, LineComment, Side
from .review.context import ContextWindowBuilder


logger = logging.getLogger(__name__)


@dataclass
class FileAnnotation:
    """Annotation data for one in-scope file."""
    path: str
    diff_file: DiffFile
    modified_ranges: List[ModifiedRange]
    annotated_diff: str
    context: Optional[str] = None


@dataclass
class AnnotationResult:
    """Result of annotating a diff."""
    files: List[FileAnnotation]
    excluded_paths: List[str]
    errors: List[MalformedDiff]
    processing_time: float
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def paths(self) -> List[str]:
        return [f.path for f in self.files]

    def get_file(self, path: str) -> Optional[FileAnnotation]:
        for annotation in self.files:
            if annotation.path == path:
                return annotation
        return None


class DiffAnnotationAPI:
    """
    Main Diff Annotation API interface.

    Orchestrates the annotation process:
    1. Parse diff text into files and hunks
    2. Drop excluded files
    3. Extract modified ranges and build context excerpts
    4. Anchor review comments onto diff positions
    """

    def __init__(self, config: Optional[AppConfig] = None):
        """
        Initialize Diff Annotation API.

        Args:
            config: Optional configuration object (defaults apply if omitted)
        """
        self.config = config or AppConfig()
        self.config.validate()

        self.parser = DiffParser()
        self.path_filter = PathFilter(self.config.filter.exclude_patterns)
        self.range_extractor = ModifiedRangeExtractor()
        self.context_builder = ContextWindowBuilder(
            margin=self.config.context.margin,
            skip_marker=self.config.context.skip_marker
        )
        self.position_resolver = PositionResolver(
            default_side=Side(self.config.review.default_side)
        )
        self.comment_anchorer = ReviewCommentAnchorer(
            resolver=self.position_resolver,
            anchor_mode=AnchorMode(self.config.review.anchor_mode),
            max_comments_per_file=self.config.review.max_comments_per_file
        )

    def annotate(self, diff_text: str, file_contents: Optional[Dict[str, str]] = None) -> AnnotationResult:
        """
        Annotate a unified diff.

        Args:
            diff_text: Raw diff text covering any number of files
            file_contents: Optional full new-file content keyed by path;
                files with content get a context excerpt

        Returns:
            AnnotationResult with per-file annotations, excluded paths and
            per-file parse errors
        """
        start_time = datetime.now()
        return self._annotate_parsed(self.parser.parse(diff_text), file_contents, start_time)

    def _annotate_parsed(
        self,
        parsed: ParsedDiff,
        file_contents: Optional[Dict[str, str]],
        start_time: datetime
    ) -> AnnotationResult:
        file_contents = file_contents or {}

        included = self.path_filter.filter(parsed)
        # Deleted files are reported under their old path
        excluded_paths = [
            f.old_path if f.is_deleted and f.old_path else f.path
            for f in parsed if self.path_filter.is_excluded(f.path)
        ]

        annotations = []
        for diff_file in included:
            annotations.append(self._annotate_file(diff_file, file_contents.get(diff_file.path)))

        processing_time = (datetime.now() - start_time).total_seconds()
        logger.info(
            f"Annotated {len(annotations)} files "
            f"({len(excluded_paths)} excluded, {len(parsed.errors)} malformed) in {processing_time:.2f}s"
        )

        return AnnotationResult(
            files=annotations,
            excluded_paths=excluded_paths,
            errors=list(parsed.errors),
            processing_time=processing_time,
            created_at=start_time
        )

    def annotate_pull_request(self, client: GitHubClient, owner: str, repo: str, pr_number: int) -> AnnotationResult:
        """
        Fetch a pull request's diff and head content, then annotate it.

        Args:
            client: GitHub client
            owner: Repository owner
            repo: Repository name
            pr_number: Pull request number

        Returns:
            AnnotationResult for the pull request
        """
        start_time = datetime.now()
        pr_data = client.get_pull_request(owner, repo, pr_number)
        head_sha = pr_data.get('head', {}).get('sha')
        diff_text = client.get_pull_request_diff(owner, repo, pr_number)

        parsed = self.parser.parse(diff_text)
        file_contents = {}
        for diff_file in self.path_filter.filter(parsed):
            file_contents[diff_file.path] = client.get_file_content(owner, repo, diff_file.path, ref=head_sha)

        return self._annotate_parsed(parsed, file_contents, start_time)

    def anchor_comments(self, comments: Iterable[LineComment], patches: Dict[str, str]) -> AnchoringResult:
        """
        Anchor line comments onto per-file patches.

        Comments that cannot be placed are dropped and reported, never fatal.
        """
        return self.comment_anchorer.anchor(comments, patches)

    def anchor_pull_request_comments(
        self,
        client: GitHubClient,
        owner: str,
        repo: str,
        pr_number: int,
        comments: Iterable[LineComment]
    ) -> AnchoringResult:
        """Anchor comments using the patches GitHub reports for each file."""
        patches = client.get_file_patches(owner, repo, pr_number)
        patches = {path: patch for path, patch in patches.items() if not self.path_filter.is_excluded(path)}
        return self.anchor_comments(comments, patches)

    def _annotate_file(self, diff_file: DiffFile, content: Optional[str]) -> FileAnnotation:
        ranges = self.range_extractor.extract(diff_file)

        context = None
        if content:
            context = self.context_builder.build_context(content, ranges)

        return FileAnnotation(
            path=diff_file.path,
            diff_file=diff_file,
            modified_ranges=ranges,
            annotated_diff=render_annotated_diff(diff_file),
            context=context
        )
