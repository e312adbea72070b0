#!/usr/bin/env python3
"""
Diff Annotation Demo

Demonstrates the annotation pipeline on a pull request: parse its diff,
drop excluded files, print the line-numbered diff and context excerpt of
each remaining file, and show where a sample comment would be anchored.

Usage:
    python examples/annotate_diff_demo.py <owner> <repo> <pr_number>

Example:
    EXCLUDE_PATTERNS="**/*.md,**/*.lock" python examples/annotate_diff_demo.py psf requests 6500
"""

import sys
import os
import logging

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from pr_diff_annotator.api import DiffAnnotationAPI
from pr_diff_annotator.config import AppConfig, configure_logging
from pr_diff_annotator.formatting.github import build_review_payload
from pr_diff_annotator.github.client import GitHubClient, GitHubAPIError
from pr_diff_annotator.models.review import LineComment


def main():
    """Main demo function."""
    config = AppConfig.from_env()
    configure_logging(config.logging)
    logger = logging.getLogger(__name__)

    if len(sys.argv) != 4:
        print("Usage: python annotate_diff_demo.py <owner> <repo> <pr_number>")
        sys.exit(1)

    owner, repo = sys.argv[1], sys.argv[2]
    try:
        pr_number = int(sys.argv[3])
    except ValueError:
        print("Error: PR number must be an integer")
        sys.exit(1)

    if not config.github.token:
        print("Error: GitHub token not found. Set the GITHUB_TOKEN environment variable.")
        sys.exit(1)

    client = GitHubClient(config.github.token, config.github.api_base_url, config.github.timeout_seconds)
    api = DiffAnnotationAPI(config)

    try:
        result = api.annotate_pull_request(client, owner, repo, pr_number)
    except GitHubAPIError as e:
        logger.error(f"GitHub API error: {e}")
        sys.exit(1)

    print(f"\n📁 Annotated files: {len(result.files)} (excluded: {len(result.excluded_paths)})")
    for error in result.errors:
        print(f"   ⚠ {error}")

    for annotation in result.files:
        print(f"\n## {annotation.path}")
        print(f"   Modified ranges: {[(r.start, r.end) for r in annotation.modified_ranges]}")
        print(annotation.annotated_diff)
        if annotation.context:
            print("\n--- context ---")
            print(annotation.context)

    # Anchor one comment on the first modified line of every file
    comments = [
        LineComment(path=a.path, line=a.modified_ranges[0].start, body="Sample comment")
        for a in result.files if a.modified_ranges
    ]
    anchoring = api.anchor_pull_request_comments(client, owner, repo, pr_number, comments)
    payload = build_review_payload("Sample review", anchoring.anchored)

    print(f"\n📝 Review payload ({len(anchoring.dropped)} comments dropped):")
    for comment in payload['comments']:
        print(f"   {comment}")


if __name__ == "__main__":
    main()
