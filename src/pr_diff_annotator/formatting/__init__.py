"""
Review Formatter

This module provides annotated diff rendering for prompts and
GitHub review comment anchoring.
"""

from .github import ReviewCommentAnchorer, build_review_payload
from .prompt import render_annotated_diff, render_annotated_files

__all__ = ['ReviewCommentAnchorer', 'build_review_payload', 'render_annotated_diff', 'render_annotated_files']
