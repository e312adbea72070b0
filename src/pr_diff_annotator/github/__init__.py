"""
GitHub Integration Layer

This module provides GitHub API access for pull request diffs,
per-file patches, file content and review submission.
"""

from .client import GitHubClient, GitHubAPIError, RateLimitExceeded

__all__ = ['GitHubClient', 'GitHubAPIError', 'RateLimitExceeded']
