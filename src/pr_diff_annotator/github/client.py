"""
GitHub API Client

Fetches the raw inputs of the annotation engine (pull request diff text,
per-file patches and file content) and submits anchored reviews.
"""

import base64
import logging
from typing import Any, Dict, List, Optional
from datetime import datetime
from urllib.parse import quote
import requests


logger = logging.getLogger(__name__)


DIFF_MEDIA_TYPE = 'application/vnd.github.v3.diff'


class GitHubAPIError(Exception):
    """GitHub API related errors"""
    def __init__(self, message: str, status_code: Optional[int] = None, response_data: Optional[Dict] = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data


class RateLimitExceeded(GitHubAPIError):
    """GitHub API rate limit exceeded"""
    def __init__(self, reset_time: datetime):
        super().__init__(f"Rate limit exceeded. Resets at {reset_time}", status_code=429)
        self.reset_time = reset_time


class GitHubClient:
    """
    GitHub API client for pull request data.

    Provides methods for:
    - Pull request metadata, diff text and changed files
    - File content at a given ref
    - Review submission
    """

    def __init__(self, token: str, base_url: str = "https://api.github.com", timeout: int = 30):
        """
        Initialize GitHub client.

        Args:
            token: GitHub access token
            base_url: GitHub API base URL (default: https://api.github.com)
            timeout: Request timeout in seconds
        """
        if not token:
            raise ValueError("GitHub token is required")

        self.token = token
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = self._create_session()
        self.rate_limit_remaining = None

    def _create_session(self) -> requests.Session:
        """Create requests session with authentication headers."""
        session = requests.Session()
        session.headers.update({
            'Authorization': f'Bearer {self.token}',
            'Accept': 'application/vnd.github.v3+json',
            'User-Agent': 'PR-Diff-Annotator/1.0'
        })
        return session

    def _make_request(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        """
        Make authenticated request to GitHub API.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint (without base URL)
            **kwargs: Additional arguments for requests

        Returns:
            Response object

        Raises:
            GitHubAPIError: For API errors
            RateLimitExceeded: When rate limit is exhausted
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        kwargs.setdefault('timeout', self.timeout)

        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.error(f"Request failed: {e}")
            raise GitHubAPIError(f"Request failed: {str(e)}")

        if 'X-RateLimit-Remaining' in response.headers:
            self.rate_limit_remaining = int(response.headers['X-RateLimit-Remaining'])

        if response.status_code == 429 or (response.status_code == 403 and self.rate_limit_remaining == 0):
            reset = int(response.headers.get('X-RateLimit-Reset', 0))
            raise RateLimitExceeded(datetime.fromtimestamp(reset))

        if not response.ok:
            try:
                error_data = response.json() if response.content else {}
            except ValueError:
                error_data = {}
            raise GitHubAPIError(
                f"GitHub API error: {response.status_code} - {error_data.get('message', 'Unknown error')}",
                status_code=response.status_code,
                response_data=error_data
            )

        return response

    def get_pull_request(self, owner: str, repo: str, pr_number: int) -> Dict:
        """
        Get pull request information.

        Args:
            owner: Repository owner
            repo: Repository name
            pr_number: Pull request number

        Returns:
            Pull request data
        """
        logger.info(f"Fetching PR {owner}/{repo}#{pr_number}")

        response = self._make_request('GET', f'/repos/{owner}/{repo}/pulls/{pr_number}')
        return response.json()

    def get_pull_request_diff(self, owner: str, repo: str, pr_number: int) -> str:
        """
        Get the unified diff of a pull request.

        Returns:
            Raw diff text covering every changed file
        """
        logger.info(f"Fetching diff for {owner}/{repo}#{pr_number}")

        response = self._make_request(
            'GET',
            f'/repos/{owner}/{repo}/pulls/{pr_number}',
            headers={'Accept': DIFF_MEDIA_TYPE}
        )
        logger.info(f"Diff text length: {len(response.text)}")
        return response.text

    def get_pull_request_files(self, owner: str, repo: str, pr_number: int) -> List[Dict]:
        """
        Get files changed in a pull request.

        Args:
            owner: Repository owner
            repo: Repository name
            pr_number: Pull request number

        Returns:
            List of file change data, each with an optional ``patch``
        """
        logger.info(f"Fetching PR files for {owner}/{repo}#{pr_number}")

        files = []
        page = 1
        per_page = 100

        while True:
            response = self._make_request(
                'GET',
                f'/repos/{owner}/{repo}/pulls/{pr_number}/files',
                params={'page': page, 'per_page': per_page}
            )

            page_files = response.json()
            if not page_files:
                break

            files.extend(page_files)

            if len(page_files) < per_page:
                break

            page += 1

        logger.info(f"Found {len(files)} changed files")
        return files

    def get_file_patches(self, owner: str, repo: str, pr_number: int) -> Dict[str, str]:
        """Get per-file patches keyed by filename (files without a patch are skipped)."""
        return {
            f['filename']: f['patch']
            for f in self.get_pull_request_files(owner, repo, pr_number)
            if f.get('patch')
        }

    def get_file_content(self, owner: str, repo: str, path: str, ref: Optional[str] = None) -> str:
        """
        Get decoded content of a file.

        Args:
            owner: Repository owner
            repo: Repository name
            path: File path within the repository
            ref: Optional commit SHA or branch

        Returns:
            File content, or an empty string when it cannot be fetched
        """
        params = {'ref': ref} if ref else None

        try:
            response = self._make_request('GET', f'/repos/{owner}/{repo}/contents/{quote(path)}', params=params)
            data = response.json()
        except GitHubAPIError as e:
            logger.warning(f"Failed to get content for {path}: {e}")
            return ''

        if not isinstance(data, dict) or 'content' not in data:
            logger.warning(f"Failed to get content for {path}: not a file")
            return ''

        return base64.b64decode(data['content']).decode('utf-8', errors='replace')

    def create_review(self, owner: str, repo: str, pr_number: int, payload: Dict[str, Any]) -> Dict:
        """
        Submit a pull request review.

        Args:
            owner: Repository owner
            repo: Repository name
            pr_number: Pull request number
            payload: Review body with ``body``, ``event`` and ``comments``

        Returns:
            Created review data
        """
        logger.info(f"Submitting review with {len(payload.get('comments', []))} comments to {owner}/{repo}#{pr_number}")

        response = self._make_request('POST', f'/repos/{owner}/{repo}/pulls/{pr_number}/reviews', json=payload)
        return response.json()
