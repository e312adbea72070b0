"""
Integration tests for annotating pull requests through the GitHub client.

The client is mocked; these tests verify how the annotation pipeline uses it.
"""

from unittest.mock import Mock, call, patch

from pr_diff_annotator.api import DiffAnnotationAPI
from pr_diff_annotator.config import AppConfig
from pr_diff_annotator.github.client import GitHubClient
from pr_diff_annotator.models.review import LineComment


PR_DIFF = (
    'diff --git a/src/app.py b/src/app.py\n'
    '--- a/src/app.py\n'
    '+++ b/src/app.py\n'
    '@@ -1,2 +1,3 @@\n'
    ' import os\n'
    '+import sys\n'
    ' \n'
    'diff --git a/docs/guide.md b/docs/guide.md\n'
    '--- a/docs/guide.md\n'
    '+++ b/docs/guide.md\n'
    '@@ -1 +1 @@\n'
    '-old\n'
    '+new\n'
)


class TestPullRequestFlow:
    """Test DiffAnnotationAPI against a mocked GitHub client."""

    def setup_method(self):
        """Set up test fixtures."""
        config = AppConfig()
        config.filter.exclude_patterns = ['docs/**']
        self.api = DiffAnnotationAPI(config=config)

        self.client = Mock(spec=GitHubClient)
        self.client.get_pull_request.return_value = {'number': 7, 'head': {'sha': 'abc123'}}
        self.client.get_pull_request_diff.return_value = PR_DIFF
        self.client.get_file_content.return_value = "import os\nimport sys\n\n"
        self.client.get_file_patches.return_value = {
            'src/app.py': '@@ -1,2 +1,3 @@\n import os\n+import sys\n ',
            'docs/guide.md': '@@ -1 +1 @@\n-old\n+new',
        }

    def test_annotate_pull_request(self):
        result = self.api.annotate_pull_request(self.client, 'owner', 'repo', 7)

        assert result.paths == ['src/app.py']
        assert result.excluded_paths == ['docs/guide.md']
        assert result.get_file('src/app.py').context == "import os\nimport sys\n"

    def test_content_fetched_only_for_included_files(self):
        self.api.annotate_pull_request(self.client, 'owner', 'repo', 7)

        assert self.client.get_file_content.call_args_list == [
            call('owner', 'repo', 'src/app.py', ref='abc123')
        ]

    def test_pull_request_diff_parsed_once(self):
        with patch.object(self.api.parser, 'parse', wraps=self.api.parser.parse) as parse:
            self.api.annotate_pull_request(self.client, 'owner', 'repo', 7)

        parse.assert_called_once_with(PR_DIFF)

    def test_anchor_pull_request_comments(self):
        comments = [
            LineComment(path='src/app.py', line=2, body='Is sys needed?'),
            LineComment(path='docs/guide.md', line=1, body='Typo'),
        ]

        result = self.api.anchor_pull_request_comments(self.client, 'owner', 'repo', 7, comments)

        assert result.payloads == [{'path': 'src/app.py', 'position': 2, 'body': 'Is sys needed?'}]
        assert [d.comment.path for d in result.dropped] == ['docs/guide.md']
        self.client.get_file_patches.assert_called_once_with('owner', 'repo', 7)
