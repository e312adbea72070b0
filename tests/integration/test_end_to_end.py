"""
End-to-End Integration Tests

Tests the complete annotation flow from raw diff text to a GitHub review
request body.
"""

import pytest

from pr_diff_annotator.api import DiffAnnotationAPI
from pr_diff_annotator.config import AppConfig
from pr_diff_annotator.diff.errors import MalformedDiff
from pr_diff_annotator.formatting.github import build_review_payload
from pr_diff_annotator.models.diff import ModifiedRange
from pr_diff_annotator.models.review import ReviewResponse
from pr_diff_annotator.review.context import SKIP_MARKER


TEST_TS_PATCH = (
    '@@ -1,3 +1,4 @@\n'
    ' console.log("test");\n'
    '+console.log("new line");\n'
    ' console.log("end");\n'
    ' export {};'
)

MULTI_FILE_DIFF = (
    'diff --git a/src/test.ts b/src/test.ts\n'
    'index 1111111..2222222 100644\n'
    '--- a/src/test.ts\n'
    '+++ b/src/test.ts\n'
    + TEST_TS_PATCH + '\n'
    'diff --git a/README.md b/README.md\n'
    '--- a/README.md\n'
    '+++ b/README.md\n'
    '@@ -1 +1,2 @@\n'
    ' # Project\n'
    '+More docs\n'
    'diff --git a/src/removed.ts b/src/removed.ts\n'
    'deleted file mode 100644\n'
    '--- a/src/removed.ts\n'
    '+++ /dev/null\n'
    '@@ -1,2 +0,0 @@\n'
    '-export const a = 1;\n'
    '-export const b = 2;\n'
    'diff --git a/src/broken.ts b/src/broken.ts\n'
    '--- a/src/broken.ts\n'
    '+++ b/src/broken.ts\n'
    '@@ -x +y @@\n'
    '+oops\n'
    'diff --git a/package.json b/package.json\n'
    '--- a/package.json\n'
    '+++ b/package.json\n'
    '@@ -2 +2 @@\n'
    '-  "version": "1.0.0"\n'
    '+  "version": "1.1.0"\n'
)

TEST_TS_CONTENT = "\n".join(
    ['console.log("test");', 'console.log("new line");', 'console.log("end");', 'export {};']
    + [f'export const v{i} = {i};' for i in range(1, 21)]
) + "\n"


class TestEndToEndFlow:
    """Test complete end-to-end annotation flow."""

    def setup_method(self):
        """Set up test fixtures."""
        self.config = AppConfig()
        self.config.filter.exclude_patterns = ['**/*.md', '**/*.json']
        self.config.context.margin = 2
        self.api = DiffAnnotationAPI(config=self.config)

    def test_annotate_multi_file_diff(self):
        """Test that filtering, error isolation and range extraction work together."""
        result = self.api.annotate(MULTI_FILE_DIFF)

        assert result.paths == ['src/test.ts']
        # Deleted files are reported under their old path
        assert result.excluded_paths == ['README.md', 'src/removed.ts', 'package.json']
        assert len(result.errors) == 1
        assert isinstance(result.errors[0], MalformedDiff)
        assert result.errors[0].path == 'src/broken.ts'

        annotation = result.get_file('src/test.ts')
        assert annotation.modified_ranges == [ModifiedRange(2, 3)]
        assert '+2 console.log("new line");' in annotation.annotated_diff
        assert annotation.context is None
        assert result.processing_time >= 0

    def test_annotate_with_file_content(self):
        result = self.api.annotate(MULTI_FILE_DIFF, {'src/test.ts': TEST_TS_CONTENT})

        context = result.get_file('src/test.ts').context.split("\n")

        # Line 2 with a margin of 2 keeps lines 1..4
        assert context[:4] == ['console.log("test");', 'console.log("new line");', 'console.log("end");', 'export {};']
        assert context[4:] == [SKIP_MARKER]

    def test_anchor_model_review(self):
        """Test the flow from a model response to a review request body."""
        response = ReviewResponse.model_validate_json(
            '{"summary": "One nit", "suggestedAction": "comment", "confidence": 70, "comments": ['
            '{"path": "src/test.ts", "line": 2, "comment": "Remove the debug log"},'
            '{"path": "src/test.ts", "line": 40, "comment": "Not part of the diff"},'
            '{"path": "README.md", "line": 2, "comment": "Excluded file"}'
            ']}'
        )

        anchoring = self.api.anchor_comments(response.comments, {'src/test.ts': TEST_TS_PATCH})
        payload = build_review_payload(response.summary, anchoring.anchored, response.suggested_action)

        assert payload == {
            'body': 'One nit',
            'event': 'COMMENT',
            'comments': [{'path': 'src/test.ts', 'position': 2, 'body': 'Remove the debug log'}],
        }
        assert sorted(d.comment.line for d in anchoring.dropped) == [2, 40]

    def test_empty_diff(self):
        result = self.api.annotate('')

        assert result.files == []
        assert result.excluded_paths == []
        assert result.errors == []

    def test_invalid_configuration_rejected(self):
        config = AppConfig()
        config.filter.exclude_patterns = ['{src,lib/**']

        with pytest.raises(ValueError):
            DiffAnnotationAPI(config=config)
