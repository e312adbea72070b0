"""
Unit tests for glob-based path filtering.
"""

import pytest

from pr_diff_annotator.diff.errors import InvalidGlobPattern
from pr_diff_annotator.diff.filter import PathFilter, parse_pattern_list, translate_glob
from pr_diff_annotator.models.diff import DEV_NULL, DiffFile


def make_file(path: str) -> DiffFile:
    return DiffFile(path=path)


class TestPatternList:
    """Tests for comma-separated pattern parsing."""

    def test_split_and_trim(self):
        assert parse_pattern_list('**/*.md, **/*.json ,') == ['**/*.md', '**/*.json']

    def test_empty(self):
        assert parse_pattern_list('') == []
        assert parse_pattern_list(' , ') == []

    def test_commas_inside_braces_are_kept(self):
        assert parse_pattern_list('**/*.{md,json}, *.lock') == ['**/*.{md,json}', '*.lock']

    def test_escaped_comma_is_kept(self):
        assert parse_pattern_list('a\\,b,c') == ['a\\,b', 'c']

    def test_brace_patterns_from_env(self, monkeypatch):
        from pr_diff_annotator.config import AppConfig

        monkeypatch.setenv('EXCLUDE_PATTERNS', '**/*.{md,json}, *.lock')
        patterns = AppConfig.from_env().filter.exclude_patterns
        path_filter = PathFilter(patterns)

        assert patterns == ['**/*.{md,json}', '*.lock']
        assert path_filter.is_excluded('docs/guide.md')
        assert path_filter.is_excluded('package.json')
        assert path_filter.is_excluded('yarn.lock')
        assert not path_filter.is_excluded('src/main.ts')


class TestPathFilter:
    """Unit tests for PathFilter class."""

    def test_excludes_markdown_anywhere(self):
        """Test that ``**/*.md`` matches at any depth, including the root."""
        path_filter = PathFilter(['**/*.md'])

        assert path_filter.is_excluded('README.md')
        assert path_filter.is_excluded('docs/guide/intro.md')
        assert not path_filter.is_excluded('src/main.ts')

    def test_dot_directories_are_not_special(self):
        path_filter = PathFilter(['**/*.md'])

        assert path_filter.is_excluded('.github/notes.md')
        assert path_filter.is_excluded('.changes.md')

    def test_filter_keeps_order(self):
        """Test filtering a list of parsed files."""
        path_filter = PathFilter.from_string('**/*.md,**/*.json')
        files = [make_file('src/main.ts'), make_file('README.md'), make_file('package.json'), make_file('src/util.ts')]

        result = path_filter.filter(files)

        assert [f.path for f in result] == ['src/main.ts', 'src/util.ts']

    def test_dev_null_always_excluded(self):
        """Test that deleted files are excluded even without patterns."""
        assert PathFilter().is_excluded(DEV_NULL)
        assert PathFilter(['*.py']).filter([make_file(DEV_NULL)]) == []

    def test_empty_pattern_set_excludes_nothing(self):
        files = [make_file('a.py'), make_file('b/c.md')]
        assert PathFilter([]).filter(files) == files

    def test_single_star_stays_in_segment(self):
        """Test that ``*`` does not cross directory separators."""
        path_filter = PathFilter(['*.json'])

        assert path_filter.is_excluded('package.json')
        assert not path_filter.is_excluded('config/app.json')

    def test_directory_globstar(self):
        path_filter = PathFilter(['src/**'])

        assert path_filter.is_excluded('src/a/b.py')
        assert not path_filter.is_excluded('lib/src.py')

    def test_globstar_in_middle(self):
        path_filter = PathFilter(['a/**/b.py'])

        assert path_filter.is_excluded('a/b.py')
        assert path_filter.is_excluded('a/x/y/b.py')
        assert not path_filter.is_excluded('a/x/c.py')

    def test_question_mark(self):
        path_filter = PathFilter(['file?.txt'])

        assert path_filter.is_excluded('file1.txt')
        assert not path_filter.is_excluded('file10.txt')

    def test_brace_expansion(self):
        path_filter = PathFilter(['**/*.{js,ts}'])

        assert path_filter.is_excluded('a/b.js')
        assert path_filter.is_excluded('c.ts')
        assert not path_filter.is_excluded('d.py')

    def test_character_classes(self):
        assert PathFilter(['[abc].py']).is_excluded('a.py')
        assert not PathFilter(['[abc].py']).is_excluded('d.py')
        assert PathFilter(['[!abc].py']).is_excluded('d.py')
        assert not PathFilter(['[!abc].py']).is_excluded('a.py')

    def test_case_sensitive(self):
        assert not PathFilter(['**/*.MD']).is_excluded('README.md')

    def test_escaped_characters(self):
        path_filter = PathFilter(['docs/\\*.txt'])

        assert path_filter.is_excluded('docs/*.txt')
        assert not path_filter.is_excluded('docs/a.txt')

    def test_regex_characters_are_literal(self):
        path_filter = PathFilter(['build+(1).log'])

        assert path_filter.is_excluded('build+(1).log')
        assert not path_filter.is_excluded('buildd(1)xlog')

    @pytest.mark.parametrize('pattern', ['', 'src/[abc', '{a,b', 'a}', 'foo\\', '[z-a].py'])
    def test_invalid_patterns_fail_at_construction(self, pattern):
        """Test that malformed patterns raise InvalidGlobPattern."""
        with pytest.raises(InvalidGlobPattern) as exc_info:
            PathFilter(['**/*.md', pattern])

        assert exc_info.value.pattern == pattern

    def test_translate_globstar(self):
        assert translate_glob('**') == '.*'
        assert translate_glob('**/x') == '(?:[^/]*/)*x'
