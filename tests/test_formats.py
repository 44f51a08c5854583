"""
Format configuration tests

Tests validation of CommentFormat and EntryFormat and the predefined formats.
"""

import re

import pytest

from entryreader.models import CommentFormat, EntryFormat, ConfigurationError
from entryreader.models.formats import NEVER_MATCHES, pattern_compile


class TestCommentFormat:
    """Test CommentFormat construction"""

    def test_strings_are_compiled(self):
        fmt = CommentFormat(r"#.*", r"<!--", r"-->")
        assert isinstance(fmt.single_line, re.Pattern)
        assert fmt.multiline_start.pattern == "<!--"
        assert fmt.enabled
        assert fmt.has_multiline

    def test_compiled_patterns_accepted(self):
        single = re.compile(r";.*")
        assert CommentFormat(single).single_line is single

    def test_none_disables(self):
        assert not CommentFormat.NONE.enabled
        assert not CommentFormat.NONE.has_multiline

    def test_start_without_end(self):
        with pytest.raises(ConfigurationError, match="given together"):
            CommentFormat(None, r"<!--", None)

    def test_end_without_start(self):
        with pytest.raises(ConfigurationError, match="given together"):
            CommentFormat(None, None, r"-->")

    def test_malformed_regex(self):
        with pytest.raises(ConfigurationError, match="Malformed single-line comment regex"):
            CommentFormat(r"[unclosed")

    def test_pattern_matching_empty_string(self):
        """An unescaped /* would match everywhere"""
        with pytest.raises(ConfigurationError, match="empty string"):
            CommentFormat(None, r"/*", r"\*/")

    def test_wrong_type(self):
        with pytest.raises(ConfigurationError, match="string or compiled regex"):
            CommentFormat(42)

    def test_immutable(self):
        with pytest.raises(Exception):
            CommentFormat.SHELL.single_line = None

    def test_predefined(self):
        assert CommentFormat.SHELL.single_line.pattern == "#.*"
        assert CommentFormat.TEX_AT_START_OF_LINE.single_line.pattern == "^%.*"
        assert CommentFormat.C.multiline_end.pattern == r"\*/"
        assert CommentFormat.HTML.single_line is None


class TestEntryFormat:
    """Test EntryFormat construction"""

    def test_default(self):
        fmt = EntryFormat.DEFAULT
        assert fmt.start is None
        assert fmt.stop is NEVER_MATCHES
        assert not fmt.two_blank_lines
        assert not fmt.fenced_code_blocks

    def test_stop_defaults_to_never(self):
        fmt = EntryFormat(r"^START")
        assert fmt.stop.search("anything at all") is None

    def test_stop_without_start(self):
        with pytest.raises(ConfigurationError):
            EntryFormat(None, r"^END$")

    def test_malformed_start(self):
        with pytest.raises(ConfigurationError, match="entry start"):
            EntryFormat(r"(")

    def test_empty_fence_marker(self):
        with pytest.raises(ConfigurationError, match="Fence marker"):
            EntryFormat(fenced_code_blocks=True, fence_marker="")

    def test_predefined(self):
        assert EntryFormat.TWO_BLANK_LINES.two_blank_lines
        assert EntryFormat.MARKDOWN.fenced_code_blocks


class TestPatternCompile:
    """Test the shared pattern validator"""

    def test_none(self):
        assert pattern_compile(None, "include", groups=1) is None

    def test_group_count(self):
        assert pattern_compile(r"inc (.*)", "include", groups=1).groups == 1
        with pytest.raises(ConfigurationError, match="at least 1 capturing group"):
            pattern_compile(r"inc .*", "include", groups=1)
