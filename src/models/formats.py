"""
Comment and entry format configuration

CommentFormat says which text is a comment; EntryFormat says how lines are
grouped into entries. Both are immutable and validated on construction, so a
reader never starts with a configuration it cannot honour.

Patterns may be given as strings or as compiled ``re.Pattern`` objects.

Example:
    >>> fmt = CommentFormat(r"#.*", r"<!--", r"-->")
    >>> fmt.has_multiline
    True
    >>> EntryFormat(start=r"^@entry (.*)$").stop.pattern
    '(?!)'
"""

import re
from dataclasses import dataclass, field
from typing import Optional, Union

from .errors import ConfigurationError

PatternLike = Union[str, re.Pattern[str], None]

# Matches nothing, anywhere: the default entry stop pattern
NEVER_MATCHES: re.Pattern[str] = re.compile(r"(?!)")


def pattern_compile(value: PatternLike, role: str, groups: int = 0) -> Optional[re.Pattern[str]]:
    """
    Compile a user-supplied pattern, reporting problems as ConfigurationError

    Args:
        value: Pattern string, compiled pattern, or None
        role: Human-readable name of the pattern for error messages
        groups: Minimum number of capturing groups the pattern must define

    Returns:
        Compiled pattern, or None if value is None
    """
    if value is None:
        return None
    if isinstance(value, str):
        try:
            compiled = re.compile(value)
        except re.error as e:
            raise ConfigurationError(f"Malformed {role} regex {value!r}: {e}") from e
    elif isinstance(value, re.Pattern):
        compiled = value
    else:
        raise ConfigurationError(f"{role} must be a string or compiled regex, not {type(value).__name__}")

    if compiled.groups < groups:
        raise ConfigurationError(
            f"{role} regex {compiled.pattern!r} must define at least {groups} capturing group(s)"
        )
    return compiled


def nonEmpty_require(pattern: Optional[re.Pattern[str]], role: str) -> None:
    """Reject comment patterns that match the empty string in full

    Zero-width matches inside a line are caught when the line is filtered.
    """
    if pattern is not None and pattern.fullmatch("") is not None:
        raise ConfigurationError(f"{role} regex {pattern.pattern!r} matches the empty string")


@dataclass(frozen=True)
class CommentFormat:
    """
    Which text counts as a comment

    Attributes:
        single_line: Pattern starting a comment that runs to end of line
        multiline_start: Pattern opening a comment that may span lines
        multiline_end: Pattern closing a multi-line comment

    The multi-line patterns are both present or both absent.
    """
    single_line: PatternLike = None
    multiline_start: PatternLike = None
    multiline_end: PatternLike = None

    def __post_init__(self) -> None:
        single = pattern_compile(self.single_line, "single-line comment")
        start = pattern_compile(self.multiline_start, "multi-line comment start")
        end = pattern_compile(self.multiline_end, "multi-line comment end")

        if (start is None) != (end is None):
            raise ConfigurationError(
                "Multi-line comment start and end patterns must be given together"
            )
        nonEmpty_require(single, "single-line comment")
        nonEmpty_require(start, "multi-line comment start")
        nonEmpty_require(end, "multi-line comment end")

        # frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, "single_line", single)
        object.__setattr__(self, "multiline_start", start)
        object.__setattr__(self, "multiline_end", end)

    @property
    def enabled(self) -> bool:
        """True if any comment syntax is configured"""
        return self.single_line is not None or self.multiline_start is not None

    @property
    def has_multiline(self) -> bool:
        return self.multiline_start is not None


@dataclass(frozen=True)
class EntryFormat:
    """
    How lines are grouped into entries

    Attributes:
        start: Pattern whose match on an entry's first line makes it a long
               entry. Group 1, if present, replaces the match in the first line.
        stop: Pattern ending a long entry (the matching line is consumed).
              Defaults to a pattern that never matches.
        two_blank_lines: Short entries are separated by two consecutive blank
                         lines instead of one
        fenced_code_blocks: Recognise fenced code blocks, inside which comments
                            are kept and blank lines do not separate entries
    """
    start: PatternLike = None
    stop: PatternLike = None
    two_blank_lines: bool = False
    fenced_code_blocks: bool = False
    fence_marker: Optional[str] = field(default=None)

    def __post_init__(self) -> None:
        start = pattern_compile(self.start, "entry start")
        stop = pattern_compile(self.stop, "entry stop")

        if start is None and stop is not None:
            raise ConfigurationError("Entry stop regex given without an entry start regex")
        if self.fence_marker is not None and not self.fence_marker:
            raise ConfigurationError("Fence marker must not be empty")

        object.__setattr__(self, "start", start)
        object.__setattr__(self, "stop", NEVER_MATCHES if stop is None else stop)


# Common comment formats
CommentFormat.NONE = CommentFormat()
CommentFormat.SHELL = CommentFormat(r"#.*")
CommentFormat.SHELL_AT_START_OF_LINE = CommentFormat(r"^#.*")
CommentFormat.TEX = CommentFormat(r"%.*")
CommentFormat.TEX_AT_START_OF_LINE = CommentFormat(r"^%.*")
CommentFormat.C = CommentFormat(r"//.*", r"/\*", r"\*/")
CommentFormat.HTML = CommentFormat(None, r"<!--", r"-->")
CommentFormat.SHELL_AND_HTML = CommentFormat(r"#.*", r"<!--", r"-->")

# Common entry formats
EntryFormat.DEFAULT = EntryFormat()
EntryFormat.TWO_BLANK_LINES = EntryFormat(two_blank_lines=True)
EntryFormat.MARKDOWN = EntryFormat(fenced_code_blocks=True)
