"""
Reader-specific data models

Type-safe structures passed between the reader components and returned to
callers.
"""

import re
from enum import Enum
from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True)
class SourcePosition:
    """
    Location in the input, for diagnostics

    Attributes:
        name: Display name of the source (a path, or a dummy like "(string)")
        line_number: 1-based number of the last line read from that source
    """
    name: str
    line_number: int

    def __str__(self) -> str:
        return f"{self.name}:{self.line_number}"


class CommentKind(Enum):
    """Which comment syntax, if any, starts earliest on a line"""
    NONE = "none"
    LINE = "line"      # single-line comment: truncate
    BLOCK = "block"    # multi-line comment: strip up to the end marker


@dataclass(frozen=True)
class CommentMatch:
    """
    Result of locating the earliest comment on a line

    Returned by CommentFilter.comment_locate(). For CommentKind.NONE the
    offset is -1 and match is None.

    Attributes:
        kind: Which comment syntax won
        offset: Character offset where the comment starts
        match: The regex match of the comment start
    """
    kind: CommentKind
    offset: int = -1
    match: Optional[re.Match[str]] = None


NO_COMMENT = CommentMatch(CommentKind.NONE)


@dataclass(frozen=True)
class FilterState:
    """
    Lexical mode carried from one line to the next

    Every filtering call takes a FilterState and returns the next one; the
    comment filter keeps no mode of its own.

    Attributes:
        in_fence: Inside a fenced code block
        comment_open: Where the currently open multi-line comment began, or
                      None when no multi-line comment is open
    """
    in_fence: bool = False
    comment_open: Optional[SourcePosition] = None

    def fence_toggle(self) -> 'FilterState':
        return replace(self, in_fence=not self.in_fence)

    def comment_opened(self, position: SourcePosition) -> 'FilterState':
        return replace(self, comment_open=position)

    def comment_closed(self) -> 'FilterState':
        return replace(self, comment_open=None)


@dataclass(frozen=True)
class FilteredLine:
    """
    Output of filtering one raw line

    Attributes:
        text: Filtered line, or None if the line was consumed entirely by
              comments and the caller should fetch another one
        state: FilterState to use for the next line
        fenced: The line lies in a fenced code block (fence markers included)
    """
    text: Optional[str]
    state: FilterState
    fenced: bool = False


@dataclass
class Entry:
    """
    One paragraph or record read by EntryReader.get_entry()

    Attributes:
        first_line: First line of the entry, with any entry-start match removed
        body: Every line of the entry, each followed by the line separator
        source_name: Source in which the entry starts
        line_number: Line number of the entry's first line
        short_entry: True for blank-line-separated entries, False for entries
                     delimited by the start/stop patterns

    Example:
        For input "alpha\\nbeta\\n\\ngamma\\n" the first entry is
        Entry(first_line="alpha", body="alpha\\nbeta\\n", source_name="(string)",
              line_number=1, short_entry=True)
    """
    first_line: str
    body: str
    source_name: str
    line_number: int
    short_entry: bool

    def description_get(self, regex: Optional[re.Pattern[str]] = None) -> str:
        """
        Describe the entry by the first part of its body matching regex

        Falls back to the first line when regex is None or does not match.
        """
        if regex is None:
            return self.first_line
        if isinstance(regex, str):
            regex = re.compile(regex)
        found = regex.search(self.body)
        if found:
            return found.group()
        return self.first_line
