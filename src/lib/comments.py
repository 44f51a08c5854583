"""
Comment stripping and fenced code blocks

CommentFilter turns one raw line into the line a reader should see:
single-line comments are truncated, multi-line comments are cut out (pulling
further raw lines until the end marker is found), and lines inside a fenced
code block pass through untouched.

Precedence is decided in one place, comment_locate(): whichever comment
syntax matches earliest on the line wins, and a tie is an error because the
configuration cannot say which one was meant.

The filter holds no lexical mode of its own. The caller passes a FilterState
in and receives the next FilterState back with the filtered text.

Example:
    >>> f = CommentFilter(CommentFormat(r"#.*", r"/\\*", r"\\*/"))
    >>> f.line_filter("a /* b */ c # d", FilterState(), lambda: None).text
    'a  c '
"""

import re
from typing import Callable, Optional

from ..models.errors import AmbiguousCommentError, ConfigurationError, UnterminatedCommentError
from ..models.formats import CommentFormat
from ..models.reader import (
    CommentKind,
    CommentMatch,
    FilteredLine,
    FilterState,
    NO_COMMENT,
    SourcePosition,
)
from .log import LOG

RawLineSupplier = Callable[[], Optional[str]]
PositionSupplier = Callable[[], SourcePosition]


def emptyMatch_reject(match: Optional[re.Match[str]], role: str, line: str) -> None:
    """Zero-width comment matches would strip nothing and never advance"""
    if match is not None and match.start() == match.end():
        raise ConfigurationError(
            f"{role} regex {match.re.pattern!r} matched no characters in {line!r}"
        )


class CommentFilter:
    """
    Removes comments from lines according to a CommentFormat

    Attributes:
        format: Comment syntax to strip
        fence_marker: Marker opening and closing fenced code blocks, or None
                      when fenced code blocks are not recognised
    """

    def __init__(self, comment_format: Optional[CommentFormat] = None, fence_marker: Optional[str] = None) -> None:
        self.format = comment_format if comment_format is not None else CommentFormat.NONE
        self.fence_marker = fence_marker

    def fence_is(self, line: str) -> bool:
        """True if line opens or closes a fenced code block"""
        return self.fence_marker is not None and line.lstrip().startswith(self.fence_marker)

    def comment_locate(self, line: str, position: Optional[SourcePosition] = None) -> CommentMatch:
        """
        Find the earliest comment start on a line

        Args:
            line: Text to search
            position: Where the line came from, for error messages

        Returns:
            CommentMatch of kind NONE, LINE or BLOCK

        Raises:
            AmbiguousCommentError: If both comment syntaxes start at the same offset
            ConfigurationError: If a comment pattern matches zero characters
        """
        single = self.format.single_line.search(line) if self.format.single_line else None
        block = self.format.multiline_start.search(line) if self.format.multiline_start else None
        emptyMatch_reject(single, "single-line comment", line)
        emptyMatch_reject(block, "multi-line comment start", line)

        if single is None and block is None:
            return NO_COMMENT
        if block is None or (single is not None and single.start() < block.start()):
            return CommentMatch(CommentKind.LINE, single.start(), single)
        if single is None or block.start() < single.start():
            return CommentMatch(CommentKind.BLOCK, block.start(), block)
        raise AmbiguousCommentError(line, single.start(), position)

    def line_filter(
        self,
        line: str,
        state: FilterState,
        rawLine_next: RawLineSupplier,
        position_get: Optional[PositionSupplier] = None,
    ) -> FilteredLine:
        """
        Strip comments from one raw line

        Args:
            line: Raw line, without terminator
            state: Lexical mode after the previous line
            rawLine_next: Supplies further raw lines while a multi-line comment
                          is open; returns None at end of input
            position_get: Current source position, for diagnostics

        Returns:
            FilteredLine whose text is None when the line was all comment and
            another line must be fetched

        Raises:
            UnterminatedCommentError: Input ended inside a multi-line comment
            AmbiguousCommentError: Both comment syntaxes start at one offset
        """
        if self.fence_is(line):
            return FilteredLine(line, state.fence_toggle(), fenced=True)
        if state.in_fence:
            return FilteredLine(line, state, fenced=True)
        if not self.format.enabled:
            return FilteredLine(line, state)

        stripped = False
        while True:
            # a multi-line comment may have moved the stack on
            position = position_get() if position_get else None
            found = self.comment_locate(line, position)
            if found.kind is CommentKind.NONE:
                break
            stripped = True
            if found.kind is CommentKind.LINE:
                line = line[:found.offset]
                break
            # CommentKind.BLOCK
            prefix = line[:found.offset]
            state = state.comment_opened(position or SourcePosition("(unknown)", 0))
            remainder = self.commentEnd_find(line[found.match.end():], state, rawLine_next)
            state = state.comment_closed()
            line = prefix + remainder

        if stripped and not line:
            return FilteredLine(None, state)
        return FilteredLine(line, state)

    def commentEnd_find(self, text: str, state: FilterState, rawLine_next: RawLineSupplier) -> str:
        """
        Skip to the end of an open multi-line comment

        Args:
            text: Rest of the line after the comment start
            state: FilterState whose comment_open records where the comment began
            rawLine_next: Supplier of the following raw lines

        Returns:
            Text following the end marker on the line where the comment closes

        Raises:
            UnterminatedCommentError: If input runs out first
        """
        spanned = 0
        while True:
            end = self.format.multiline_end.search(text)
            emptyMatch_reject(end, "multi-line comment end", text)
            if end:
                if spanned:
                    LOG(f"Comment from {state.comment_open} spanned {spanned + 1} lines", level=3)
                return text[end.end():]
            text = rawLine_next()
            if text is None:
                raise UnterminatedCommentError(state.comment_open)
            spanned += 1
