"""
Line sequencing

LineSequencer is the pull engine behind EntryReader.read_line(): it takes
raw lines from the SourceStack, runs them through the CommentFilter, expands
include directives and hands out one filtered line per call, with one line
of pushback.

LineIterator adapts a LineSequencer to Python's iterator protocol. It is a
one-shot sequence: once it has raised StopIteration it keeps doing so.
"""

from typing import Optional, Tuple

from ..models.errors import PushbackError
from ..models.reader import FilterState, SourcePosition
from .comments import CommentFilter
from .includes import IncludeResolver
from .log import LOG
from .sources import SourceStack


class LineSequencer:
    """
    Single-pass, forward-only sequence of filtered, include-expanded lines

    Attributes:
        stack: Open sources, innermost include first
        comments: Comment filter applied to every raw line
        includes: Include directive resolver
        state: FilterState after the most recently filtered line
        line_fenced: Whether the most recently delivered line is part of a
                     fenced code block
    """

    def __init__(self, stack: SourceStack, comments: CommentFilter, includes: IncludeResolver) -> None:
        self.stack = stack
        self.comments = comments
        self.includes = includes
        self.state = FilterState()
        self.line_fenced = False
        self.pushback: Optional[Tuple[str, bool]] = None

    def read_line(self) -> Optional[str]:
        """
        Next filtered line, with comments removed and includes expanded

        A line that is entirely comment is skipped, not returned as a blank
        line. Include directive lines are never returned.

        Returns:
            The line without terminator, or None when input is exhausted
            (and on every call after that)
        """
        if self.pushback is not None:
            line, self.line_fenced = self.pushback
            self.pushback = None
            return line

        while True:
            raw = self.stack.rawLine_next()
            if raw is None:
                self.line_fenced = False
                return None

            filtered = self.comments.line_filter(raw, self.state, self.stack.rawLine_next, self.stack.position)
            self.state = filtered.state
            if filtered.text is None:
                continue

            if self.includes.include_resolve(filtered.text, self.stack):
                continue

            self.line_fenced = filtered.fenced
            return filtered.text

    def putback(self, line: str) -> None:
        """
        Return a line to the input; the next read_line() delivers it

        Raises:
            PushbackError: If a line is already waiting
        """
        if self.pushback is not None:
            raise PushbackError(
                f"Cannot put back {line!r} because {self.pushback[0]!r} is already put back"
            )
        LOG(f"Put back {line!r}", level=3)
        self.pushback = (line, self.line_fenced)

    def current_position(self) -> SourcePosition:
        """
        Source name and line number of the innermost open source

        Raises:
            ExhaustedInputError: After all input has been consumed
        """
        return self.stack.position()


class LineIterator:
    """
    Iterator over the lines of a LineSequencer

    Not restartable: iterating again continues where the previous loop
    stopped, and an exhausted iterator stays exhausted.
    """

    def __init__(self, sequencer: LineSequencer) -> None:
        self.sequencer = sequencer
        self.exhausted = False

    def __iter__(self) -> "LineIterator":
        return self

    def __next__(self) -> str:
        if self.exhausted:
            raise StopIteration
        line = self.sequencer.read_line()
        if line is None:
            self.exhausted = True
            raise StopIteration
        return line
