"""
Exception types raised by the reader

Configuration mistakes are ValueErrors, malformed comment structure in the
input is a SyntaxError (like any other parse error), and misuse of the
reader's one-line pushback or position queries is a RuntimeError.
"""

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .reader import SourcePosition


class ConfigurationError(ValueError):
    """
    Invalid reader configuration

    Raised when a pattern does not compile, when an entry stop pattern is
    given without a start pattern, when a multi-line comment start is given
    without an end, or when an include pattern has no usable capture group.
    """


class CommentSyntaxError(SyntaxError):
    """Base class for malformed comments found while reading input"""


class UnterminatedCommentError(CommentSyntaxError):
    """
    End of input reached inside a multi-line comment

    Attributes:
        position: Source name and line number where the comment was opened
    """

    def __init__(self, position: 'SourcePosition') -> None:
        self.position = position
        super().__init__(
            f"Unterminated multi-line comment starting at {position.name}:{position.line_number}"
        )


class AmbiguousCommentError(CommentSyntaxError):
    """
    Single-line and multi-line comment markers start at the same offset

    Attributes:
        line: The offending line text
        offset: Character offset at which both markers matched
    """

    def __init__(self, line: str, offset: int, position: Optional['SourcePosition'] = None) -> None:
        self.line = line
        self.offset = offset
        where = f" at {position.name}:{position.line_number}" if position else ""
        super().__init__(
            f"Single-line and multi-line comments both start at offset {offset}{where}: {line!r}"
        )


class PushbackError(RuntimeError):
    """A line was put back while another one was still pending"""


class ExhaustedInputError(RuntimeError):
    """Source name or line number requested after all input was consumed"""
