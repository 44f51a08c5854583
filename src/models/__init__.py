"""
Models package for entryreader

Contains configuration, data structures and exception types shared by the
reader components and the command line pipeline.
"""

from .errors import (
    ConfigurationError,
    CommentSyntaxError,
    UnterminatedCommentError,
    AmbiguousCommentError,
    PushbackError,
    ExhaustedInputError,
)
from .formats import CommentFormat, EntryFormat
from .reader import Entry, SourcePosition, FilterState, CommentKind, CommentMatch
from .state import ProgramState, pipeline

__all__ = [
    "ConfigurationError",
    "CommentSyntaxError",
    "UnterminatedCommentError",
    "AmbiguousCommentError",
    "PushbackError",
    "ExhaustedInputError",
    "CommentFormat",
    "EntryFormat",
    "Entry",
    "SourcePosition",
    "FilterState",
    "CommentKind",
    "CommentMatch",
    "ProgramState",
    "pipeline",
]
