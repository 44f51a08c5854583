"""
entryreader - Line and entry reader with comments, includes and fenced blocks

Reads text files, strips comments, splices in included files and groups
lines into entries (blank-line paragraphs or start/stop delimited records).
"""

__version__ = "1.0.0"

from .lib import EntryReader, reader_open, LOG, state_connectToLogger
from .models import CommentFormat, EntryFormat, Entry

__all__ = [
    "EntryReader",
    "reader_open",
    "CommentFormat",
    "EntryFormat",
    "Entry",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
